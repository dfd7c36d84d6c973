from enum import StrEnum


class TicketStatus(StrEnum):
    PENDING = 'pending'
    ISSUED = 'issued'
    CANCELLED = 'cancelled'
    USED = 'used'
