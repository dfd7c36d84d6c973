"""Ticketing Domain Enums"""

from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.enum.transaction_status import TransactionStatus

__all__ = ['EventStatus', 'TicketStatus', 'TransactionStatus']
