"""Ticket joined with the rows the gate and the ticket page need."""

import attrs

from src.service.ticketing.domain.entity.attendee_entity import Attendee
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType


@attrs.define(frozen=True)
class TicketDetails:
    ticket: Ticket
    attendee: Attendee
    event: Event
    ticket_type: TicketType
