"""ORM row -> domain entity conversions shared by the repositories."""

from src.service.ticketing.domain.entity.attendee_entity import Attendee
from src.service.ticketing.domain.entity.event_entity import Event
from src.service.ticketing.domain.entity.ticket_entity import Ticket
from src.service.ticketing.domain.entity.ticket_type_entity import TicketType
from src.service.ticketing.domain.entity.transaction_entity import Transaction
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.enum.transaction_status import TransactionStatus
from src.service.ticketing.domain.value_object.check_in_meta import CheckInMeta
from src.service.ticketing.driven_adapter.model.attendee_model import AttendeeModel
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.model.ticket_type_model import TicketTypeModel
from src.service.ticketing.driven_adapter.model.transaction_model import TransactionModel


def to_event(model: EventModel) -> Event:
    return Event(
        id=model.id,
        tenant_id=model.tenant_id,
        slug=model.slug,
        title=model.title,
        type=model.type,
        start_date=model.start_date,
        end_date=model.end_date,
        location=model.location,
        timezone=model.timezone,
        status=EventStatus(model.status),
        checkin_opens_before_minutes=model.checkin_opens_before_minutes,
        checkin_closes_after_minutes=model.checkin_closes_after_minutes,
    )


def to_attendee(model: AttendeeModel) -> Attendee:
    return Attendee(
        id=model.id,
        name=model.name,
        email=model.email,
        phone=model.phone,
        company=model.company,
    )


def to_ticket_type(model: TicketTypeModel) -> TicketType:
    return TicketType(
        id=model.id,
        event_id=model.event_id,
        name=model.name,
        price=model.price,
        currency=model.currency,
        is_paid=model.is_paid,
        quantity=model.quantity,
        quantity_sold=model.quantity_sold,
        description=model.description,
        is_visible=model.is_visible,
    )


def to_ticket(model: TicketModel) -> Ticket:
    return Ticket(
        id=model.id,
        token=model.token,
        event_id=model.event_id,
        ticket_type_id=model.ticket_type_id,
        attendee_id=model.attendee_id,
        status=TicketStatus(model.status),
        capacity_held=model.capacity_held,
        qr_code=model.qr_code,
        checked_in_at=model.checked_in_at,
        check_in_meta=CheckInMeta.from_dict(model.check_in_meta),
        cancellation_reason=model.cancellation_reason,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


def to_transaction(model: TransactionModel) -> Transaction:
    return Transaction(
        id=model.id,
        ticket_id=model.ticket_id,
        amount=model.amount,
        currency=model.currency,
        status=TransactionStatus(model.status),
        payment_intent_id=model.payment_intent_id,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
