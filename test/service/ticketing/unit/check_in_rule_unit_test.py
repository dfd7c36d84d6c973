from datetime import datetime, timedelta, timezone

import pytest

from src.service.ticketing.domain.check_in_rule import assert_admissible
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.ticketing_error import (
    AlreadyCheckedInError,
    EventEndedError,
    PaymentPendingError,
    TicketCancelledError,
    TooEarlyError,
)
from src.service.ticketing.domain.value_object.check_in_meta import CheckInMeta
from src.service.ticketing.domain.value_object.check_in_window import CheckInWindow
from test.service.ticketing.fakes import TicketingStore


START = datetime(2026, 6, 1, 10, 0, tzinfo=timezone.utc)


@pytest.fixture
def seeded(store: TicketingStore):
    event = store.add_event(start_date=START, end_date=START + timedelta(hours=8))
    ticket_type = store.add_ticket_type(event=event)
    attendee = store.add_attendee()
    return event, ticket_type, attendee


@pytest.mark.unit
class TestAssertAdmissible:
    def test_status_is_checked_before_time(
        self, store: TicketingStore, seeded, window: CheckInWindow
    ) -> None:
        # Arrange - pending ticket, and far too early
        event, ticket_type, attendee = seeded
        ticket = store.add_ticket(
            ticket_type=ticket_type, attendee=attendee, status=TicketStatus.PENDING
        )

        # Act & Assert - status rule wins
        with pytest.raises(PaymentPendingError):
            assert_admissible(
                ticket=ticket,
                attendee=attendee,
                event=event,
                window=window,
                now=START - timedelta(days=3),
            )

    def test_cancelled(self, store: TicketingStore, seeded, window: CheckInWindow) -> None:
        event, ticket_type, attendee = seeded
        ticket = store.add_ticket(
            ticket_type=ticket_type, attendee=attendee, status=TicketStatus.CANCELLED
        )

        with pytest.raises(TicketCancelledError):
            assert_admissible(ticket=ticket, attendee=attendee, event=event, window=window, now=START)

    def test_used__reports_original_check_in(
        self, store: TicketingStore, seeded, window: CheckInWindow
    ) -> None:
        event, ticket_type, attendee = seeded
        first = START - timedelta(minutes=30)
        ticket = store.add_ticket(
            ticket_type=ticket_type,
            attendee=attendee,
            status=TicketStatus.USED,
            checked_in_at=first,
            check_in_meta=CheckInMeta(gate_id='east-2', operator_id='op-9'),
        )

        with pytest.raises(AlreadyCheckedInError) as exc_info:
            assert_admissible(ticket=ticket, attendee=attendee, event=event, window=window, now=START)

        assert exc_info.value.checked_in_at == first
        assert exc_info.value.details['attendee'] == {
            'name': 'Ada Lovelace',
            'email': 'ada@example.com',
        }
        assert exc_info.value.details['gate_id'] == 'east-2'

    @pytest.mark.parametrize(
        'offset,error',
        [
            (-timedelta(hours=2, seconds=1), TooEarlyError),
            (-timedelta(hours=2), None),
            (timedelta(hours=8), None),
            (timedelta(hours=8, seconds=1), EventEndedError),
        ],
    )
    def test_window_boundaries(
        self, store: TicketingStore, seeded, window: CheckInWindow, offset: timedelta, error
    ) -> None:
        event, ticket_type, attendee = seeded
        ticket = store.add_ticket(ticket_type=ticket_type, attendee=attendee)

        if error is None:
            assert_admissible(
                ticket=ticket, attendee=attendee, event=event, window=window, now=START + offset
            )
            return
        with pytest.raises(error):
            assert_admissible(
                ticket=ticket, attendee=attendee, event=event, window=window, now=START + offset
            )

    def test_per_event_override(self, store: TicketingStore, window: CheckInWindow) -> None:
        # Arrange - this event opens its gates 30 minutes before start only
        event = store.add_event(start_date=START, checkin_opens_before_minutes=30)
        ticket_type = store.add_ticket_type(event=event)
        attendee = store.add_attendee()
        ticket = store.add_ticket(ticket_type=ticket_type, attendee=attendee)

        # Act & Assert
        with pytest.raises(TooEarlyError) as exc_info:
            assert_admissible(
                ticket=ticket,
                attendee=attendee,
                event=event,
                window=window,
                now=START - timedelta(hours=1),
            )
        assert exc_info.value.opens_at == START - timedelta(minutes=30)
        assert exc_info.value.event_start == START
