from collections.abc import Callable
from datetime import timedelta

import pytest

from src.platform.config.core_setting import Settings
from src.service.ticketing.app.service.notification_dispatcher import NotificationDispatcher
from src.service.ticketing.app.service.payment_checkout_service import PaymentCheckoutService
from src.service.ticketing.app.service.ticket_state_machine import TicketStateMachine
from src.service.ticketing.domain.ticket_token import TokenGenerator
from src.service.ticketing.domain.value_object.check_in_window import CheckInWindow
from src.service.ticketing.driven_adapter.notification.mock_notifier_impl import MockNotifierImpl
from src.service.ticketing.driven_adapter.payment.mock_payment_gateway_impl import (
    MockPaymentGatewayImpl,
)
from test.service.ticketing.fakes import FakeUnitOfWork, StubQrRenderer, TicketingStore


@pytest.fixture
def store() -> TicketingStore:
    return TicketingStore()


@pytest.fixture
def uow(store: TicketingStore) -> FakeUnitOfWork:
    return FakeUnitOfWork(store)


@pytest.fixture
def new_uow(store: TicketingStore) -> Callable[[], FakeUnitOfWork]:
    """One unit of work per simulated request."""
    return lambda: FakeUnitOfWork(store)


@pytest.fixture
def notifier() -> MockNotifierImpl:
    return MockNotifierImpl()


@pytest.fixture
def dispatcher(notifier: MockNotifierImpl) -> NotificationDispatcher:
    # No task group attached: deliveries complete before commit() returns
    return NotificationDispatcher(notifier=notifier, max_attempts=3, backoff_seconds=0)


@pytest.fixture
def state_machine(dispatcher: NotificationDispatcher) -> TicketStateMachine:
    return TicketStateMachine(
        token_generator=TokenGenerator(),
        qr_renderer=StubQrRenderer(),
        notification_dispatcher=dispatcher,
    )


@pytest.fixture
def gateway() -> MockPaymentGatewayImpl:
    return MockPaymentGatewayImpl(settings=Settings())


@pytest.fixture
def checkout(gateway: MockPaymentGatewayImpl) -> PaymentCheckoutService:
    return PaymentCheckoutService(payment_gateway=gateway)


@pytest.fixture
def window() -> CheckInWindow:
    return CheckInWindow(opens_before_start=timedelta(hours=2))
