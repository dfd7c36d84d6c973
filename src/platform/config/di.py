"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.service.ticketing.app.service.notification_dispatcher import NotificationDispatcher
from src.service.ticketing.app.service.payment_checkout_service import PaymentCheckoutService
from src.service.ticketing.app.service.ticket_state_machine import TicketStateMachine
from src.service.ticketing.domain.ticket_token import TokenGenerator
from src.service.ticketing.domain.value_object.check_in_window import CheckInWindow
from src.service.ticketing.driven_adapter.notification.http_notifier_impl import HttpNotifierImpl
from src.service.ticketing.driven_adapter.notification.mock_notifier_impl import MockNotifierImpl
from src.service.ticketing.driven_adapter.payment.mock_payment_gateway_impl import (
    MockPaymentGatewayImpl,
)
from src.service.ticketing.driven_adapter.payment.stripe_payment_gateway_impl import (
    StripePaymentGatewayImpl,
)
from src.service.ticketing.driven_adapter.qr.qrcode_renderer_impl import QrcodeRendererImpl


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Stateless domain helpers
    token_generator = providers.Singleton(TokenGenerator)
    qr_renderer = providers.Singleton(QrcodeRendererImpl)
    check_in_window = providers.Singleton(
        CheckInWindow.from_minutes,
        opens_before=config_service.provided.CHECKIN_OPENS_BEFORE_START_MINUTES,
        closes_after=config_service.provided.CHECKIN_CLOSES_AFTER_END_MINUTES,
    )

    # Payment provider (PAYMENT_GATEWAY=mock|stripe)
    mock_payment_gateway = providers.Singleton(MockPaymentGatewayImpl, settings=config_service)
    stripe_payment_gateway = providers.Singleton(StripePaymentGatewayImpl, settings=config_service)
    payment_gateway = providers.Selector(
        config_service.provided.PAYMENT_GATEWAY,
        mock=mock_payment_gateway,
        stripe=stripe_payment_gateway,
    )

    # Email/SMS (NOTIFIER=mock|http)
    mock_notifier = providers.Singleton(MockNotifierImpl)
    http_notifier = providers.Singleton(HttpNotifierImpl, settings=config_service)
    notifier = providers.Selector(
        config_service.provided.NOTIFIER,
        mock=mock_notifier,
        http=http_notifier,
    )

    # Application services (stateless apart from the dispatcher's task group)
    notification_dispatcher = providers.Singleton(
        NotificationDispatcher,
        notifier=notifier,
        max_attempts=config_service.provided.NOTIFY_MAX_ATTEMPTS,
        backoff_seconds=config_service.provided.NOTIFY_RETRY_BACKOFF_SECONDS,
    )
    ticket_state_machine = providers.Singleton(
        TicketStateMachine,
        token_generator=token_generator,
        qr_renderer=qr_renderer,
        notification_dispatcher=notification_dispatcher,
    )
    payment_checkout_service = providers.Singleton(
        PaymentCheckoutService,
        payment_gateway=payment_gateway,
    )


container = Container()
