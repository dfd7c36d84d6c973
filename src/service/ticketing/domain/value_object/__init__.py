"""Ticketing Domain Value Objects"""

from src.service.ticketing.domain.value_object.check_in_meta import CheckInMeta
from src.service.ticketing.domain.value_object.check_in_window import CheckInWindow
from src.service.ticketing.domain.value_object.gateway_event import GatewayEvent, GatewayEventType
from src.service.ticketing.domain.value_object.payment_intent import PaymentIntent

__all__ = ['CheckInMeta', 'CheckInWindow', 'GatewayEvent', 'GatewayEventType', 'PaymentIntent']
