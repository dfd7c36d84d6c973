"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.ticketing.app.command import (
    check_in_ticket_use_case,
    create_payment_intent_use_case,
    reconcile_payment_webhook_use_case,
    register_attendee_use_case,
    send_event_reminder_use_case,
    simulate_payment_use_case,
)
from src.service.ticketing.app.query import check_in_eligibility_use_case


WIRE_MODULES: list[ModuleType] = [
    register_attendee_use_case,
    create_payment_intent_use_case,
    reconcile_payment_webhook_use_case,
    check_in_ticket_use_case,
    send_event_reminder_use_case,
    simulate_payment_use_case,
    check_in_eligibility_use_case,
]
