"""Application layer interfaces (Ports)"""

from src.service.ticketing.app.interface.i_attendee_repo import IAttendeeRepo
from src.service.ticketing.app.interface.i_capacity_ledger import ICapacityLedger
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.app.interface.i_notifier import INotifier
from src.service.ticketing.app.interface.i_payment_gateway import IPaymentGateway
from src.service.ticketing.app.interface.i_processed_webhook_event_repo import (
    IProcessedWebhookEventRepo,
)
from src.service.ticketing.app.interface.i_qr_renderer import IQrRenderer
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.app.interface.i_ticket_type_query_repo import ITicketTypeQueryRepo
from src.service.ticketing.app.interface.i_transaction_repo import ITransactionRepo

__all__ = [
    'IAttendeeRepo',
    'ICapacityLedger',
    'IEventQueryRepo',
    'INotifier',
    'IPaymentGateway',
    'IProcessedWebhookEventRepo',
    'IQrRenderer',
    'ITicketCommandRepo',
    'ITicketQueryRepo',
    'ITicketTypeQueryRepo',
    'ITransactionRepo',
]
