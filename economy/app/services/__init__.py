from .unit_of_work import UnitOfWork
from .notification_service import NotificationService, LedgerEvent
from .payment_gateway import PaymentGateway, PaymentGatewayError, PaymentIntent
from .ledger_writer import LedgerWriter

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "LedgerEvent",
    "PaymentGateway",
    "PaymentGatewayError",
    "PaymentIntent",
    "LedgerWriter",
]
