"""Application services."""
from .commission_service import CommissionAccrual
from .discount_engine import DiscountCalculationResult, DiscountEngine, PricedLine, evaluate_discounts
from .ledger_poster import LedgerPoster
from .notification_scheduler import NotificationScheduler
from .order_service import OrderApplicationService
from .payment_service import PaymentService
from .template_renderer import TemplateRenderer
from .template_service import TemplateService

__all__ = [
    "CommissionAccrual",
    "DiscountCalculationResult",
    "DiscountEngine",
    "LedgerPoster",
    "NotificationScheduler",
    "OrderApplicationService",
    "PaymentService",
    "PricedLine",
    "TemplateRenderer",
    "TemplateService",
    "evaluate_discounts",
]
