from src.modules.billing.services.subscription_service import SubscriptionService, UsageStatus
from src.modules.billing.services.stripe_service import StripeService
from src.modules.billing.services.webhook_handler_service import WebhookHandlerService

__all__ = [
    "SubscriptionService",
    "UsageStatus",
    "StripeService",
    "WebhookHandlerService",
]
