from .billing_event_repository import SupabaseBillingEventRepository
from .subscription_repository import SupabaseSubscriptionRepository

__all__ = [
    "SupabaseBillingEventRepository",
    "SupabaseSubscriptionRepository",
]
