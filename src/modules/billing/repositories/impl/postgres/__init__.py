from .billing_event_repository import PostgresBillingEventRepository
from .subscription_repository import PostgresSubscriptionRepository

__all__ = [
    "PostgresBillingEventRepository",
    "PostgresSubscriptionRepository",
]
