from .interfaces import (
    IBillingEventRepository,
    ISubscriptionRepository,
)

__all__ = [
    "IBillingEventRepository",
    "ISubscriptionRepository",
]
