from .billing_event import BillingEvent, BillingEventCreate
from .subscription import Subscription, SubscriptionCreate, SubscriptionUpdate
