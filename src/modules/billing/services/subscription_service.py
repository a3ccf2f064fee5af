from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Tuple

from src.core.utils import get_logger
from src.modules.billing.enums.plan_type import PlanType
from src.modules.billing.exceptions import BillingRepositoryError, QuotaExceededError
from src.modules.billing.models.subscription import Subscription
from src.modules.billing.repositories.interfaces import ISubscriptionRepository

logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class UsageStatus:
    can_generate: bool
    reports_used: int
    reports_limit: int
    remaining_reports: int

    @classmethod
    def from_subscription(cls, subscription: Subscription) -> "UsageStatus":
        return cls(
            can_generate=subscription.can_generate,
            reports_used=subscription.reports_used,
            reports_limit=subscription.reports_limit,
            remaining_reports=subscription.remaining_reports,
        )


class SubscriptionService:
    """
    Owns the subscription lifecycle: lazy creation, billing-period
    roll-forward, the quota gate and the Pro upgrade.

    Every handler that reads quota goes through get_current_subscription so
    the roll-forward behaves the same for all of them.
    """

    def __init__(
        self,
        subscription_repo: ISubscriptionRepository,
        free_reports_limit: int = 5,
        pro_reports_limit: int = 999,
        period_days: int = 30,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.subscription_repo = subscription_repo
        self.free_reports_limit = free_reports_limit
        self.pro_reports_limit = pro_reports_limit
        self.period_days = period_days
        self.clock = clock

    def new_period(self, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
        start = now or self.clock()
        return start, start + timedelta(days=self.period_days)

    def load_or_create(self, user_id: str) -> Subscription:
        """
        Return the user's subscription, creating a free one on first access.

        Two first requests may both miss the lookup; the insert ignores the
        duplicate and the loser reads the winner's row.

        Raises BillingRepositoryError for any lookup failure other than
        "not found", and when the default row cannot be created.
        """
        subscription = self.subscription_repo.find_by_user(user_id)
        if subscription:
            return subscription

        start, end = self.new_period()
        subscription = self.subscription_repo.create_if_absent(
            {
                "user_id": user_id,
                "plan": PlanType.FREE.value,
                "reports_used": 0,
                "reports_limit": self.free_reports_limit,
                "billing_period_start": start,
                "billing_period_end": end,
            }
        )
        if subscription:
            logger.info("subscription_created", user_id=user_id, plan=PlanType.FREE.value)
            return subscription

        subscription = self.subscription_repo.find_by_user(user_id)
        if not subscription:
            raise BillingRepositoryError(f"Failed to create subscription for user {user_id}")
        return subscription

    def roll_forward_if_expired(self, subscription: Subscription) -> Subscription:
        """
        Reset usage and start a new period once the current one has elapsed.

        The reset only applies while the stored period is still the expired
        one, so a request holding a stale copy cannot wipe usage recorded in
        the new period. It is best effort: when it cannot be persisted the
        stale subscription is returned and the request carries on with it.
        """
        now = self.clock()
        if not subscription.is_period_expired(now):
            return subscription

        start, end = self.new_period(now)
        try:
            updated = self.subscription_repo.reset_period(subscription.user_id, start, end)
            if updated is None:
                # Already rolled forward by a concurrent request
                current = self.subscription_repo.find_by_user(subscription.user_id)
                return current or subscription
        except BillingRepositoryError as e:
            logger.warning("billing_period_reset_failed", user_id=subscription.user_id, error=str(e))
            return subscription

        logger.info("billing_period_reset", user_id=subscription.user_id, period_end=end.isoformat())
        return updated

    def get_current_subscription(self, user_id: str) -> Subscription:
        return self.roll_forward_if_expired(self.load_or_create(user_id))

    def check_usage(self, user_id: str) -> UsageStatus:
        return UsageStatus.from_subscription(self.get_current_subscription(user_id))

    def reserve_report(self, user_id: str) -> Subscription:
        """
        Claim one report from the user's quota.

        The gate is checked on the current subscription first, then the claim
        is made with the repository's conditional increment so concurrent
        requests can never push reports_used past reports_limit.

        Raises QuotaExceededError when no report is left.
        """
        subscription = self.get_current_subscription(user_id)
        if not subscription.can_generate:
            raise QuotaExceededError(
                "Monthly report limit reached. Upgrade to generate more reports.",
                current=subscription.reports_used,
                limit=subscription.reports_limit,
            )

        reserved = self.subscription_repo.increment_usage(user_id)
        if reserved is None:
            # Lost the race to a concurrent request
            latest = self.subscription_repo.find_by_user(user_id) or subscription
            logger.info("report_reservation_rejected", user_id=user_id, reports_used=latest.reports_used)
            raise QuotaExceededError(
                "Monthly report limit reached. Upgrade to generate more reports.",
                current=latest.reports_used,
                limit=latest.reports_limit,
            )

        return reserved

    def release_report(self, user_id: str) -> Optional[Subscription]:
        """Give back a reservation for a report that was not delivered."""
        try:
            return self.subscription_repo.decrement_usage(user_id)
        except BillingRepositoryError as e:
            logger.error("report_release_failed", user_id=user_id, error=str(e))
            return None

    def upgrade_to_pro(self, user_id: str) -> Subscription:
        """
        Overwrite the user's subscription with Pro entitlements and a fresh
        period. No proration: remaining time in the old period is discarded.
        """
        start, end = self.new_period()
        data: Dict[str, Any] = {
            "user_id": user_id,
            "plan": PlanType.PRO.value,
            "reports_used": 0,
            "reports_limit": self.pro_reports_limit,
            "billing_period_start": start,
            "billing_period_end": end,
        }
        subscription = self.subscription_repo.upsert(data)
        logger.info("subscription_upgraded", user_id=user_id, plan=PlanType.PRO.value)
        return subscription
