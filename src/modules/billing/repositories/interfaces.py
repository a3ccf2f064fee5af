from abc import abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional

from src.core.database.interface import IRepository
from src.modules.billing.models.billing_event import BillingEvent
from src.modules.billing.models.subscription import Subscription


class ISubscriptionRepository(IRepository[Subscription]):
    @abstractmethod
    def find_by_user(self, user_id: str) -> Optional[Subscription]:
        """
        Return the user's subscription, or None when no row exists.

        Any other storage failure raises BillingRepositoryError; callers rely on
        None meaning "not found" and nothing else.
        """
        pass

    @abstractmethod
    def create_if_absent(self, data: Dict[str, Any]) -> Optional[Subscription]:
        """
        Insert the row unless one already exists for data["user_id"].

        Returns None when another writer inserted it first.
        """
        pass

    @abstractmethod
    def reset_period(self, user_id: str, start: datetime, end: datetime) -> Optional[Subscription]:
        """
        Zero usage and set the period to [start, end), only while the stored
        period ended before start.

        Returns None when the row was already rolled forward (or is missing).
        """
        pass

    @abstractmethod
    def upsert(self, data: Dict[str, Any]) -> Subscription:
        """Insert or overwrite the row keyed on user_id."""
        pass

    @abstractmethod
    def increment_usage(self, user_id: str) -> Optional[Subscription]:
        """
        Atomically add one report where reports_used < reports_limit.

        Returns the updated subscription, or None when the condition did not
        hold (quota exhausted or no row).
        """
        pass

    @abstractmethod
    def decrement_usage(self, user_id: str) -> Optional[Subscription]:
        """Atomically remove one report, never going below zero."""
        pass


class IBillingEventRepository(IRepository[BillingEvent]):
    @abstractmethod
    def exists(self, event_id: str) -> bool:
        pass
