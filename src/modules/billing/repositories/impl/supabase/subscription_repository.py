from datetime import datetime
from typing import Any, Dict, Optional

from postgrest.exceptions import APIError

from src.core.database.supabase_repository import SupabaseRepository, to_payload
from src.core.utils import get_logger
from src.modules.billing.exceptions import BillingRepositoryError
from src.modules.billing.models.subscription import Subscription
from src.modules.billing.repositories.interfaces import ISubscriptionRepository

logger = get_logger(__name__)

# PostgREST status for ".single()" matching zero rows
NO_ROWS_CODE = "PGRST116"


class SupabaseSubscriptionRepository(SupabaseRepository[Subscription], ISubscriptionRepository):
    def __init__(self, client):
        super().__init__(client, "user_subscriptions", Subscription, primary_key="id")

    def find_by_user(self, user_id: str) -> Optional[Subscription]:
        try:
            result = (
                self.client.table(self.table_name)
                .select("*")
                .eq("user_id", user_id)
                .single()
                .execute()
            )
        except APIError as e:
            if e.code == NO_ROWS_CODE:
                return None
            logger.error("find_by_user_failed", user_id=user_id, code=e.code, error=str(e))
            raise BillingRepositoryError(f"Failed to find subscription for user {user_id}", original_error=e)
        except Exception as e:
            logger.error("find_by_user_failed", user_id=user_id, error=str(e))
            raise BillingRepositoryError(f"Failed to find subscription for user {user_id}", original_error=e)

        return self.model_class(**result.data)

    def create_if_absent(self, data: Dict[str, Any]) -> Optional[Subscription]:
        try:
            result = (
                self.client.table(self.table_name)
                .upsert(to_payload(data), on_conflict="user_id", ignore_duplicates=True)
                .execute()
            )
        except Exception as e:
            logger.error("create_subscription_failed", user_id=data.get("user_id"), error=str(e))
            raise BillingRepositoryError("Failed to create subscription", original_error=e)

        # An ignored duplicate comes back with no rows
        if result.data:
            return self.model_class(**result.data[0])
        return None

    def reset_period(self, user_id: str, start: datetime, end: datetime) -> Optional[Subscription]:
        try:
            result = (
                self.client.table(self.table_name)
                .update(
                    to_payload(
                        {
                            "reports_used": 0,
                            "billing_period_start": start,
                            "billing_period_end": end,
                        }
                    )
                )
                .eq("user_id", user_id)
                .lt("billing_period_end", start.isoformat())
                .execute()
            )
        except Exception as e:
            logger.error("reset_period_failed", user_id=user_id, error=str(e))
            raise BillingRepositoryError(f"Failed to reset billing period for user {user_id}", original_error=e)

        if result.data:
            return self.model_class(**result.data[0])
        return None

    def upsert(self, data: Dict[str, Any]) -> Subscription:
        try:
            result = (
                self.client.table(self.table_name)
                .upsert(to_payload(data), on_conflict="user_id")
                .execute()
            )
            if result.data:
                return self.model_class(**result.data[0])
            raise ValueError("Upsert returned no rows")
        except Exception as e:
            logger.error("upsert_subscription_failed", user_id=data.get("user_id"), error=str(e))
            raise BillingRepositoryError("Failed to upsert subscription", original_error=e)

    def increment_usage(self, user_id: str) -> Optional[Subscription]:
        # PostgREST cannot express "col = col + 1", so the conditional
        # increment runs server side (migrations/001_user_subscriptions.sql)
        return self._call_usage_rpc("increment_reports_used", user_id)

    def decrement_usage(self, user_id: str) -> Optional[Subscription]:
        return self._call_usage_rpc("decrement_reports_used", user_id)

    def _call_usage_rpc(self, function_name: str, user_id: str) -> Optional[Subscription]:
        try:
            result = self.client.rpc(function_name, {"p_user_id": user_id}).execute()
        except Exception as e:
            logger.error(f"{function_name}_failed", user_id=user_id, error=str(e))
            raise BillingRepositoryError(f"Failed to update usage for user {user_id}", original_error=e)

        rows = result.data
        if isinstance(rows, dict):
            rows = [rows]
        if not rows:
            return None
        return self.model_class(**rows[0])
