from datetime import datetime
from typing import Any, Dict, Optional

from psycopg2 import sql

from src.core.database.postgres_repository import PostgresRepository
from src.core.utils import get_logger
from src.modules.billing.exceptions import BillingRepositoryError
from src.modules.billing.models.subscription import Subscription
from src.modules.billing.repositories.interfaces import ISubscriptionRepository

logger = get_logger(__name__)


class PostgresSubscriptionRepository(PostgresRepository[Subscription], ISubscriptionRepository):
    def __init__(self, db):
        super().__init__(db, "user_subscriptions", Subscription)

    def find_by_user(self, user_id: str) -> Optional[Subscription]:
        try:
            query = sql.SQL("SELECT * FROM {table} WHERE user_id = %s").format(
                table=self.table_identifier
            )
            result = self._execute_query(query, (user_id,), fetch_one=True)
        except Exception as e:
            logger.error("find_by_user_failed", user_id=user_id, error=str(e))
            raise BillingRepositoryError(f"Failed to find subscription for user {user_id}", original_error=e)

        if result:
            return self.model_class(**result)
        return None

    def create_if_absent(self, data: Dict[str, Any]) -> Optional[Subscription]:
        columns = list(data.keys())
        query = sql.SQL("""
            INSERT INTO {table} ({columns})
            VALUES ({placeholders})
            ON CONFLICT (user_id) DO NOTHING
            RETURNING *
        """).format(
            table=self.table_identifier,
            columns=sql.SQL(", ").join(map(sql.Identifier, columns)),
            placeholders=sql.SQL(", ").join(sql.Placeholder() * len(columns)),
        )

        try:
            result = self._execute_query(query, tuple(data.values()), fetch_one=True, commit=True)
        except Exception as e:
            logger.error("create_subscription_failed", user_id=data.get("user_id"), error=str(e))
            raise BillingRepositoryError("Failed to create subscription", original_error=e)

        return self._to_model(result)

    def reset_period(self, user_id: str, start: datetime, end: datetime) -> Optional[Subscription]:
        query = sql.SQL("""
            UPDATE {table}
            SET reports_used = 0,
                billing_period_start = %s,
                billing_period_end = %s,
                updated_at = NOW()
            WHERE user_id = %s AND billing_period_end < %s
            RETURNING *
        """).format(table=self.table_identifier)

        try:
            result = self._execute_query(query, (start, end, user_id, start), fetch_one=True, commit=True)
        except Exception as e:
            logger.error("reset_period_failed", user_id=user_id, error=str(e))
            raise BillingRepositoryError(f"Failed to reset billing period for user {user_id}", original_error=e)

        return self._to_model(result)

    def upsert(self, data: Dict[str, Any]) -> Subscription:
        columns = list(data.keys())
        update_columns = [col for col in columns if col not in ("id", "user_id", "created_at")]

        set_clause = sql.SQL(", ").join(
            sql.SQL("{} = EXCLUDED.{}").format(sql.Identifier(k), sql.Identifier(k))
            for k in update_columns
        )

        query = sql.SQL("""
            INSERT INTO {table} ({columns})
            VALUES ({placeholders})
            ON CONFLICT (user_id)
            DO UPDATE SET {set_clause}, updated_at = NOW()
            RETURNING *
        """).format(
            table=self.table_identifier,
            columns=sql.SQL(", ").join(map(sql.Identifier, columns)),
            placeholders=sql.SQL(", ").join(sql.Placeholder() * len(columns)),
            set_clause=set_clause,
        )

        try:
            result = self._execute_query(query, tuple(data.values()), fetch_one=True, commit=True)
        except Exception as e:
            logger.error("upsert_subscription_failed", user_id=data.get("user_id"), error=str(e))
            raise BillingRepositoryError("Failed to upsert subscription", original_error=e)

        return self.model_class(**result)

    def increment_usage(self, user_id: str) -> Optional[Subscription]:
        query = sql.SQL("""
            UPDATE {table}
            SET reports_used = reports_used + 1,
                updated_at = NOW()
            WHERE user_id = %s AND reports_used < reports_limit
            RETURNING *
        """).format(table=self.table_identifier)

        return self._apply_usage_change(query, user_id, "increment_usage_failed")

    def decrement_usage(self, user_id: str) -> Optional[Subscription]:
        query = sql.SQL("""
            UPDATE {table}
            SET reports_used = GREATEST(0, reports_used - 1),
                updated_at = NOW()
            WHERE user_id = %s
            RETURNING *
        """).format(table=self.table_identifier)

        return self._apply_usage_change(query, user_id, "decrement_usage_failed")

    def _apply_usage_change(self, query: sql.Composable, user_id: str, error_event: str) -> Optional[Subscription]:
        try:
            result = self._execute_query(query, (user_id,), fetch_one=True, commit=True)
        except Exception as e:
            logger.error(error_event, user_id=user_id, error=str(e))
            raise BillingRepositoryError(f"Failed to update usage for user {user_id}", original_error=e)

        if result:
            return self.model_class(**result)
        return None
