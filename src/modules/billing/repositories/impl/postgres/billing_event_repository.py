from typing import Any, Dict, Optional

from psycopg2 import sql

from src.core.database.postgres_repository import PostgresRepository
from src.core.utils import get_logger
from src.modules.billing.exceptions import BillingRepositoryError
from src.modules.billing.models.billing_event import BillingEvent
from src.modules.billing.repositories.interfaces import IBillingEventRepository

logger = get_logger(__name__)


class PostgresBillingEventRepository(PostgresRepository[BillingEvent], IBillingEventRepository):
    def __init__(self, db):
        super().__init__(db, "billing_events", BillingEvent, primary_key="event_id")

    def exists(self, event_id: str) -> bool:
        query = sql.SQL("SELECT 1 FROM {table} WHERE event_id = %s LIMIT 1").format(
            table=self.table_identifier
        )
        try:
            return self._execute_query(query, (event_id,), fetch_one=True) is not None
        except Exception as e:
            logger.error("billing_event_lookup_failed", event_id=event_id, error=str(e))
            raise BillingRepositoryError(f"Failed to look up billing event {event_id}", original_error=e)

    def create(self, data: Dict[str, Any]) -> Optional[BillingEvent]:
        try:
            return super().create(data)
        except Exception as e:
            logger.error("billing_event_create_failed", event_id=data.get("event_id"), error=str(e))
            raise BillingRepositoryError("Failed to record billing event", original_error=e)
