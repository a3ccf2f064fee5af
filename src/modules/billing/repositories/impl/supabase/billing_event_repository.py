from typing import Any, Dict, Optional

from src.core.database.supabase_repository import SupabaseRepository
from src.core.utils import get_logger
from src.modules.billing.exceptions import BillingRepositoryError
from src.modules.billing.models.billing_event import BillingEvent
from src.modules.billing.repositories.interfaces import IBillingEventRepository

logger = get_logger(__name__)


class SupabaseBillingEventRepository(SupabaseRepository[BillingEvent], IBillingEventRepository):
    def __init__(self, client):
        super().__init__(client, "billing_events", BillingEvent, primary_key="event_id")

    def exists(self, event_id: str) -> bool:
        try:
            result = (
                self.client.table(self.table_name)
                .select("event_id")
                .eq("event_id", event_id)
                .limit(1)
                .execute()
            )
            return bool(result.data)
        except Exception as e:
            logger.error("billing_event_lookup_failed", event_id=event_id, error=str(e))
            raise BillingRepositoryError(f"Failed to look up billing event {event_id}", original_error=e)

    def create(self, data: Dict[str, Any]) -> Optional[BillingEvent]:
        try:
            return super().create(data)
        except Exception as e:
            logger.error("billing_event_create_failed", event_id=data.get("event_id"), error=str(e))
            raise BillingRepositoryError("Failed to record billing event", original_error=e)
