from typing import Any, Dict, List, Optional

from src.core.database.supabase_repository import SupabaseRepository
from src.core.utils import get_logger
from src.modules.reports.exceptions import ReportRepositoryError
from src.modules.reports.models.report import Report
from src.modules.reports.repositories.interfaces import IReportRepository

logger = get_logger(__name__)


class SupabaseReportRepository(SupabaseRepository[Report], IReportRepository):
    def __init__(self, client):
        super().__init__(client, "reports", Report, primary_key="id")

    def create(self, data: Dict[str, Any]) -> Optional[Report]:
        try:
            return super().create(data)
        except Exception as e:
            logger.error("create_report_failed", user_id=data.get("user_id"), error=str(e))
            raise ReportRepositoryError("Failed to save report", original_error=e)

    def find_recent_by_user(self, user_id: str, limit: int = 5) -> List[Report]:
        try:
            result = (
                self.client.table(self.table_name)
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
            return [self.model_class(**item) for item in result.data]
        except Exception as e:
            logger.error("find_recent_reports_failed", user_id=user_id, error=str(e))
            raise ReportRepositoryError(f"Failed to load reports for user {user_id}", original_error=e)
