from typing import Any, Dict, List, Optional

from psycopg2 import sql

from src.core.database.postgres_repository import PostgresRepository
from src.core.utils import get_logger
from src.modules.reports.exceptions import ReportRepositoryError
from src.modules.reports.models.report import Report
from src.modules.reports.repositories.interfaces import IReportRepository

logger = get_logger(__name__)


class PostgresReportRepository(PostgresRepository[Report], IReportRepository):
    def __init__(self, db):
        super().__init__(db, "reports", Report)

    def create(self, data: Dict[str, Any]) -> Optional[Report]:
        try:
            return super().create(data)
        except Exception as e:
            logger.error("create_report_failed", user_id=data.get("user_id"), error=str(e))
            raise ReportRepositoryError("Failed to save report", original_error=e)

    def find_recent_by_user(self, user_id: str, limit: int = 5) -> List[Report]:
        query = sql.SQL("""
            SELECT * FROM {table}
            WHERE user_id = %s
            ORDER BY created_at DESC
            LIMIT %s
        """).format(table=self.table_identifier)

        try:
            results = self._execute_query(query, (user_id, limit), fetch_all=True)
        except Exception as e:
            logger.error("find_recent_reports_failed", user_id=user_id, error=str(e))
            raise ReportRepositoryError(f"Failed to load reports for user {user_id}", original_error=e)

        return [self.model_class(**row) for row in results]
