from abc import abstractmethod
from typing import List

from src.core.database.interface import IRepository
from src.modules.reports.models.report import Report


class IReportRepository(IRepository[Report]):
    @abstractmethod
    def find_recent_by_user(self, user_id: str, limit: int = 5) -> List[Report]:
        """Most recent reports first."""
        pass
