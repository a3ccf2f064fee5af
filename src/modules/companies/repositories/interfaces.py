from abc import ABC, abstractmethod
from typing import List, Optional

from src.modules.companies.models.company import Company

SEARCH_LIMIT = 10


class ICompanyRepository(ABC):
    @abstractmethod
    def search(self, query: str, limit: int = SEARCH_LIMIT) -> List[Company]:
        """Case-insensitive substring match on ticker or name."""
        pass

    @abstractmethod
    def find_by_ticker(self, ticker: str) -> Optional[Company]:
        pass
