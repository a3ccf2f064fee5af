from typing import List, Optional

from src.core.utils import get_logger
from src.modules.companies.exceptions import CompanyRepositoryError
from src.modules.companies.models.company import Company
from src.modules.companies.repositories.interfaces import ICompanyRepository

logger = get_logger(__name__)


class CompanyService:
    """Company lookup for the search box. Storage errors degrade to empty results."""

    def __init__(self, company_repo: ICompanyRepository):
        self.company_repo = company_repo

    def search(self, query: Optional[str]) -> List[Company]:
        query = (query or "").strip()
        if not query:
            return []

        try:
            return self.company_repo.search(query)
        except CompanyRepositoryError as e:
            logger.error("company_search_failed", query=query, error=str(e))
            return []

    def get_by_ticker(self, ticker: str) -> Optional[Company]:
        try:
            return self.company_repo.find_by_ticker(ticker.strip().upper())
        except CompanyRepositoryError as e:
            logger.error("company_fetch_failed", ticker=ticker, error=str(e))
            return None
