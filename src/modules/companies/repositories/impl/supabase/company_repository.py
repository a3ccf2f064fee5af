import re
from typing import List, Optional

from postgrest.exceptions import APIError

from src.core.database.supabase_repository import SupabaseRepository
from src.core.utils import get_logger
from src.modules.companies.exceptions import CompanyRepositoryError
from src.modules.companies.models.company import Company
from src.modules.companies.repositories.interfaces import ICompanyRepository, SEARCH_LIMIT

logger = get_logger(__name__)

# Characters with meaning inside a PostgREST or() filter
_FILTER_CHARS = re.compile(r"[,()%*]")


class SupabaseCompanyRepository(SupabaseRepository[Company], ICompanyRepository):
    def __init__(self, client):
        super().__init__(client, "companies", Company)

    def search(self, query: str, limit: int = SEARCH_LIMIT) -> List[Company]:
        term = _FILTER_CHARS.sub("", query)
        try:
            result = (
                self._table()
                .select("*")
                .or_(f"ticker.ilike.%{term}%,name.ilike.%{term}%")
                .limit(limit)
                .execute()
            )
        except Exception as e:
            raise CompanyRepositoryError("Company search failed", original_error=e)

        return [self.model_class(**item) for item in result.data]

    def find_by_ticker(self, ticker: str) -> Optional[Company]:
        try:
            result = (
                self._table()
                .select("*")
                .eq("ticker", ticker)
                .single()
                .execute()
            )
        except APIError as e:
            if e.code == "PGRST116":
                return None
            raise CompanyRepositoryError(f"Failed to load company {ticker}", original_error=e)
        except Exception as e:
            raise CompanyRepositoryError(f"Failed to load company {ticker}", original_error=e)

        return self.model_class(**result.data) if result.data else None
