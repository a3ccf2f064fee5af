from typing import List, Optional

from psycopg2 import sql

from src.core.database.postgres_repository import PostgresRepository
from src.modules.companies.exceptions import CompanyRepositoryError
from src.modules.companies.models.company import Company
from src.modules.companies.repositories.interfaces import ICompanyRepository, SEARCH_LIMIT


class PostgresCompanyRepository(PostgresRepository[Company], ICompanyRepository):
    def __init__(self, db):
        super().__init__(db, "companies", Company)

    def search(self, query: str, limit: int = SEARCH_LIMIT) -> List[Company]:
        pattern = f"%{query}%"
        statement = sql.SQL("""
            SELECT * FROM {table}
            WHERE ticker ILIKE %s OR name ILIKE %s
            LIMIT %s
        """).format(table=self.table_identifier)

        try:
            results = self._execute_query(statement, (pattern, pattern, limit), fetch_all=True)
        except Exception as e:
            raise CompanyRepositoryError("Company search failed", original_error=e)

        return [self.model_class(**row) for row in results]

    def find_by_ticker(self, ticker: str) -> Optional[Company]:
        try:
            return self.find_by_id(ticker, id_column="ticker")
        except Exception as e:
            raise CompanyRepositoryError(f"Failed to load company {ticker}", original_error=e)
