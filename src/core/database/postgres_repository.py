"""
PostgreSQL implementation of the Repository Pattern using raw SQL (psycopg2).
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from psycopg2 import sql
from psycopg2.extras import RealDictCursor

from src.core.utils import get_logger
from src.core.database.postgres_session import PostgresDatabase

logger = get_logger(__name__)

T = TypeVar("T")  # Pydantic Model


def _placeholders(count: int) -> sql.Composable:
    return sql.SQL(", ").join(sql.Placeholder() * count)


def _assignments(columns: List[str]) -> sql.Composable:
    return sql.SQL(", ").join(
        sql.SQL("{} = {}").format(sql.Identifier(c), sql.Placeholder()) for c in columns
    )


class PostgresRepository(Generic[T]):
    """
    Table-level CRUD over a psycopg2 pool, returning Pydantic models.

    Subclasses add table-specific queries on top of _execute_query and keep
    the same row-to-model mapping.
    """

    def __init__(
        self,
        db: PostgresDatabase,
        table_name: str,
        model_class: Type[T],
        primary_key: str = "id",
    ):
        """
        Args:
            db: PostgresDatabase pool
            table_name: Table name, optionally "schema.table"
            model_class: Pydantic model each row is mapped to
            primary_key: Column used when no explicit id column is given
        """
        self.db = db
        self.table_name = table_name
        self.model_class = model_class
        self.primary_key = primary_key
        self.table_identifier = sql.Identifier(*table_name.split(".", 1))

    def _to_model(self, row: Optional[Dict[str, Any]]) -> Optional[T]:
        return self.model_class(**row) if row else None

    def _execute_query(
        self,
        query: sql.Composable,
        params: tuple = None,
        fetch_one: bool = False,
        fetch_all: bool = False,
        commit: bool = False,
    ) -> Any:
        """Run one statement on a pooled connection; rolls back on failure."""
        with self.db.connection() as conn:
            cursor = conn.cursor(cursor_factory=RealDictCursor)
            try:
                cursor.execute(query, params)

                if fetch_one:
                    result = cursor.fetchone()
                elif fetch_all:
                    result = cursor.fetchall()
                else:
                    result = cursor.rowcount

                if commit:
                    conn.commit()
                return result

            except Exception as e:
                conn.rollback()
                logger.error("query_failed", table=self.table_name, error=str(e))
                raise
            finally:
                cursor.close()

    def create(self, data: Dict[str, Any]) -> Optional[T]:
        columns = list(data.keys())
        query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING *").format(
            self.table_identifier,
            sql.SQL(", ").join(map(sql.Identifier, columns)),
            _placeholders(len(columns)),
        )
        row = self._execute_query(query, tuple(data.values()), fetch_one=True, commit=True)
        return self._to_model(row)

    def find_by_id(self, id_value: Any, id_column: Optional[str] = None) -> Optional[T]:
        query = sql.SQL("SELECT * FROM {} WHERE {} = %s").format(
            self.table_identifier, sql.Identifier(id_column or self.primary_key)
        )
        return self._to_model(self._execute_query(query, (id_value,), fetch_one=True))

    def update(
        self,
        id_value: Union[int, str],
        data: Dict[str, Any],
        id_column: Optional[str] = None,
    ) -> Optional[T]:
        column = id_column or self.primary_key
        if not data:
            return self.find_by_id(id_value, column)

        query = sql.SQL("UPDATE {} SET {} WHERE {} = %s RETURNING *").format(
            self.table_identifier,
            _assignments(list(data.keys())),
            sql.Identifier(column),
        )
        row = self._execute_query(
            query, tuple(data.values()) + (id_value,), fetch_one=True, commit=True
        )
        return self._to_model(row)

    def find_by(self, filters: Dict[str, Any], limit: int = 100) -> List[T]:
        query = sql.SQL("SELECT * FROM {}").format(self.table_identifier)
        if filters:
            conditions = sql.SQL(" AND ").join(
                sql.SQL("{} = {}").format(sql.Identifier(k), sql.Placeholder()) for k in filters
            )
            query += sql.SQL(" WHERE {}").format(conditions)
        query += sql.SQL(" LIMIT %s")

        rows = self._execute_query(query, tuple(filters.values()) + (limit,), fetch_all=True)
        return [self.model_class(**row) for row in rows]
