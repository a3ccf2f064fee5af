from typing import Any, Dict, Generic, List, Optional, Protocol, TypeVar, Union

T = TypeVar("T")


class IDatabaseSession(Protocol):
    """
    Database session interface.
    Abstracts the concrete client (Supabase, SQL, etc).
    """

    def table(self, name: str) -> Any:
        """Return a query builder for the given table."""
        ...


class IRepository(Generic[T], Protocol):
    """
    Generic repository interface.
    CRUD contract shared by every backend implementation (Supabase, Postgres).
    """

    def create(self, data: Dict[str, Any]) -> Optional[T]:
        """Create a new record."""
        ...

    def find_by_id(self, id_value: Any, id_column: str = "id") -> Optional[T]:
        """Find a record by its ID."""
        ...

    def update(
        self, id_value: Union[int, str], data: Dict[str, Any], id_column: str = "id"
    ) -> Optional[T]:
        """Update an existing record."""
        ...

    def find_by(self, filters: Dict[str, Any], limit: int = 100) -> List[T]:
        """Find records matching simple equality filters."""
        ...
