"""
Supabase (PostgREST) implementation of the Repository Pattern.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from src.core.utils import get_logger

logger = get_logger(__name__)

T = TypeVar("T")  # Pydantic Model


def to_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    """Convert values PostgREST cannot serialize (datetimes, enums) to JSON scalars."""
    payload = {}
    for key, value in data.items():
        if isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, Enum):
            value = value.value
        payload[key] = value
    return payload


class SupabaseRepository(Generic[T]):
    """
    Generic CRUD over a single Supabase table, mapping rows to Pydantic models.
    """

    def __init__(
        self,
        client: Any,
        table_name: str,
        model_class: Type[T],
        primary_key: str = "id",
    ):
        self.client = client
        self.table_name = table_name
        self.model_class = model_class
        self.primary_key = primary_key

    def _table(self):
        return self.client.table(self.table_name)

    def create(self, data: Dict[str, Any]) -> Optional[T]:
        result = self._table().insert(to_payload(data)).execute()
        if result.data:
            return self.model_class(**result.data[0])
        return None

    def find_by_id(self, id_value: Any, id_column: Optional[str] = None) -> Optional[T]:
        column = id_column or self.primary_key
        result = self._table().select("*").eq(column, id_value).execute()
        if result.data:
            return self.model_class(**result.data[0])
        return None

    def update(
        self,
        id_value: Union[int, str],
        data: Dict[str, Any],
        id_column: Optional[str] = None,
    ) -> Optional[T]:
        column = id_column or self.primary_key
        result = self._table().update(to_payload(data)).eq(column, id_value).execute()
        if result.data:
            return self.model_class(**result.data[0])
        return None

    def delete(self, id_value: Union[int, str], id_column: Optional[str] = None) -> bool:
        column = id_column or self.primary_key
        result = self._table().delete().eq(column, id_value).execute()
        return bool(result.data)

    def find_by(self, filters: Dict[str, Any], limit: int = 100) -> List[T]:
        query = self._table().select("*")
        for key, value in filters.items():
            query = query.eq(key, value)
        result = query.limit(limit).execute()
        return [self.model_class(**item) for item in result.data]
