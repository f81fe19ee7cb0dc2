from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class EntityMapper(Generic[T]):
    """Builds entities from asyncpg records"""

    def __init__(self, entity_class: type[T]):
        self.entity_class = entity_class
        self._columns = set(entity_class.model_fields)

    def map_row_to_entity(self, row: Any) -> T:
        # Ignore columns the entity does not declare (e.g. after a schema migration)
        data = {k: v for k, v in dict(row).items() if k in self._columns}
        return self.entity_class.model_validate(data)

    def map_rows_to_entities(self, rows: Iterable[Any]) -> list[T]:
        return [self.map_row_to_entity(row) for row in rows]
