from enum import Enum
from typing import ClassVar, Generic, TypeVar
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class Column(Generic[T]):
    """Type-safe column reference for schema classes.

    Usage:
        class UpcomingSchema(SchemaBase):
            section_order = Column[int]("section_order")

        repo.where(UpcomingSchema.section_order, ">=", 3)
    """

    def __init__(self, column_name: str):
        self._column_name = column_name

    @property
    def column(self) -> str:
        return self._column_name

    def __str__(self) -> str:
        return self._column_name

    def __repr__(self) -> str:
        return f"Column({self._column_name})"


class SchemaBase:
    """Namespace of Column definitions for one table"""

    pass


class CamelModel(BaseModel):
    """Serialises as camelCase for the web client, accepts either spelling on input."""

    model_config: ClassVar[ConfigDict] = ConfigDict(
        use_enum_values=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class BaseEntity(CamelModel):
    """Base class for persisted rows"""

    id: UUID = Field(default_factory=uuid4)


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"
