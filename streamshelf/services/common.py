from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from streamshelf.db_context import DatabaseManager, IsolationLevel
from streamshelf.errors import ValidationFailed

M = TypeVar("M", bound=BaseModel)


def coerce(model: type[M], data: M | Mapping[str, Any], message: str) -> M:
    """Validate raw input into `model`, raising ValidationFailed on bad data."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ValidationFailed.from_pydantic(exc, message) from exc


class CatalogService:
    """Base for services that run their repository calls in one transaction each."""

    def __init__(self, db_name: str = "default"):
        self.db_name = db_name

    def transaction(self, isolation: IsolationLevel | None = None):
        return DatabaseManager.transaction(self.db_name, isolation=isolation)
