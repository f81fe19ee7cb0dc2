"""Streaming catalog backend: content, upcoming releases and home page shelves"""

from streamshelf.db_context import DatabaseManager, transactional
from streamshelf.errors import (
    CapacityExceeded,
    CatalogError,
    ConcurrencyConflict,
    NotFound,
    StorageUnavailable,
    ValidationFailed,
)
from streamshelf.repository import Repository
from streamshelf.services import ContentService, UpcomingService

__all__ = [
    "CapacityExceeded",
    "CatalogError",
    "ConcurrencyConflict",
    "ContentService",
    "DatabaseManager",
    "NotFound",
    "Repository",
    "StorageUnavailable",
    "UpcomingService",
    "ValidationFailed",
    "transactional",
]
