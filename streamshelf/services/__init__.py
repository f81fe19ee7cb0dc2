"""Catalog services"""

from streamshelf.services.content_service import ContentService
from streamshelf.services.upcoming_service import UpcomingService

__all__ = ["ContentService", "UpcomingService"]
