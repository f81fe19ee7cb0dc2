from streamshelf.entities import SortOrder
from streamshelf.models import (
    ContentItem,
    ContentSearch,
    ContentSort,
    ContentStatus,
    ContentUpdate,
)
from streamshelf.repository import Repository


class ContentRepository(Repository[ContentItem, ContentUpdate]):
    def __init__(self):
        super().__init__(
            entity_class=ContentItem,
            update_class=ContentUpdate,
            table_name="content",
        )

    async def find_published(self) -> list[ContentItem]:
        """Published items in insertion order; the shelf builder does its own sorting"""
        return await self.find_many_by(
            ContentSearch(status=ContentStatus.PUBLISHED),
            ContentSort(created_at=SortOrder.ASC),
        )

