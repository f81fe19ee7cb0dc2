import logging
from collections.abc import Mapping, Sequence
from typing import Any
from uuid import UUID

from streamshelf.content_repository import ContentRepository
from streamshelf.drafts import ContentDraft
from streamshelf.errors import NotFound
from streamshelf.models import ContentCreate, ContentItem, ContentUpdate
from streamshelf.services.common import CatalogService, coerce
from streamshelf.shelves import DEFAULT_SHELVES, Shelf, ShelfDefinition, build_shelves

logger = logging.getLogger(__name__)


class ContentService(CatalogService):
    def __init__(self, db_name: str = "default", repository: ContentRepository | None = None):
        super().__init__(db_name)
        self.repository = repository or ContentRepository()

    async def list_published(self) -> list[ContentItem]:
        async with self.transaction():
            return await self.repository.find_published()

    async def get(self, content_id: UUID) -> ContentItem:
        async with self.transaction():
            item = await self.repository.find_by_id(content_id)
        if item is None:
            raise NotFound("Content not found")
        return item

    async def create(self, data: ContentCreate | Mapping[str, Any]) -> ContentItem:
        create = coerce(ContentCreate, data, "Invalid content data")
        async with self.transaction():
            item = await self.repository.create(ContentItem(**create.model_dump()))
        logger.info("Created content %s (%s)", item.id, item.title)
        return item

    async def create_from_draft(self, draft: ContentDraft) -> ContentItem:
        """Publish a finished upload form. Draft checks run before any write."""
        return await self.create(draft.to_content())

    async def update(
        self, content_id: UUID, changes: ContentUpdate | Mapping[str, Any]
    ) -> ContentItem:
        update = coerce(ContentUpdate, changes, "Invalid content data")
        async with self.transaction():
            item = await self.repository.update(content_id, update)
        if item is None:
            raise NotFound("Content not found")
        logger.info("Updated content %s fields=%s", content_id, sorted(update.model_fields_set))
        return item

    async def delete(self, content_id: UUID) -> None:
        async with self.transaction():
            deleted = await self.repository.delete(content_id)
        if not deleted:
            raise NotFound("Content not found")
        logger.info("Deleted content %s", content_id)

    async def shelves(
        self, definitions: Sequence[ShelfDefinition] = DEFAULT_SHELVES
    ) -> list[Shelf]:
        catalog = await self.list_published()
        return build_shelves(catalog, definitions)
