"""Upcoming content: ordered insertion, direct edits and the Coming Soon view.

Insertion and order-changing edits run in one SERIALIZABLE transaction:
capacity check, range shift and write either all commit or none do. A
conflicting concurrent writer surfaces as ConcurrencyConflict.
"""

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from streamshelf.errors import ConcurrencyConflict, NotFound, ValidationFailed
from streamshelf.models import (
    MAX_UPCOMING,
    UpcomingCreate,
    UpcomingEntry,
    UpcomingType,
    UpcomingUpdate,
)
from streamshelf.ordering import check_capacity, validate_position
from streamshelf.services.common import CatalogService, coerce
from streamshelf.upcoming_display import display_upcoming
from streamshelf.upcoming_repository import UpcomingRepository

logger = logging.getLogger(__name__)

INVALID_DATA = "Invalid upcoming content data"


class UpcomingService(CatalogService):
    def __init__(
        self,
        db_name: str = "default",
        repository: UpcomingRepository | None = None,
        capacity: int = MAX_UPCOMING,
    ):
        super().__init__(db_name)
        self.repository = repository or UpcomingRepository()
        self.capacity = capacity

    async def list_all(self) -> list[UpcomingEntry]:
        async with self.transaction():
            return await self.repository.find_all_ordered()

    async def display(self, today: date | None = None) -> list[UpcomingEntry]:
        return display_upcoming(await self.list_all(), today=today, limit=self.capacity)

    async def get(self, entry_id: UUID) -> UpcomingEntry:
        async with self.transaction():
            entry = await self.repository.find_by_id(entry_id)
        if entry is None:
            raise NotFound("Upcoming content not found")
        return entry

    async def insert(
        self,
        data: UpcomingCreate | Mapping[str, Any],
        position: Any = None,
    ) -> UpcomingEntry:
        """Insert an entry at `position` (or its own section_order).

        Entries already at or after that slot move down by one. Fails with
        ValidationFailed or CapacityExceeded before anything is written.
        """
        if position is not None:
            raw = data.model_dump() if isinstance(data, BaseModel) else dict(data)
            raw.pop("sectionOrder", None)
            raw["section_order"] = validate_position(position)
            data = raw
        create = coerce(UpcomingCreate, data, INVALID_DATA)
        position = create.section_order

        try:
            async with self.transaction(isolation="serializable"):
                check_capacity(await self.repository.count(), self.capacity)
                shifted = await self.repository.shift_from(position)
                entry = await self.repository.create(UpcomingEntry(**create.model_dump()))
        except ConcurrencyConflict:
            logger.warning(
                "Insert at order %d lost to a concurrent writer",
                position,
                extra={"event": "upcoming.conflict", "context": {"position": position}},
            )
            raise

        logger.info(
            "Inserted upcoming entry %s at order %d (%d shifted)",
            entry.id,
            position,
            shifted,
            extra={"event": "upcoming.insert", "context": {"shifted": shifted}},
        )
        return entry

    async def update(
        self, entry_id: UUID, changes: UpcomingUpdate | Mapping[str, Any]
    ) -> UpcomingEntry:
        """Apply a partial edit. Moving to an occupied slot shifts that slot's
        entry (and everything after it) down by one."""
        update = coerce(UpcomingUpdate, changes, INVALID_DATA)

        async with self.transaction(isolation="serializable"):
            current = await self.repository.find_by_id(entry_id)
            if current is None:
                raise NotFound("Upcoming content not found")
            self._check_episodes(current, update)

            new_order = update.section_order
            if new_order is not None and new_order != current.section_order:
                if await self.repository.find_by_order(new_order) is not None:
                    shifted = await self.repository.shift_from(new_order, exclude_id=entry_id)
                    logger.info(
                        "Moved upcoming entry %s from %d to %d (%d shifted)",
                        entry_id,
                        current.section_order,
                        new_order,
                        shifted,
                    )
            entry = await self.repository.update(entry_id, update)

        if entry is None:
            raise NotFound("Upcoming content not found")
        return entry

    async def delete(self, entry_id: UUID) -> None:
        """Remove an entry. Remaining orders are left as they are."""
        async with self.transaction():
            deleted = await self.repository.delete(entry_id)
        if not deleted:
            raise NotFound("Upcoming content not found")
        logger.info("Deleted upcoming entry %s", entry_id)

    @staticmethod
    def _check_episodes(current: UpcomingEntry, update: UpcomingUpdate) -> None:
        changes = update.model_dump(exclude_unset=True)
        entry_type = changes.get("type", current.type)
        episodes = changes.get("episodes", current.episodes)
        if episodes is not None and entry_type != UpcomingType.TV.value:
            raise ValidationFailed(INVALID_DATA, "episodes can only be set for tv entries")
