from uuid import UUID

from streamshelf.entities import SortOrder
from streamshelf.models import UpcomingEntry, UpcomingSchema, UpcomingSort, UpcomingUpdate
from streamshelf.repository import Repository


class UpcomingRepository(Repository[UpcomingEntry, UpcomingUpdate]):
    def __init__(self):
        super().__init__(
            entity_class=UpcomingEntry,
            update_class=UpcomingUpdate,
            table_name="upcoming_content",
        )

    async def find_all_ordered(self) -> list[UpcomingEntry]:
        return await self.find_many_by(sort=UpcomingSort(section_order=SortOrder.ASC))

    async def find_by_order(self, section_order: int) -> UpcomingEntry | None:
        return await self.where(UpcomingSchema.section_order, section_order).first()

    async def section_orders(self) -> list[int]:
        rows = await (
            self.select(str(UpcomingSchema.section_order))
            .order_by_asc(UpcomingSchema.section_order)
            .get()
        )
        return [row["section_order"] for row in rows]  # type: ignore[index]

    async def shift_from(self, section_order: int, exclude_id: UUID | None = None) -> int:
        """Move every entry at or after `section_order` down one slot.

        One UPDATE statement; the deferred unique constraint on section_order
        is checked when the transaction commits.
        """
        repo = self.where(UpcomingSchema.section_order, ">=", section_order)
        if exclude_id is not None:
            repo = repo.where(UpcomingSchema.id, "!=", exclude_id)
        return await repo.increment(UpcomingSchema.section_order)
