"""Repository class"""

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel

from streamshelf.database_operations import DatabaseOperations
from streamshelf.db_context import DatabaseManager, QueryTracker
from streamshelf.entity_mapper import EntityMapper
from streamshelf.query_builder import QueryBuilder
from streamshelf.search_condition_builder import SearchConditionBuilder

T = TypeVar("T", bound=BaseModel)
U = TypeVar("U", bound=BaseModel)


class Repository(Generic[T, U]):
    """Table access for one entity type.

    Query methods (where, order_by_asc, paginate, ...) return a new repository
    carrying an immutable QueryBuilder, so a configured instance can be
    shared. Every statement runs on the connection of the surrounding
    DatabaseManager.transaction() / @transactional block.

    Type Parameters:
        T: Entity model; its field names are the table's column names
        U: Update model; only explicitly set fields are written
    """

    def __init__(
        self,
        entity_class: type[T],
        update_class: type[U],
        table_name: str,
    ):
        if entity_class is None:
            raise ValueError("entity_class is required")
        if update_class is None:
            raise ValueError("update_class is required")
        if not table_name:
            raise ValueError("table_name is required")

        self.entity_class = entity_class
        self.update_class = update_class
        self.table_name = table_name
        self._query_builder: QueryBuilder | None = None

        self._columns = set(entity_class.model_fields)
        self._has_created_at = "created_at" in self._columns
        self._has_updated_at = "updated_at" in self._columns

        self.db_ops = DatabaseOperations()
        self.entity_mapper = EntityMapper(entity_class)

    def _get_or_create_query_builder(self) -> QueryBuilder:
        if self._query_builder is None:
            return QueryBuilder(self.table_name)
        return self._query_builder

    def _clone_with_query_builder(self, query_builder: QueryBuilder) -> "Repository[T, U]":
        # Same class as self, so subclass finders remain on the clone
        new_repo = object.__new__(type(self))
        new_repo.__dict__.update(self.__dict__)
        new_repo._query_builder = query_builder
        return new_repo

    def _apply_automatic_fields(
        self, data: dict[str, Any], is_create: bool = True
    ) -> dict[str, Any]:
        """Fill created_at/updated_at when the entity declares them"""
        now = datetime.now(UTC)
        if is_create and self._has_created_at and data.get("created_at") is None:
            data["created_at"] = now
        if self._has_updated_at and data.get("updated_at") is None:
            data["updated_at"] = now
        return data

    def _persistable(self, data: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in data.items() if k in self._columns}

    # Fluent query methods
    def select(self, *fields: str) -> "Repository[T, U]":
        return self._clone_with_query_builder(
            self._get_or_create_query_builder().select(*fields)
        )

    def where(self, field: Any, *args: Any) -> "Repository[T, U]":
        """where(field, value) or where(field, operator, value)"""
        return self._clone_with_query_builder(
            self._get_or_create_query_builder().where(field, *args)
        )

    def order_by_asc(self, field: Any) -> "Repository[T, U]":
        return self._clone_with_query_builder(
            self._get_or_create_query_builder().order_by_asc(field)
        )

    def order_by_desc(self, field: Any) -> "Repository[T, U]":
        return self._clone_with_query_builder(
            self._get_or_create_query_builder().order_by_desc(field)
        )

    def paginate(self, page: int, per_page: int = 10) -> "Repository[T, U]":
        return self._clone_with_query_builder(
            self._get_or_create_query_builder().paginate(page, per_page)
        )

    # Execution methods
    async def get(self) -> list[T]:
        """Run the query; rows come back as entities unless a custom SELECT was set"""
        builder = self._get_or_create_query_builder()
        query, params = builder.build()
        rows = await self.db_ops.fetch_all(query, params)

        if builder.select_fields.strip() != "*":
            return [dict(row) for row in rows]  # type: ignore[misc]
        return self.entity_mapper.map_rows_to_entities(rows)

    async def first(self) -> T | None:
        query, params = self._get_or_create_query_builder().limit(1).build()
        row = await self.db_ops.fetch_one(query, params)
        return self.entity_mapper.map_row_to_entity(row) if row else None

    async def count(self) -> int:
        query, params = self._get_or_create_query_builder().select("COUNT(*)").build()
        return await self.db_ops.fetch_value(query, params) or 0

    async def exists(self) -> bool:
        return await self.count() > 0

    def to_sql(self) -> str:
        return self._get_or_create_query_builder().to_sql()

    @staticmethod
    def get_query_tracker() -> QueryTracker | None:
        """The tracker of the current transaction, if query tracking is on"""
        return DatabaseManager.get_query_tracker()

    # CRUD operations
    async def find_by_id(self, entity_id: UUID) -> T | None:
        return await self.where("id", entity_id).first()

    async def find_one_by(self, search: BaseModel) -> T | None:
        """First entity matching every field set on the search model.

        An empty search matches nothing rather than an arbitrary row.
        """
        if not search.model_dump(exclude_none=True):
            return None
        builder = SearchConditionBuilder.apply_search_conditions(
            self._get_or_create_query_builder(), search
        )
        return await self._clone_with_query_builder(builder).first()

    async def find_many_by(
        self, search: BaseModel | None = None, sort: BaseModel | None = None
    ) -> list[T]:
        builder = SearchConditionBuilder.apply_search_conditions(
            self._get_or_create_query_builder(), search
        )
        builder = SearchConditionBuilder.apply_sort(builder, sort)
        return await self._clone_with_query_builder(builder).get()

    async def create(self, entity: T) -> T:
        """Insert the entity and return the stored row (including DB defaults)"""
        fields = self._persistable(
            self._apply_automatic_fields(entity.model_dump(), is_create=True)
        )

        columns = ", ".join(fields.keys())
        placeholders = ", ".join(f"${i + 1}" for i in range(len(fields)))
        row = await self.db_ops.fetch_one(
            f"INSERT INTO {self.table_name} ({columns}) "
            f"VALUES ({placeholders}) RETURNING *",
            list(fields.values()),
        )
        return self.entity_mapper.map_row_to_entity(row)

    async def update(self, entity_id: UUID, update_data: U) -> T | None:
        """Write the explicitly set fields; None when the id does not exist"""
        update_dict = update_data.model_dump(exclude_unset=True)
        if not update_dict:
            return await self.find_by_id(entity_id)

        update_dict = self._persistable(
            self._apply_automatic_fields(update_dict, is_create=False)
        )
        set_clause = ", ".join(f"{k} = ${i + 2}" for i, k in enumerate(update_dict))
        row = await self.db_ops.fetch_one(
            f"UPDATE {self.table_name} SET {set_clause} "
            f"WHERE id = $1 RETURNING *",
            [entity_id, *update_dict.values()],
        )
        return self.entity_mapper.map_row_to_entity(row) if row else None

    async def increment(self, column: Any, amount: int = 1) -> int:
        """Add `amount` to a column on every row matching the current WHERE.

        Runs as a single UPDATE so all matching rows move together. Returns
        the number of rows changed.

        Example:
            await repo.where("section_order", ">=", 3).increment("section_order")
        """
        builder = self._get_or_create_query_builder()
        if not builder.has_conditions():
            raise ValueError("Cannot increment without WHERE conditions")

        assignments = [f"{column} = {column} + $1"]
        params: list[Any] = [amount]
        if self._has_updated_at:
            params.append(datetime.now(UTC))
            assignments.append(f"updated_at = ${len(params)}")

        where_clause, where_params = builder.build_where(param_offset=len(params))
        result = await self.db_ops.execute_query(
            f"UPDATE {self.table_name} SET {', '.join(assignments)}{where_clause}",
            params + where_params,
        )
        return self.db_ops.affected_rows(result)

    async def delete(self, entity_id: UUID | None = None) -> bool | int:
        """
        - repo.delete(id) -> delete one row, returns bool
        - repo.where(...).delete() -> delete every matching row, returns count
        """
        if entity_id is not None:
            result = await self.db_ops.execute_query(
                f"DELETE FROM {self.table_name} WHERE id = $1", [entity_id]
            )
            return self.db_ops.affected_rows(result) > 0

        builder = self._get_or_create_query_builder()
        if not builder.has_conditions():
            raise ValueError("Cannot delete without entity_id or WHERE conditions")

        where_clause, params = builder.build_where()
        result = await self.db_ops.execute_query(
            f"DELETE FROM {self.table_name}{where_clause}", params
        )
        return self.db_ops.affected_rows(result)
