"""
Immutable builder for parameterised SELECT statements and WHERE clauses.
Nothing is executed here; build() returns the SQL text and its parameters.
"""

import re
from typing import Any

_PLACEHOLDER = re.compile(r"\$(\d+)")


class QueryBuilder:
    """
    Builds asyncpg-style ($1, $2, ...) queries for one table.

    Usage:
        builder = QueryBuilder("upcoming_content")
        query, params = builder.where("section_order", ">=", 3).order_by_asc("section_order").build()
    """

    def __init__(self, table_name: str):
        self.table_name = table_name
        self.select_fields = "*"
        self.where_conditions: list[str] = []
        self.or_where_conditions: list[str] = []
        self.params: list[Any] = []
        self.order_by_parts: list[str] = []
        self.limit_count: int | None = None
        self.offset_count: int | None = None

    def _clone(self) -> "QueryBuilder":
        new_builder = QueryBuilder(self.table_name)
        new_builder.select_fields = self.select_fields
        new_builder.where_conditions = self.where_conditions.copy()
        new_builder.or_where_conditions = self.or_where_conditions.copy()
        new_builder.params = self.params.copy()
        new_builder.order_by_parts = self.order_by_parts.copy()
        new_builder.limit_count = self.limit_count
        new_builder.offset_count = self.offset_count
        return new_builder

    def _add_condition(
        self, field: str, value: Any, operator: str, is_or: bool = False
    ) -> "QueryBuilder":
        new_builder = self._clone()

        if value is None and operator == "=":
            condition = f"{field} IS NULL"
        elif value is None and operator in ("!=", "<>"):
            condition = f"{field} IS NOT NULL"
        else:
            new_builder.params.append(value)
            condition = f"{field} {operator} ${len(new_builder.params)}"

        target = new_builder.or_where_conditions if is_or else new_builder.where_conditions
        target.append(condition)
        return new_builder

    def _add_in_condition(
        self, field: str, values: Any | list[Any], is_not: bool = False
    ) -> "QueryBuilder":
        new_builder = self._clone()
        if not isinstance(values, list | tuple | set):
            values = [values]
        values = list(values)

        if not values:
            # IN () is a syntax error; an empty IN list matches nothing
            new_builder.where_conditions.append("TRUE" if is_not else "FALSE")
            return new_builder

        start = len(new_builder.params) + 1
        placeholders = ", ".join(f"${start + i}" for i in range(len(values)))
        keyword = "NOT IN" if is_not else "IN"
        new_builder.where_conditions.append(f"{field} {keyword} ({placeholders})")
        new_builder.params.extend(values)
        return new_builder

    @staticmethod
    def _parse_args(method: str, args: tuple[Any, ...]) -> tuple[str, Any]:
        if len(args) == 2:
            return args[0], args[1]
        if len(args) == 1:
            return "=", args[0]
        raise TypeError(f"{method}() expects (field, value) or (field, operator, value)")

    def select(self, *fields: str) -> "QueryBuilder":
        """Set the SELECT list; no arguments means *"""
        new_builder = self._clone()
        new_builder.select_fields = ", ".join(fields) if fields else "*"
        return new_builder

    def where(self, field: Any, *args: Any) -> "QueryBuilder":
        """where(field, value) or where(field, operator, value)"""
        operator, value = self._parse_args("where", args)
        return self._add_condition(str(field), value, operator)

    def or_where(self, field: Any, *args: Any) -> "QueryBuilder":
        operator, value = self._parse_args("or_where", args)
        return self._add_condition(str(field), value, operator, is_or=True)

    def where_in(self, field: Any, values: Any | list[Any]) -> "QueryBuilder":
        return self._add_in_condition(str(field), values)

    def where_not_in(self, field: Any, values: Any | list[Any]) -> "QueryBuilder":
        return self._add_in_condition(str(field), values, is_not=True)

    def order_by(self, field: Any) -> "QueryBuilder":
        return self.order_by_asc(field)

    def order_by_asc(self, field: Any) -> "QueryBuilder":
        new_builder = self._clone()
        new_builder.order_by_parts.append(str(field))
        return new_builder

    def order_by_desc(self, field: Any) -> "QueryBuilder":
        new_builder = self._clone()
        new_builder.order_by_parts.append(f"{field} DESC")
        return new_builder

    def limit(self, count: int) -> "QueryBuilder":
        new_builder = self._clone()
        new_builder.limit_count = count
        return new_builder

    def offset(self, count: int) -> "QueryBuilder":
        new_builder = self._clone()
        new_builder.offset_count = count
        return new_builder

    def paginate(self, page: int, per_page: int = 10) -> "QueryBuilder":
        """LIMIT/OFFSET for a 1-based page number"""
        if page < 1:
            raise ValueError("Page number must be 1 or greater")
        if per_page < 1:
            raise ValueError("Per page count must be 1 or greater")
        return self.limit(per_page).offset((page - 1) * per_page)

    def has_conditions(self) -> bool:
        return bool(self.where_conditions or self.or_where_conditions)

    def build_where(self, param_offset: int = 0) -> tuple[str, list[Any]]:
        """Return " WHERE ..." (or "") with placeholders shifted by param_offset.

        AND conditions are combined first; OR conditions are alternatives to
        that group.
        """
        parts = []
        if self.where_conditions:
            joined = " AND ".join(self.where_conditions)
            if self.or_where_conditions and len(self.where_conditions) > 1:
                joined = f"({joined})"
            parts.append(joined)
        if self.or_where_conditions:
            joined = " OR ".join(self.or_where_conditions)
            if len(self.or_where_conditions) > 1:
                joined = f"({joined})"
            parts.append(joined)

        if not parts:
            return "", []

        clause = " WHERE " + " OR ".join(parts)
        if param_offset:
            clause = _PLACEHOLDER.sub(
                lambda m: f"${int(m.group(1)) + param_offset}", clause
            )
        return clause, self.params.copy()

    def build(self) -> tuple[str, list[Any]]:
        where_clause, params = self.build_where()
        query = f"SELECT {self.select_fields} FROM {self.table_name}{where_clause}"

        if self.order_by_parts:
            query += f" ORDER BY {', '.join(self.order_by_parts)}"
        if self.limit_count is not None:
            query += f" LIMIT {self.limit_count}"
        if self.offset_count is not None:
            query += f" OFFSET {self.offset_count}"

        return query, params

    def to_sql(self) -> str:
        query, _ = self.build()
        return query

    def __str__(self) -> str:
        query, params = self.build()
        return f"Query: {query}\nParams: {params}"
