from pydantic import BaseModel

from streamshelf.query_builder import QueryBuilder


class SearchConditionBuilder:
    """Turns search and sort models into query builder calls"""

    @staticmethod
    def apply_search_conditions(
        builder: QueryBuilder, search: BaseModel | None
    ) -> QueryBuilder:
        """Add an equality condition for every field set on the search model"""
        if search is None:
            return builder
        for field, value in search.model_dump(exclude_none=True).items():
            builder = builder.where(field, value)
        return builder

    @staticmethod
    def apply_sort(builder: QueryBuilder, sort_model: BaseModel | None) -> QueryBuilder:
        """Add ORDER BY parts in field declaration order"""
        if sort_model is None:
            return builder
        for field, order in sort_model.model_dump(exclude_none=True).items():
            if str(order).upper() == "DESC":
                builder = builder.order_by_desc(field)
            else:
                builder = builder.order_by_asc(field)
        return builder
