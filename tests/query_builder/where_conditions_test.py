"""
Tests for WHERE conditions, operators, and parameter indexing.
"""

from uuid import uuid4

import pytest

from streamshelf.models import UpcomingSchema
from streamshelf.query_builder import QueryBuilder


class TestWhereConditions:
    """Test cases for WHERE clause functionality"""

    def test_single_where_condition(self):
        entry_id = uuid4()
        query, params = QueryBuilder("upcoming_content").where("id", entry_id).build()

        assert query == "SELECT * FROM upcoming_content WHERE id = $1"
        assert params == [entry_id]

    def test_operators_and_parameter_indexing(self):
        query, params = (
            QueryBuilder("upcoming_content")
            .where("section_order", ">=", 3)
            .where("type", "!=", "tv")
            .where("section_order", "<=", 20)
            .build()
        )

        assert query == (
            "SELECT * FROM upcoming_content "
            "WHERE section_order >= $1 AND type != $2 AND section_order <= $3"
        )
        assert params == [3, "tv", 20]

    def test_none_becomes_is_null(self):
        query, params = (
            QueryBuilder("content")
            .where("release_year", None)
            .where("episodes", "!=", None)
            .build()
        )

        assert query == (
            "SELECT * FROM content WHERE release_year IS NULL AND episodes IS NOT NULL"
        )
        assert params == []

    def test_column_objects_render_as_names(self):
        query, params = (
            QueryBuilder("upcoming_content")
            .where(UpcomingSchema.section_order, ">=", 4)
            .order_by_asc(UpcomingSchema.section_order)
            .build()
        )

        assert query == (
            "SELECT * FROM upcoming_content WHERE section_order >= $1 "
            "ORDER BY section_order"
        )
        assert params == [4]

    def test_wrong_argument_count(self):
        with pytest.raises(TypeError):
            QueryBuilder("content").where("title", "=", "x", "y")

    def test_builder_is_immutable(self):
        base = QueryBuilder("content").where("status", "Published")
        narrowed = base.where("type", "movie")

        assert base.to_sql() == "SELECT * FROM content WHERE status = $1"
        assert narrowed.to_sql() == "SELECT * FROM content WHERE status = $1 AND type = $2"


class TestOrAndInConditions:
    def test_or_where_groups_and_conditions(self):
        query, params = (
            QueryBuilder("content")
            .where("type", "movie")
            .where("status", "Published")
            .or_where("type", "tv")
            .build()
        )

        assert query == (
            "SELECT * FROM content WHERE (type = $1 AND status = $2) OR type = $3"
        )
        assert params == ["movie", "Published", "tv"]

    def test_several_or_conditions(self):
        query, _ = (
            QueryBuilder("content")
            .where("status", "Published")
            .or_where("type", "tv")
            .or_where("type", "movie")
            .build()
        )

        assert query == (
            "SELECT * FROM content WHERE status = $1 OR (type = $2 OR type = $3)"
        )

    def test_where_in(self):
        query, params = QueryBuilder("content").where_in("type", ["movie", "tv"]).build()

        assert query == "SELECT * FROM content WHERE type IN ($1, $2)"
        assert params == ["movie", "tv"]

    def test_where_not_in_after_other_params(self):
        query, params = (
            QueryBuilder("upcoming_content")
            .where("type", "tv")
            .where_not_in("section_order", [1, 2])
            .build()
        )

        assert query == (
            "SELECT * FROM upcoming_content WHERE type = $1 AND section_order NOT IN ($2, $3)"
        )
        assert params == ["tv", 1, 2]

    def test_empty_in_lists(self):
        assert QueryBuilder("content").where_in("id", []).to_sql() == (
            "SELECT * FROM content WHERE FALSE"
        )
        assert QueryBuilder("content").where_not_in("id", []).to_sql() == (
            "SELECT * FROM content WHERE TRUE"
        )


class TestBuildWhere:
    def test_no_conditions(self):
        assert QueryBuilder("content").build_where() == ("", [])
        assert not QueryBuilder("content").has_conditions()

    def test_param_offset_renumbers_placeholders(self):
        builder = QueryBuilder("upcoming_content").where("section_order", ">=", 3).where(
            "id", "!=", "abc"
        )

        clause, params = builder.build_where(param_offset=2)

        assert clause == " WHERE section_order >= $3 AND id != $4"
        assert params == [3, "abc"]
