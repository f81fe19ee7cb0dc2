from datetime import date

import pytest

from streamshelf.db_context import DatabaseManager, transactional
from streamshelf.errors import ConcurrencyConflict, StorageUnavailable, ValidationFailed

INSERT_UPCOMING = """
    INSERT INTO upcoming_content (title, type, genres, release_date, description, section_order)
    VALUES ($1, 'movie', ARRAY['Drama'], $2, 'soon', $3)
"""


class TestDatabaseManager:
    """Test DatabaseManager functionality"""

    @pytest.mark.asyncio
    async def test_get_pool_not_found(self):
        with pytest.raises(StorageUnavailable, match="Database pool 'nonexistent' not found"):
            await DatabaseManager.get_pool("nonexistent")

    @pytest.mark.asyncio
    async def test_no_connection_outside_transaction(self):
        assert DatabaseManager.get_current_connection() is None

    @pytest.mark.asyncio
    async def test_registered_pool(self, db_pool):
        assert await DatabaseManager.get_pool("test_db") is db_pool

    @pytest.mark.asyncio
    async def test_connection_bound_and_released(self, db_pool):
        async with DatabaseManager.transaction("test_db") as conn:
            assert DatabaseManager.get_current_connection() is conn

        assert DatabaseManager.get_current_connection() is None

    @pytest.mark.asyncio
    async def test_isolation_level(self, db_pool):
        async with DatabaseManager.transaction("test_db", isolation="serializable") as conn:
            level = await conn.fetchval("SHOW transaction_isolation")

        assert level == "serializable"

    @pytest.mark.asyncio
    async def test_nested_transaction_reuses_connection(self, db_pool):
        async with DatabaseManager.transaction("test_db") as outer:
            async with DatabaseManager.transaction("test_db") as inner:
                assert inner is outer

    @pytest.mark.asyncio
    async def test_nested_rollback_is_a_savepoint(self, db_pool):
        async with DatabaseManager.transaction("test_db") as conn:
            await conn.execute(INSERT_UPCOMING, "kept", date(2030, 1, 1), 1)
            with pytest.raises(RuntimeError):
                async with DatabaseManager.transaction("test_db") as inner:
                    await inner.execute(INSERT_UPCOMING, "discarded", date(2030, 1, 1), 2)
                    raise RuntimeError("boom")

        async with db_pool.acquire() as conn:
            titles = await conn.fetch("SELECT title FROM upcoming_content")

        assert [row["title"] for row in titles] == ["kept"]

    @pytest.mark.asyncio
    async def test_rollback_on_error(self, db_pool):
        with pytest.raises(RuntimeError):
            async with DatabaseManager.transaction("test_db") as conn:
                await conn.execute(INSERT_UPCOMING, "lost", date(2030, 1, 1), 1)
                raise RuntimeError("boom")

        async with db_pool.acquire() as conn:
            assert await conn.fetchval("SELECT COUNT(*) FROM upcoming_content") == 0

    @pytest.mark.asyncio
    async def test_duplicate_order_fails_at_commit(self, db_pool):
        with pytest.raises(ConcurrencyConflict, match="Section order is already taken"):
            async with DatabaseManager.transaction("test_db") as conn:
                await conn.execute(INSERT_UPCOMING, "a", date(2030, 1, 1), 3)
                # Deferred constraint: the statement itself succeeds
                await conn.execute(INSERT_UPCOMING, "b", date(2030, 1, 1), 3)

        async with db_pool.acquire() as conn:
            assert await conn.fetchval("SELECT COUNT(*) FROM upcoming_content") == 0

    @pytest.mark.asyncio
    async def test_check_violation_is_validation_failure(self, db_pool):
        with pytest.raises(ValidationFailed, match="Constraint violated"):
            async with DatabaseManager.transaction("test_db") as conn:
                await conn.execute(INSERT_UPCOMING, "zero", date(2030, 1, 1), 0)

    @pytest.mark.asyncio
    async def test_transactional_decorator(self, db_pool):
        @transactional("test_db", isolation="repeatable_read")
        async def current_level():
            conn = DatabaseManager.get_current_connection()
            return await conn.fetchval("SHOW transaction_isolation")

        assert await current_level() == "repeatable read"

    @pytest.mark.asyncio
    async def test_close_all(self, postgres_dsn):
        import asyncpg

        pool = await asyncpg.create_pool(postgres_dsn, min_size=1, max_size=2)
        await DatabaseManager.add_pool("closing", pool)

        await DatabaseManager.close_all()

        assert pool.is_closing()
        with pytest.raises(StorageUnavailable):
            await DatabaseManager.get_pool("closing")
