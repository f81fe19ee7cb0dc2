import asyncpg
import pytest
import pytest_asyncio
from testcontainers.postgres import PostgresContainer

from streamshelf.db_context import DatabaseManager
from streamshelf.schema import create_schema, truncate_tables

TEST_DB = "test_db"


@pytest.fixture(scope="session")
def postgres_container():
    """Start a PostgreSQL test container for the session."""
    with PostgresContainer("postgres:17") as postgres:
        yield postgres


@pytest.fixture(scope="session")
def postgres_dsn(postgres_container):
    host = postgres_container.get_container_host_ip()
    port = postgres_container.get_exposed_port(5432)
    return (
        f"postgresql://{postgres_container.username}:{postgres_container.password}"
        f"@{host}:{port}/{postgres_container.dbname}"
    )


@pytest_asyncio.fixture
async def db_pool(postgres_dsn):
    """A pool registered as "test_db" with the catalog schema in place.

    A new pool per test keeps it on the test's own event loop.
    """
    pool = await asyncpg.create_pool(postgres_dsn, min_size=1, max_size=5)
    await create_schema(pool)
    await DatabaseManager.add_pool(TEST_DB, pool)

    yield pool

    await truncate_tables(pool)
    await DatabaseManager.remove_pool(TEST_DB)
    await pool.close()
