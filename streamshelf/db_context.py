"""Named asyncpg pools and the connection bound to the running task.

Repositories never acquire connections themselves. They use whatever
connection the enclosing DatabaseManager.transaction() (or @transactional)
put into the current context, so every statement of one service call shares
one transaction.
"""

import logging
import traceback
from contextlib import asynccontextmanager, contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import wraps
from typing import Any, Literal

import asyncpg

from streamshelf.errors import StorageUnavailable, storage_errors

logger = logging.getLogger(__name__)

IsolationLevel = Literal["read_committed", "repeatable_read", "serializable"]

_pools: dict[str, asyncpg.Pool] = {}
_connection: ContextVar[asyncpg.Connection | None] = ContextVar(
    "streamshelf_connection", default=None
)


@dataclass
class QueryLog:
    query: str
    params: list[Any]
    stack_trace: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))


@dataclass
class QueryTracker:
    """Statements sent while tracking is on, oldest first"""

    queries: list[QueryLog] = field(default_factory=list)
    enabled: bool = True

    def record(self, query: str, params: list[Any], stack_trace: str | None = None):
        if self.enabled:
            self.queries.append(QueryLog(query, list(params), stack_trace))

    def get_queries(self) -> list[QueryLog]:
        return list(self.queries)

    def clear(self):
        self.queries.clear()

    def count(self) -> int:
        return len(self.queries)

    def to_dict(self) -> list[dict[str, Any]]:
        return [
            {
                "query": entry.query,
                "params": entry.params,
                "timestamp": entry.timestamp.isoformat(),
                "stack_trace": entry.stack_trace,
            }
            for entry in self.queries
        ]


_tracker: ContextVar[QueryTracker | None] = ContextVar("streamshelf_tracker", default=None)


@contextmanager
def _tracking():
    """Turn tracking on for the block, reusing the active tracker if there is one."""
    active = _tracker.get()
    if active is not None:
        previously = active.enabled
        active.enabled = True
        try:
            yield active
        finally:
            active.enabled = previously
        return

    tracker = QueryTracker()
    token = _tracker.set(tracker)
    try:
        yield tracker
    finally:
        _tracker.reset(token)


class DatabaseManager:
    """Registry of named pools plus the per-context transaction"""

    @classmethod
    async def add_pool(cls, name: str, pool: asyncpg.Pool):
        _pools[name] = pool

    @classmethod
    async def remove_pool(cls, name: str) -> asyncpg.Pool | None:
        return _pools.pop(name, None)

    @classmethod
    async def get_pool(cls, name: str = "default") -> asyncpg.Pool:
        try:
            return _pools[name]
        except KeyError:
            raise StorageUnavailable(f"Database pool '{name}' not found") from None

    @classmethod
    async def close_all(cls):
        for name in list(_pools):
            logger.info("Closing database pool %s", name)
            await _pools.pop(name).close()

    @classmethod
    def get_current_connection(cls) -> asyncpg.Connection | None:
        return _connection.get()

    @classmethod
    def get_query_tracker(cls) -> QueryTracker | None:
        return _tracker.get()

    @classmethod
    def log_query(cls, query: str, params: list[Any]):
        logger.debug("SQL %s params=%r", query, params)
        tracker = _tracker.get()
        if tracker is not None and tracker.enabled:
            # drop this frame and the DatabaseOperations frame
            frames = traceback.extract_stack()[:-2]
            tracker.record(query, params, "".join(traceback.format_list(frames)))

    @classmethod
    @asynccontextmanager
    async def transaction(
        cls,
        db_name: str = "default",
        track_queries: bool = False,
        isolation: IsolationLevel | None = None,
    ):
        """Run the block in a transaction and yield its connection.

        Nested calls open a savepoint on the outer connection; the outer
        isolation level stays in force. A top-level call acquires a
        connection from the `db_name` pool, and driver errors raised in the
        block or at COMMIT come out as CatalogError subclasses.
        """
        outer = _connection.get()
        if outer is not None:
            async with outer.transaction():
                yield outer
            return

        pool = await cls.get_pool(db_name)
        with storage_errors():
            async with pool.acquire() as conn, conn.transaction(isolation=isolation):
                token = _connection.set(conn)
                try:
                    if track_queries and _tracker.get() is None:
                        with _tracking():
                            yield conn
                    else:
                        yield conn
                finally:
                    _connection.reset(token)

    @classmethod
    @asynccontextmanager
    async def track_queries(cls):
        """Record every statement run inside the block.

        async with DatabaseManager.transaction("default"):
            async with DatabaseManager.track_queries() as tracker:
                await UpcomingRepository().shift_from(3)
            assert tracker.count() == 1
        """
        with _tracking() as tracker:
            yield tracker


def transactional(
    db_name: str = "default",
    query_logs: bool = False,
    isolation: IsolationLevel | None = None,
):
    """Run the decorated coroutine inside DatabaseManager.transaction().

    @transactional(isolation="serializable")
    async def reorder(entry_id, position):
        ...
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            async with DatabaseManager.transaction(
                db_name, track_queries=query_logs, isolation=isolation
            ):
                return await func(*args, **kwargs)

        return wrapper

    return decorator
