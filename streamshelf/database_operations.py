from typing import Any

import asyncpg

from streamshelf.db_context import DatabaseManager

NO_TRANSACTION = (
    "No active transaction found. "
    "Repository methods must be called within a transaction context."
)


class DatabaseOperations:
    """Runs statements on the connection of the surrounding transaction"""

    @staticmethod
    def get_connection() -> asyncpg.Connection:
        conn = DatabaseManager.get_current_connection()
        if conn is None:
            raise ValueError(NO_TRANSACTION)
        return conn

    async def _run(self, method: str, query: str, params: list[Any]) -> Any:
        conn = self.get_connection()
        DatabaseManager.log_query(query, params)
        return await getattr(conn, method)(query, *params)

    async def fetch_all(self, query: str, params: list[Any]) -> list[asyncpg.Record]:
        return await self._run("fetch", query, params)

    async def fetch_one(self, query: str, params: list[Any]) -> asyncpg.Record | None:
        return await self._run("fetchrow", query, params)

    async def fetch_value(self, query: str, params: list[Any]) -> Any:
        return await self._run("fetchval", query, params)

    async def execute_query(self, query: str, params: list[Any]) -> str:
        """Returns the status tag, e.g. "UPDATE 3" """
        return await self._run("execute", query, params)

    @staticmethod
    def affected_rows(status: str) -> int:
        """Row count from a tag such as "DELETE 2" or "INSERT 0 1"."""
        _, _, count = status.rpartition(" ")
        return int(count) if count.isdigit() else 0
