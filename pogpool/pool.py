"""A fixed-size pool of database connections."""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

MAX_CONNECTIONS = 10


class PoolError(Exception):
    """Raised when the pool cannot connect, lend or take back a connection."""


class ConnectionPool:
    """Opens ``max_connections`` connections up front and lends them out last-in, first-out."""

    def __init__(
        self,
        connect: Callable[[str], Any],
        conninfo: str,
        max_connections: int = MAX_CONNECTIONS,
    ) -> None:
        if max_connections < 1:
            raise ValueError("max_connections must be at least 1")
        self.max_connections = max_connections
        self._available: list[Any] = []
        for _ in range(max_connections):
            try:
                conn = connect(conninfo)
            except Exception as exc:
                self.close()
                raise PoolError(f"Connection to database failed: {exc}") from exc
            self._available.append(conn)

    def borrow(self) -> Any:
        """Take a connection out of the pool."""
        if not self._available:
            raise PoolError("No available connections in the pool.")
        return self._available.pop()

    def release(self, conn: Any) -> None:
        """Return a connection to the pool."""
        if len(self._available) >= self.max_connections:
            raise PoolError("Pool is full. Cannot release connection.")
        self._available.append(conn)

    def close(self) -> None:
        """Close every connection currently in the pool."""
        while self._available:
            self._available.pop(0).close()

    def __len__(self) -> int:
        return len(self._available)

    def __enter__(self) -> ConnectionPool:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def run_sql_file(conn: Any, path: str | os.PathLike) -> None:
    """Execute the SQL held in ``path`` on a DB-API connection and commit it."""
    with open(path, encoding="utf-8") as handle:
        query = handle.read()
    cursor = conn.cursor()
    try:
        cursor.execute(query)
    except Exception as exc:
        raise PoolError(f"SQL execution failed: {exc}") from exc
    finally:
        cursor.close()
    conn.commit()