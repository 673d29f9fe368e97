"""Base repository class."""

from __future__ import annotations

from asyncpg import Connection, Pool


class BaseRepository:
    """Base class for all repositories.

    Every public method accepts an optional ``conn`` so a service can run several
    calls inside one transaction; without it the pool is used directly.
    """

    def __init__(self, pool: Pool) -> None:
        self._pool = pool

    def _get_connection(self, conn: Connection | None = None) -> Connection | Pool:
        return conn or self._pool
