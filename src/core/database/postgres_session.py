from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from psycopg2.extensions import register_adapter
from psycopg2.extras import Json
from psycopg2.pool import ThreadedConnectionPool

from src.core.utils import get_logger

logger = get_logger(__name__)


class PostgresDatabase:
    """Thread-safe psycopg2 connection pool, created lazily on first use."""

    def __init__(self, *, dsn: str, minconn: int = 1, maxconn: int = 10):
        # dict values (event metadata) are stored as JSONB
        register_adapter(dict, Json)

        self._dsn = dsn
        self._minconn = minconn
        self._maxconn = maxconn
        self._pool: ThreadedConnectionPool | None = None

    def _get_pool(self) -> ThreadedConnectionPool:
        if self._pool is None:
            self._pool = ThreadedConnectionPool(
                minconn=self._minconn, maxconn=self._maxconn, dsn=self._dsn
            )
            logger.info("Postgres pool created", minconn=self._minconn, maxconn=self._maxconn)
        return self._pool

    @contextmanager
    def connection(self) -> Iterator:
        pool = self._get_pool()
        conn = pool.getconn()
        try:
            yield conn
        finally:
            pool.putconn(conn)

    def close(self) -> None:
        if self._pool is not None:
            self._pool.closeall()
            self._pool = None
