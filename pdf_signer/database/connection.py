from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg_pool import ConnectionPool

from pdf_signer.config.settings import Settings
from pdf_signer.logging.logger import Log


def build_conninfo(settings: Settings) -> str:
    """Build a libpq connection string from settings."""
    return (
        f"host={settings.db_host} "
        f"port={settings.db_port} "
        f"dbname={settings.db_database} "
        f"user={settings.db_username} "
        f"password={settings.db_password}"
    )


class Database:
    """Owns the connection pool for the audit store.

    Created once at process start, handed to repositories, closed on shutdown.
    """

    def __init__(self, settings: Settings, pool: ConnectionPool | None = None) -> None:
        if pool is None:
            pool = ConnectionPool(
                build_conninfo(settings),
                min_size=settings.db_pool_min_size,
                max_size=settings.db_pool_max_size,
                open=True,
            )
        self._pool: ConnectionPool | None = pool
        Log.info(f"Database pool opened for {settings.db_host}:{settings.db_port}")

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    @contextmanager
    def connection(self) -> Generator[psycopg.Connection[Any], None, None]:
        """Yield a connection from the pool. Caller manages commit/rollback."""
        if self._pool is None:
            raise RuntimeError("Database is closed.")
        with self._pool.connection() as conn:
            yield conn

    def close(self) -> None:
        """Close the pool. Safe to call more than once."""
        if self._pool is not None:
            self._pool.close()
            self._pool = None
            Log.info("Database pool closed")
