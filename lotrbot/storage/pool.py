"""
MySQL connection pool lifecycle.

Wraps an ``aiomysql`` pool built from immutable DatabaseSettings. The bot
creates one instance at startup and hands it to every component that needs
database access; connections are borrowed per operation.

Example:
    >>> async with DatabasePool(settings.database) as pool:
    ...     async with pool.acquire() as conn:
    ...         async with conn.cursor() as cur:
    ...             await cur.execute("SELECT 1")
"""

import asyncio

import aiomysql

from lotrbot.config.logging import get_logger
from lotrbot.config.settings import DatabaseSettings
from lotrbot.storage.errors import StorageError

logger = get_logger(__name__)

# Failures the driver and transport can raise for a single operation
DATABASE_ERRORS = (aiomysql.Error, OSError, asyncio.TimeoutError)


class DatabasePool:
    """
    Shared aiomysql connection pool.

    Attributes:
        settings: Connection settings (host, credentials, pool sizes)
        _pool: Underlying aiomysql pool, None until initialize()
    """

    def __init__(self, settings: DatabaseSettings):
        """
        Store settings (doesn't connect yet).

        Args:
            settings: Database connection settings
        """
        self.settings = settings
        self._pool: aiomysql.Pool | None = None

    @property
    def initialized(self) -> bool:
        return self._pool is not None

    async def initialize(self) -> None:
        """
        Open the pool.

        Raises:
            StorageError: If the initial connections cannot be established
        """
        if self._pool is not None:
            return

        logger.info(
            f"Connecting to MySQL at {self.settings.server}:{self.settings.port} "
            f"(database: {self.settings.name})"
        )
        try:
            self._pool = await aiomysql.create_pool(
                host=self.settings.server,
                port=self.settings.port,
                user=self.settings.user,
                password=self.settings.password,
                db=self.settings.name,
                minsize=self.settings.pool_minsize,
                maxsize=self.settings.pool_maxsize,
                connect_timeout=self.settings.connect_timeout,
                autocommit=True,
            )
        except DATABASE_ERRORS as e:
            logger.error(f"Failed to create MySQL pool: {e}")
            raise StorageError(f"Could not connect to MySQL: {e}") from e

        logger.info(
            f"MySQL pool ready (min {self.settings.pool_minsize}, "
            f"max {self.settings.pool_maxsize})"
        )

    async def shutdown(self) -> None:
        """Close all pooled connections."""
        if self._pool is None:
            return
        self._pool.close()
        await self._pool.wait_closed()
        self._pool = None
        logger.info("MySQL pool closed")

    def acquire(self):
        """
        Borrow a connection: ``async with pool.acquire() as conn``.

        Raises:
            StorageError: If the pool has not been initialized
        """
        if self._pool is None:
            raise StorageError(
                "Database pool not initialized. "
                "Use 'async with DatabasePool(...) as pool:' or call await pool.initialize()"
            )
        return self._pool.acquire()

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, *_args):
        await self.shutdown()
        return None
