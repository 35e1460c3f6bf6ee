"""
Prefix Store - durable guild ID -> command prefix mapping.

Backed by the ``lotr_mod_bot_prefix`` table (see schema.py). Every operation
borrows a pooled connection, sends a parameterized statement and wraps any
driver or transport failure in StorageError. Absence is not a failure.
"""

from lotrbot.config.logging import get_logger
from lotrbot.storage.errors import StorageError
from lotrbot.storage.pool import DATABASE_ERRORS
from lotrbot.storage.schema import (
    COUNT_SERVER_ID_UNIQUE_INDEXES,
    CREATE_PREFIX_TABLE,
    INSERT_PREFIX,
    PREFIX_TABLE,
    SELECT_PREFIX,
    UPDATE_PREFIX,
)

logger = get_logger(__name__)


class PrefixStore:
    """
    Reads and writes per-guild prefixes.

    Args:
        pool: Shared DatabasePool (anything with an ``acquire()`` async
            context manager yielding an aiomysql connection)
    """

    def __init__(self, pool):
        self._pool = pool

    async def ensure_schema(self) -> bool:
        """
        Create the prefix table if it does not exist yet.

        An existing table is kept as is. If its ``server_id`` column carries
        no primary or unique key, concurrent first lookups can leave
        duplicate rows, so that case is logged as a warning.

        Returns:
            True if ``server_id`` is uniquely indexed

        Raises:
            StorageError: If the table could not be created or inspected
        """
        try:
            async with self._pool.acquire() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(CREATE_PREFIX_TABLE)
                    await cur.execute(COUNT_SERVER_ID_UNIQUE_INDEXES, (PREFIX_TABLE,))
                    row = await cur.fetchone()
        except DATABASE_ERRORS as e:
            raise StorageError(f"Could not create table {PREFIX_TABLE}: {e}") from e

        if not row or not row[0]:
            logger.warning(
                f"Table {PREFIX_TABLE} has no primary key on server_id; "
                f"concurrent first lookups may insert duplicate rows"
            )
            return False

        logger.info(f"Table {PREFIX_TABLE} ready")
        return True

    async def read(self, guild_id: int) -> str | None:
        """
        Look up the stored prefix for a guild.

        Returns:
            The prefix, or None if there is no row or its prefix is NULL

        Raises:
            StorageError: If the lookup could not be performed
        """
        try:
            async with self._pool.acquire() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(SELECT_PREFIX, (guild_id,))
                    row = await cur.fetchone()
        except DATABASE_ERRORS as e:
            raise StorageError(f"Could not read prefix for guild {guild_id}: {e}") from e

        if row is None:
            return None
        return row[0]

    async def insert(self, guild_id: int, prefix: str) -> bool:
        """
        Create the row for a guild unless one already exists.

        Returns:
            True if a row was created, False if the guild already had one

        Raises:
            StorageError: If the write failed
        """
        try:
            async with self._pool.acquire() as conn:
                async with conn.cursor() as cur:
                    affected = await cur.execute(INSERT_PREFIX, (guild_id, prefix))
        except DATABASE_ERRORS as e:
            raise StorageError(f"Could not insert prefix for guild {guild_id}: {e}") from e

        created = affected == 1
        if created:
            logger.debug(f"Created prefix row for guild {guild_id}: {prefix!r}")
        return created

    async def update(self, guild_id: int, prefix: str) -> int:
        """
        Rewrite the prefix of an existing row.

        A guild without a row is left untouched and 0 is returned.

        Returns:
            Number of rows affected

        Raises:
            StorageError: If the write failed
        """
        try:
            async with self._pool.acquire() as conn:
                async with conn.cursor() as cur:
                    affected = await cur.execute(UPDATE_PREFIX, (prefix, guild_id))
        except DATABASE_ERRORS as e:
            raise StorageError(f"Could not update prefix for guild {guild_id}: {e}") from e

        logger.debug(f"Updated prefix for guild {guild_id} to {prefix!r} ({affected} row(s))")
        return affected
