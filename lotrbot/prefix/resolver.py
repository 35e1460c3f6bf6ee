"""
Prefix Resolver - the effective command prefix for a guild.

Two call sites, two policies:
  - resolve() runs for every inbound message and must always produce a
    prefix. A missing row or a failed read falls back to the default, and a
    best-effort write provisions the default for next time.
  - assign() backs the administrator ``prefix`` command and propagates
    StorageError so the handler can report the failure.

Direct messages have no guild; they use the sentinel key 0.
"""

from __future__ import annotations

from lotrbot.config.logging import get_logger
from lotrbot.storage.errors import StorageError

logger = get_logger(__name__)

DEFAULT_PREFIX = "!"
DM_GUILD_ID = 0
MAX_PREFIX_LENGTH = 8


class InvalidPrefixError(ValueError):
    """The administrator supplied something that cannot be used as a prefix."""


def normalize_guild_id(guild_id: int | None) -> int:
    """Map a missing guild (direct message) to the sentinel key."""
    return DM_GUILD_ID if guild_id is None else int(guild_id)


def validate_prefix(raw: str | None) -> str:
    """
    Check a prefix typed by an administrator.

    Surrounding whitespace is stripped. Empty values, values containing
    whitespace and values longer than MAX_PREFIX_LENGTH are rejected.

    Raises:
        InvalidPrefixError: If the value cannot be used
    """
    if raw is None:
        raise InvalidPrefixError("No prefix given")
    prefix = raw.strip()
    if not prefix:
        raise InvalidPrefixError("Prefix must not be empty")
    if any(ch.isspace() for ch in prefix):
        raise InvalidPrefixError("Prefix must not contain whitespace")
    if len(prefix) > MAX_PREFIX_LENGTH:
        raise InvalidPrefixError(f"Prefix must be at most {MAX_PREFIX_LENGTH} characters")
    return prefix


class PrefixResolver:
    """
    Resolves and assigns per-guild prefixes on top of a PrefixStore.

    Args:
        store: PrefixStore (read/insert/update coroutines)
        default_prefix: Prefix used when a guild has none
    """

    def __init__(self, store, default_prefix: str = DEFAULT_PREFIX) -> None:
        self.store = store
        self.default_prefix = default_prefix

    async def resolve(self, guild_id: int | None) -> str:
        """
        Return the effective prefix for a guild. Never raises StorageError.

        When the store has no prefix (or cannot be read), the default is
        returned and a provisioning insert is attempted; its outcome does
        not affect the result.
        """
        key = normalize_guild_id(guild_id)

        try:
            prefix = await self.store.read(key)
        except StorageError as e:
            logger.warning(f"Prefix lookup failed for guild {key}, using default: {e}")
            prefix = None

        if prefix is not None:
            return prefix

        try:
            await self.store.insert(key, self.default_prefix)
        except StorageError as e:
            logger.warning(f"Could not store default prefix for guild {key}: {e}")

        return self.default_prefix

    async def assign(self, guild_id: int | None, new_prefix: str) -> None:
        """
        Change the prefix of a guild that already has a row.

        A guild without a row is a silent no-op.

        Raises:
            StorageError: If the update could not be written
        """
        key = normalize_guild_id(guild_id)
        affected = await self.store.update(key, new_prefix)
        if affected:
            logger.info(f"Prefix for guild {key} set to {new_prefix!r}")
        else:
            logger.debug(f"Prefix update for guild {key} changed no rows")
