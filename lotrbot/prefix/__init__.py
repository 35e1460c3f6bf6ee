"""
Per-guild command prefix resolution.

    Discord message  →  PrefixResolver.resolve(guild_id)  →  PrefixStore.read / insert
    `prefix` command →  PrefixResolver.assign(guild_id, p) →  PrefixStore.update
"""

from lotrbot.prefix.resolver import (
    DEFAULT_PREFIX,
    DM_GUILD_ID,
    InvalidPrefixError,
    PrefixResolver,
    normalize_guild_id,
    validate_prefix,
)

__all__ = [
    "DEFAULT_PREFIX",
    "DM_GUILD_ID",
    "InvalidPrefixError",
    "PrefixResolver",
    "normalize_guild_id",
    "validate_prefix",
]
