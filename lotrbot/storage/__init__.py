"""
Storage Layer.

MySQL access for the bot: the shared connection pool and the per-guild
prefix table.
"""

from lotrbot.storage.errors import StorageError
from lotrbot.storage.pool import DatabasePool
from lotrbot.storage.prefix_store import PrefixStore
from lotrbot.storage.schema import PREFIX_TABLE

__all__ = [
    "DatabasePool",
    "PREFIX_TABLE",
    "PrefixStore",
    "StorageError",
]
