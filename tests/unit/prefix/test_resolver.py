"""
Tests for PrefixResolver.

Uses an in-memory store with the same semantics as the MySQL table
(one row per guild, insert is a no-op when the row exists, update of a
missing row changes nothing) so the resolve/assign contract can be checked
end to end:
- lazy default provisioning on first lookup
- stored prefixes returned unchanged, without further writes
- assign only affects existing rows
- direct messages use the sentinel key 0
- read/write failures: resolve fails open, assign propagates
"""

from __future__ import annotations

import asyncio

import pytest

from lotrbot.prefix import (
    DEFAULT_PREFIX,
    DM_GUILD_ID,
    InvalidPrefixError,
    PrefixResolver,
    normalize_guild_id,
    validate_prefix,
)
from lotrbot.storage.errors import StorageError


class InMemoryPrefixStore:
    """Dict-backed stand-in for PrefixStore that records every call."""

    def __init__(self, rows: dict[int, str | None] | None = None, read_delay: float = 0.0):
        self.rows: dict[int, str | None] = dict(rows or {})
        self.read_delay = read_delay
        self.fail_read = False
        self.fail_insert = False
        self.fail_update = False
        self.reads: list[int] = []
        self.inserts: list[tuple[int, str]] = []
        self.updates: list[tuple[int, str]] = []

    async def read(self, guild_id: int) -> str | None:
        self.reads.append(guild_id)
        # Snapshot before suspending, like a SELECT that has already run
        value = self.rows.get(guild_id)
        if self.read_delay:
            await asyncio.sleep(self.read_delay)
        if self.fail_read:
            raise StorageError("read failed")
        return value

    async def insert(self, guild_id: int, prefix: str) -> bool:
        self.inserts.append((guild_id, prefix))
        if self.fail_insert:
            raise StorageError("insert failed")
        if guild_id in self.rows:
            return False
        self.rows[guild_id] = prefix
        return True

    async def update(self, guild_id: int, prefix: str) -> int:
        self.updates.append((guild_id, prefix))
        if self.fail_update:
            raise StorageError("update failed")
        if guild_id not in self.rows:
            return 0
        self.rows[guild_id] = prefix
        return 1


@pytest.fixture
def store():
    return InMemoryPrefixStore()


@pytest.fixture
def resolver(store):
    return PrefixResolver(store)


class TestResolve:
    @pytest.mark.asyncio
    async def test_unknown_guild_gets_default_and_row(self, resolver, store):
        """First lookup returns "!" and provisions a row with "!"."""
        assert await resolver.resolve(42) == "!"
        assert store.rows == {42: "!"}

    @pytest.mark.asyncio
    async def test_known_guild_returns_stored_prefix(self, store):
        store.rows[42] = "$"
        resolver = PrefixResolver(store)

        assert await resolver.resolve(42) == "$"
        assert await resolver.resolve(42) == "$"
        assert store.inserts == []
        assert store.updates == []

    @pytest.mark.asyncio
    async def test_repeated_resolve_writes_once(self, resolver, store):
        await resolver.resolve(42)
        await resolver.resolve(42)
        await resolver.resolve(42)

        assert store.inserts == [(42, "!")]

    @pytest.mark.asyncio
    async def test_null_prefix_is_treated_as_missing(self, store):
        """A row whose prefix is NULL resolves to the default."""
        store.rows[42] = None
        resolver = PrefixResolver(store)

        assert await resolver.resolve(42) == "!"
        assert store.inserts == [(42, "!")]

    @pytest.mark.asyncio
    async def test_none_guild_uses_sentinel_key(self, resolver, store):
        store.rows[7] = "?"

        assert await resolver.resolve(None) == "!"
        assert store.reads == [DM_GUILD_ID]
        assert store.rows == {7: "?", 0: "!"}

    @pytest.mark.asyncio
    async def test_custom_default_prefix(self, store):
        resolver = PrefixResolver(store, default_prefix="~")

        assert await resolver.resolve(42) == "~"
        assert store.rows == {42: "~"}

    @pytest.mark.asyncio
    async def test_read_failure_fails_open(self, resolver, store):
        """A failed lookup still yields the default and attempts provisioning."""
        store.fail_read = True

        assert await resolver.resolve(42) == DEFAULT_PREFIX
        assert store.inserts == [(42, "!")]

    @pytest.mark.asyncio
    async def test_insert_failure_still_returns_default(self, resolver, store):
        store.fail_insert = True

        assert await resolver.resolve(42) == "!"
        assert store.rows == {}

    @pytest.mark.asyncio
    async def test_everything_failing_never_raises(self, resolver, store):
        store.fail_read = True
        store.fail_insert = True

        assert await resolver.resolve(42) == "!"

    @pytest.mark.asyncio
    async def test_concurrent_first_lookups(self):
        """Two first-time lookups racing both get "!" and leave one row."""
        store = InMemoryPrefixStore(read_delay=0.01)
        resolver = PrefixResolver(store)

        results = await asyncio.gather(resolver.resolve(42), resolver.resolve(42))

        assert results == ["!", "!"]
        assert store.rows == {42: "!"}

    @pytest.mark.asyncio
    async def test_provisioning_does_not_overwrite_concurrent_assign(self):
        """An assign landing between a miss and its insert wins."""
        store = InMemoryPrefixStore(read_delay=0.01)
        resolver = PrefixResolver(store)

        async def assign_during_read():
            await asyncio.sleep(0)
            store.rows[42] = "?"

        results = await asyncio.gather(resolver.resolve(42), assign_during_read())

        assert results[0] == "!"
        assert store.rows == {42: "?"}


class TestAssign:
    @pytest.mark.asyncio
    async def test_assign_then_resolve(self, resolver, store):
        await resolver.resolve(42)
        await resolver.assign(42, "?")

        assert await resolver.resolve(42) == "?"

    @pytest.mark.asyncio
    async def test_assign_without_row_is_noop(self, resolver, store):
        await resolver.assign(42, "?")

        assert store.rows == {}
        assert await resolver.resolve(42) == "!"

    @pytest.mark.asyncio
    async def test_assign_uses_update_not_insert(self, resolver, store):
        store.rows[42] = "!"

        await resolver.assign(42, "?")

        assert store.updates == [(42, "?")]
        assert store.inserts == []

    @pytest.mark.asyncio
    async def test_direct_message_scenario(self, resolver):
        """resolve(None) → "!", assign(None, "?"), resolve(None) → "?"."""
        assert await resolver.resolve(None) == "!"
        await resolver.assign(None, "?")
        assert await resolver.resolve(None) == "?"

    @pytest.mark.asyncio
    async def test_sentinel_is_independent_of_guilds(self, resolver, store):
        await resolver.resolve(None)
        await resolver.resolve(42)
        await resolver.assign(None, "?")

        assert await resolver.resolve(42) == "!"
        assert await resolver.resolve(None) == "?"

    @pytest.mark.asyncio
    async def test_update_failure_propagates(self, resolver, store):
        store.rows[42] = "!"
        store.fail_update = True

        with pytest.raises(StorageError):
            await resolver.assign(42, "?")
        assert store.rows[42] == "!"


class TestNormalizeGuildId:
    def test_none_maps_to_sentinel(self):
        assert normalize_guild_id(None) == 0

    def test_guild_id_unchanged(self):
        assert normalize_guild_id(780858391383638057) == 780858391383638057


class TestValidatePrefix:
    @pytest.mark.parametrize("raw, expected", [
        ("?", "?"),
        ("!!", "!!"),
        ("  $ ", "$"),
        ("lotr.", "lotr."),
        ("12345678", "12345678"),
    ])
    def test_accepts(self, raw, expected):
        assert validate_prefix(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "a b", "tab\there", "123456789"])
    def test_rejects(self, raw):
        with pytest.raises(InvalidPrefixError):
            validate_prefix(raw)

    def test_invalid_prefix_is_value_error(self):
        assert issubclass(InvalidPrefixError, ValueError)
