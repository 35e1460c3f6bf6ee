"""
LotrModBot — discord.py bot client.

Manages the full bot lifecycle:
- Opens the shared MySQL pool once at startup and builds the prefix resolver on it
- Resolves the command prefix per guild for every message (plus @mention)
- Loads the GeneralCog command handlers
- Sets the "Playing" status when ready
- Ignores unknown command names instead of logging them as errors
- Closes the pool on shutdown via AsyncExitStack
"""

from __future__ import annotations

from contextlib import AsyncExitStack

import discord
from discord.ext import commands

from lotrbot.config.logging import get_logger
from lotrbot.config.settings import Settings
from lotrbot.prefix import PrefixResolver
from lotrbot.storage import DatabasePool, PrefixStore

logger = get_logger(__name__)


async def dynamic_prefix(bot: LotrModBot, message: discord.Message) -> list[str]:
    """
    discord.py ``command_prefix`` callable.

    Returns the guild's stored prefix (sentinel key 0 in direct messages)
    and the two raw mention forms of the bot.
    """
    guild_id = message.guild.id if message.guild else None
    prefix = await bot.prefix_resolver.resolve(guild_id)

    prefixes = []
    mention_id = bot.mention_id
    if mention_id is not None:
        prefixes.extend([f"<@{mention_id}> ", f"<@!{mention_id}> "])
    prefixes.append(prefix)
    return prefixes


def _guild_only(ctx: commands.Context) -> bool:
    """Global check: commands are not available in direct messages."""
    return ctx.guild is not None


def _is_bare_prefix(ctx: commands.Context) -> bool:
    """True when the message holds nothing but the prefix, e.g. `!`."""
    return ctx.message.content.strip() == ctx.prefix.strip()


class LotrModBot(commands.Bot):
    """
    Discord bot for the Lord of the Rings Minecraft Mod server.

    Holds the database pool and prefix resolver and exposes them to cogs.

    Args:
        settings: Full application settings (token, database, logging)
    """

    def __init__(self, settings: Settings) -> None:
        intents = discord.Intents.default()
        intents.message_content = True  # Required to read prefixed commands
        super().__init__(
            command_prefix=dynamic_prefix,
            intents=intents,
            help_command=None,  # GeneralCog provides its own `help`
        )
        self.settings = settings
        self.db_pool: DatabasePool | None = None
        self.prefix_resolver: PrefixResolver | None = None
        self._exit_stack = AsyncExitStack()
        self.add_check(_guild_only)

    @property
    def mention_id(self) -> int | None:
        """User ID whose mention acts as a prefix and triggers the prefix reply."""
        if self.settings.bot.bot_id:
            return self.settings.bot.bot_id
        return self.user.id if self.user else None

    async def setup_hook(self) -> None:
        """
        Called after login, before connecting to the Gateway.

        Opens the database pool, makes sure the prefix table exists and
        loads the cogs. A database that cannot be reached here is fatal.
        """
        logger.info("Initializing database...")
        self.db_pool = await self._exit_stack.enter_async_context(
            DatabasePool(self.settings.database)
        )
        store = PrefixStore(self.db_pool)
        await store.ensure_schema()
        self.prefix_resolver = PrefixResolver(
            store, default_prefix=self.settings.bot.default_prefix
        )
        logger.info("Prefix resolver ready")

        from lotrbot.bot.cogs.general import GeneralCog
        await self.add_cog(GeneralCog(self))
        logger.info("Cogs loaded")

    async def on_ready(self) -> None:
        """Called when the bot successfully connects to Discord."""
        logger.info(f"Logged in as {self.user} (id: {self.user.id})")
        logger.info(f"Connected to {len(self.guilds)} guild(s)")
        await self.change_presence(activity=discord.Game(name=self.settings.bot.activity))

    async def invoke(self, ctx: commands.Context) -> None:
        """A message consisting of just the prefix runs `help`."""
        if ctx.command is None and ctx.prefix is not None and _is_bare_prefix(ctx):
            ctx.command = self.get_command("help")
        await super().invoke(ctx)

    async def on_command_error(self, ctx: commands.Context, error: commands.CommandError) -> None:
        """Unknown command names are ordinary chat; everything else goes to discord.py."""
        if isinstance(error, commands.CommandNotFound):
            logger.debug(f"Ignoring unknown command: {error}")
            return
        await super().on_command_error(ctx, error)

    async def close(self) -> None:
        """Graceful shutdown — close the database pool before disconnecting."""
        logger.info("Shutting down LOTR Mod Bot...")
        await self._exit_stack.aclose()
        await super().close()
