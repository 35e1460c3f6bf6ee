"""
GeneralCog — the bot's text commands and mention reply.

Commands (invoked with the guild's prefix or an @mention):
  renewed  — point people at the 1.7.10 Legacy edition
  help     — DM the prefix and command list to the author
  wiki     — link a page of the mod's fandom wiki
  tos      — explain that this is not the official mod server
  prefix   — show or (administrators only) change the guild's prefix

Mentioning the bot anywhere, direct messages included, replies with the
prefix in effect there.
"""

from __future__ import annotations

import discord
from discord.ext import commands

from lotrbot.config.logging import get_logger
from lotrbot.prefix import InvalidPrefixError, validate_prefix
from lotrbot.storage import StorageError

logger = get_logger(__name__)

WIKI_BASE_URL = "https://lotrminecraftmod.fandom.com"

RENEWED_TITLE = "Use the 1.7.10 version"
RENEWED_DESCRIPTION = (
    "The 1.15.2 version of the mod is a work in progress, missing many features.\n"
    "You can find those in the full 1.7.10 Legacy edition "
    "[here](https://lotrminecraftmod.fandom.com/wiki/Template:Main_Version)"
)

TOS_TEXT = (
    "This is the Discord server of the **Lord of the Rings Mod**, not the official server.\n"
    "Their Discord can be found here: https://discord.gg/gMNKaX6"
)

COMMAND_LIST = "`renewed`, `tos`, `wiki`, `help`, `prefix`"

PREFIX_FAILED = "Failed to set the new prefix!"


def prefix_message(prefix: str) -> str:
    return f'My prefix here is "{prefix}"'


def wiki_url(terms: str) -> str:
    """
    Build a wiki link from free text.

    Each word gets its first letter upper-cased and words are joined with
    underscores: "minas tirith" -> ".../wiki/Minas_Tirith". No terms links
    the wiki's front page.

    Pages go under fandom's ``/wiki/`` article path. Older links posted as
    ``<site>/<Page>`` without it only work through fandom's redirect.
    """
    page = "_".join(word[:1].upper() + word[1:] for word in terms.split())
    if not page:
        return f"{WIKI_BASE_URL}/"
    return f"{WIKI_BASE_URL}/wiki/{page}"


def _guild_id(ctx: commands.Context) -> int | None:
    return ctx.guild.id if ctx.guild else None


class GeneralCog(commands.Cog):
    """Static replies, wiki links and the prefix command."""

    def __init__(self, bot) -> None:
        self.bot = bot

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @commands.command(name="renewed")
    async def renewed(self, ctx: commands.Context) -> None:
        """Recommend the 1.7.10 Legacy edition over the unfinished Renewed one."""
        embed = discord.Embed(title=RENEWED_TITLE, description=RENEWED_DESCRIPTION)
        await ctx.send(embed=embed)
        await ctx.message.delete()

    @commands.command(name="help")
    async def show_help(self, ctx: commands.Context) -> None:
        """DM the author the prefix and the available commands, then react ✅."""
        prefix = await self.bot.prefix_resolver.resolve(_guild_id(ctx))
        embed = discord.Embed(title="Available commands", description=COMMAND_LIST)
        await ctx.author.send(content=prefix_message(prefix), embed=embed)
        await ctx.message.add_reaction("✅")

    @commands.command(name="wiki")
    async def wiki(self, ctx: commands.Context, *, terms: str = "") -> None:
        """Link a wiki page, e.g. `wiki minas tirith`."""
        await ctx.send(wiki_url(terms))
        await ctx.message.delete()

    @commands.command(name="tos")
    async def tos(self, ctx: commands.Context) -> None:
        """Point at the official mod Discord."""
        await ctx.send(TOS_TEXT)
        await ctx.message.delete()

    @commands.command(name="prefix", ignore_extra=False)
    @commands.has_permissions(administrator=True)
    async def prefix(self, ctx: commands.Context, new_prefix: str | None = None) -> None:
        """
        prefix          — show the prefix in effect for this server
        prefix <new>    — change it (administrators only)

        Invalid prefixes and database failures both answer with the same
        failure notice; nothing is written for invalid input.
        """
        guild_id = _guild_id(ctx)

        if new_prefix is None:
            prefix = await self.bot.prefix_resolver.resolve(guild_id)
            await ctx.send(prefix_message(prefix))
            return

        try:
            prefix = validate_prefix(new_prefix)
            await self.bot.prefix_resolver.assign(guild_id, prefix)
        except InvalidPrefixError as e:
            logger.info(f"Rejected prefix {new_prefix!r} in guild {guild_id}: {e}")
            await ctx.send(PREFIX_FAILED)
            return
        except StorageError as e:
            logger.warning(f"Prefix change failed in guild {guild_id}: {e}")
            await ctx.send(PREFIX_FAILED)
            return

        await ctx.send(f'Set the new prefix to "{prefix}"')

    # ------------------------------------------------------------------
    # Mention listener
    # ------------------------------------------------------------------

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        """Reply with the effective prefix when the bot is mentioned."""
        if message.author.bot:
            return
        mention_id = self.bot.mention_id
        if mention_id is None or not any(user.id == mention_id for user in message.mentions):
            return

        guild_id = message.guild.id if message.guild else None
        prefix = await self.bot.prefix_resolver.resolve(guild_id)
        await message.channel.send(prefix_message(prefix))

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    async def cog_command_error(self, ctx: commands.Context, error: Exception) -> None:
        """
        Handle errors from this cog's commands.

        Extra arguments to `prefix` are malformed input and get the failure
        notice. Failed checks (missing permissions, direct messages) are
        ignored silently.
        """
        if isinstance(error, commands.TooManyArguments):
            await ctx.send(PREFIX_FAILED)
            return
        if isinstance(error, commands.CheckFailure):
            logger.debug(f"Check failed for {ctx.command} by {ctx.author}: {error}")
            return
        if isinstance(error, commands.CommandInvokeError):
            logger.error(
                f"Command {ctx.command} failed: {error.original}", exc_info=error.original
            )
            return
        logger.warning(f"Command {ctx.command} error: {error}")
