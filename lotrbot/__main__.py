"""
LOTR Mod Bot CLI entry point.

Provides command-line interface for running the bot and utility commands.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from lotrbot import __version__
from lotrbot.config.logging import get_logger, setup_logging
from lotrbot.config.settings import Settings, load_settings
from lotrbot.storage import PREFIX_TABLE, DatabasePool, PrefixStore, StorageError


def create_parser() -> argparse.ArgumentParser:
    """Create and configure argument parser."""
    parser = argparse.ArgumentParser(
        prog="lotrbot",
        description="Discord bot for the Lord of the Rings Minecraft Mod community",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"LOTR Mod Bot {__version__}",
    )

    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Path to .env file (default: .env in current directory)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override logging level from config",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "run",
        help="Run the Discord bot (default)",
    )

    subparsers.add_parser(
        "config",
        help="Show current configuration",
    )

    subparsers.add_parser(
        "init-db",
        help=f"Create the {PREFIX_TABLE} table if it does not exist",
    )

    return parser


def _mask(secret: str) -> str:
    return "Set" if secret else "Not set"


def cmd_config(settings: Settings) -> int:
    """Show current configuration."""
    logger = get_logger(__name__)

    logger.info("\n=== LOTR Mod Bot Configuration ===\n")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Log Level: {settings.log_level}")
    logger.info(f"Log File: {settings.log_file or 'None (console only)'}")
    logger.info(f"\nBot Name: {settings.bot.name}")
    logger.info(f"Discord Token: {_mask(settings.bot.token)}")
    logger.info(f"Bot ID: {settings.bot.bot_id or 'logged-in user'}")
    logger.info(f"Default Prefix: {settings.bot.default_prefix}")
    logger.info(f"Activity: {settings.bot.activity}")
    logger.info(f"\nDatabase: {settings.database.user}@{settings.database.server}:"
                f"{settings.database.port}/{settings.database.name}")
    logger.info(f"Database Password: {_mask(settings.database.password)}")
    logger.info(f"Pool Size: {settings.database.pool_minsize}-{settings.database.pool_maxsize}")
    logger.info(f"Prefix Table: {PREFIX_TABLE}")

    return 0


def cmd_run(settings: Settings) -> int:
    """Start the Discord bot."""
    logger = get_logger(__name__)

    from lotrbot.bot import LotrModBot

    bot = LotrModBot(settings)
    logger.info(f"Starting {settings.bot.name}...")
    # log_handler=None: disable discord.py's default logging setup and use ours
    bot.run(settings.bot.token, log_handler=None)
    return 0


async def cmd_init_db(settings: Settings) -> int:
    """Create the prefix table and exit."""
    logger = get_logger(__name__)

    try:
        async with DatabasePool(settings.database) as pool:
            keyed = await PrefixStore(pool).ensure_schema()
    except StorageError as e:
        logger.error(f"Database initialization failed: {e}")
        return 1

    if not keyed:
        logger.error(
            f"Add the key before running the bot: "
            f"ALTER TABLE {PREFIX_TABLE} ADD PRIMARY KEY (server_id)"
        )
        return 1
    return 0


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()

    # Load settings; missing credentials end the process here
    try:
        settings = load_settings(env_file=args.env_file)
    except Exception as e:
        print(f"Error loading settings: {e}", file=sys.stderr)
        return 1

    # Override log level if specified
    if args.log_level:
        settings.log_level = args.log_level

    setup_logging(settings)

    if args.command == "config":
        return cmd_config(settings)
    elif args.command == "init-db":
        return asyncio.run(cmd_init_db(settings))
    else:
        return cmd_run(settings)


if __name__ == "__main__":
    sys.exit(main())
