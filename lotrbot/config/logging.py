"""
Logging configuration and setup.

Provides console and file output for the ``lotrbot`` logger namespace.
discord.py's own logger is attached to the same handlers so gateway
events show up alongside ours.
"""

import logging
import sys
from pathlib import Path

from lotrbot.config.settings import Settings


class ColoredFormatter(logging.Formatter):
    """Console formatter that colours the level name."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        # Handlers share the record; the file handler must see the plain name
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _build_handlers(settings: Settings, level: int) -> list[logging.Handler]:
    """Coloured stdout handler, plus a plain file handler when LOG_FILE is set."""
    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(ColoredFormatter(fmt=CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    handlers: list[logging.Handler] = [console]

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        log_file = logging.FileHandler(log_path)
        log_file.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt=DATE_FORMAT))
        handlers.append(log_file)

    for handler in handlers:
        handler.setLevel(level)
    return handlers


def _route(name: str, handlers: list[logging.Handler], level: int) -> logging.Logger:
    """Send one logger namespace to our handlers only."""
    target = logging.getLogger(name)
    target.setLevel(level)
    target.handlers.clear()
    for handler in handlers:
        target.addHandler(handler)
    target.propagate = False
    return target


def setup_logging(settings: Settings) -> None:
    """
    Configure the ``lotrbot`` and ``discord`` loggers from settings.

    Calling it again replaces the handlers instead of stacking them.
    """
    level = getattr(logging, settings.log_level)
    handlers = _build_handlers(settings, level)

    bot_logger = _route("lotrbot", handlers, level)
    # discord.py's DEBUG output is gateway noise
    _route("discord", handlers, max(level, logging.INFO))

    bot_logger.info(f"Logging initialized - Level: {settings.log_level}")
    if settings.log_file:
        bot_logger.info(f"Logging to file: {settings.log_file}")


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``lotrbot`` namespace; module names already in it are kept."""
    if name == "lotrbot" or name.startswith("lotrbot."):
        return logging.getLogger(name)
    return logging.getLogger(f"lotrbot.{name}")
