"""
Discord Bot Layer.

Handles Discord connection, per-guild prefix dispatch and the text commands
of the LOTR Mod Bot.
"""

from lotrbot.bot.client import LotrModBot

__all__ = ["LotrModBot"]
