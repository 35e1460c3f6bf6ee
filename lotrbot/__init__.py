"""
LOTR Mod Bot - Discord bot for the Lord of the Rings Minecraft Mod community.

This package provides the bot client, its text commands, and the per-guild
command prefix subsystem backed by a MySQL table.
"""

__version__ = "0.1.0"
