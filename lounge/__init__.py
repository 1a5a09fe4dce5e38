"""
Lounge Discord Bot - Source Package
===================================

A general-purpose community bot driven entirely by slash commands:
moderation, information, fun, reminders, AFK status and custom text
commands.

Package Structure:
- bot.py: Main Discord bot class, command registration and shutdown
- core/: Configuration, logging, storage, errors and the command tree
- commands/: Slash command cogs
- events/: Gateway event cogs
- services/: Reminder scheduler and the content API client
- utils/: Reply, duration, member and error helpers
"""

__version__ = "1.0.0"
