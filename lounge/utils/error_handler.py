"""
Lounge Discord Bot - Error Handler
==================================

Error categorisation, recovery hints and context logging.

Features:
- Error categorization (discord, http, config, general)
- Recovery suggestions per error type
- Discord-specific context capture
- Critical error dumps to {LOG_DIR}/errors/
- asyncio loop handler for exceptions nobody awaited
"""

import asyncio
import json
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Tuple

import aiohttp
import discord

from lounge.core.config import ConfigValidationError
from lounge.core.errors import CommandRegistrationError, ContentAPIError
from lounge.core.logger import logger


class ErrorContext:
    """Captures and formats error context."""

    @staticmethod
    def get_full_context(e: BaseException, location: str, **kwargs) -> Dict[str, Any]:
        """
        Build a context dictionary for an exception.

        Args:
            e: The exception.
            location: Where the error occurred.
            **kwargs: Extra context (interaction, message, ...).
        """
        context: Dict[str, Any] = {
            "timestamp": datetime.now().isoformat(),
            "location": location,
            "error_type": type(e).__name__,
            "error_message": str(e),
            "traceback": "".join(traceback.format_exception(type(e), e, e.__traceback__)),
            "python_version": sys.version,
            "additional_context": {k: v for k, v in kwargs.items() if not isinstance(v, (discord.Interaction, discord.Message))},
        }

        interaction = kwargs.get("interaction")
        if isinstance(interaction, discord.Interaction):
            command = interaction.command.qualified_name if interaction.command else None
            context["discord_context"] = {
                "guild": interaction.guild.name if interaction.guild else "DM",
                "channel_id": interaction.channel_id,
                "user": str(interaction.user),
                "user_id": interaction.user.id,
                "command": command,
            }

        message = kwargs.get("message")
        if isinstance(message, discord.Message):
            context["discord_context"] = {
                "guild": message.guild.name if message.guild else "DM",
                "channel_id": message.channel.id,
                "user": str(message.author),
                "user_id": message.author.id,
                "content": message.content[:100] if message.content else None,
            }

        return context


class ErrorHandler:
    """Error handling with context and recovery hints."""

    ERROR_CATEGORIES: List[Tuple[str, Tuple[type, ...]]] = [
        ("config", (ConfigValidationError,)),
        ("discord", (discord.DiscordException, CommandRegistrationError)),
        ("http", (aiohttp.ClientError, ContentAPIError, asyncio.TimeoutError, ConnectionError)),
    ]

    SUGGESTIONS: List[Tuple[type, str]] = [
        (ConfigValidationError, "Check the environment variables / .env file"),
        (discord.LoginFailure, "Bot token rejected - regenerate it in the Developer Portal"),
        (discord.PrivilegedIntentsRequired, "Enable the privileged intents in the Developer Portal"),
        (discord.Forbidden, "Check bot permissions and role position in server settings"),
        (discord.NotFound, "Resource not found - check IDs and channels"),
        (discord.HTTPException, "Discord API issue - the user can retry the command"),
        (CommandRegistrationError, "Check CLIENT_ID / GUILD_ID and that the bot is invited with applications.commands"),
        (ContentAPIError, "External content API unavailable - nothing to do locally"),
        (aiohttp.ClientError, "Network issue reaching an external API"),
        (asyncio.TimeoutError, "Request timed out"),
    ]

    @classmethod
    def categorize_error(cls, e: BaseException) -> str:
        for category, error_types in cls.ERROR_CATEGORIES:
            if isinstance(e, error_types):
                return category
        return "general"

    @classmethod
    def get_recovery_suggestion(cls, e: BaseException) -> str:
        for error_type, suggestion in cls.SUGGESTIONS:
            if isinstance(e, error_type):
                return suggestion
        return "Unexpected error - check logs for details"

    @classmethod
    def handle(cls, e: BaseException, location: str, critical: bool = False, **context) -> Dict[str, Any]:
        """
        Log an error with full context.

        Args:
            e: The exception.
            location: Where the error occurred.
            critical: Whether this error stops the bot.
            **context: Additional context.

        Returns:
            The collected context dictionary.
        """
        category = cls.categorize_error(e)
        suggestion = cls.get_recovery_suggestion(e)
        full_context = ErrorContext.get_full_context(e, location, **context)

        details = [
            ("Location", location),
            ("Category", category.upper()),
            ("Type", full_context["error_type"]),
            ("Error", full_context["error_message"][:200]),
            ("Recovery", suggestion),
        ]
        discord_context = full_context.get("discord_context")
        if discord_context:
            details.append(("User", f"{discord_context['user']} ({discord_context['user_id']})"))
            if discord_context.get("command"):
                details.append(("Command", f"/{discord_context['command']}"))

        if critical:
            logger.error("💥 CRITICAL ERROR", details)
            logger.info(f"Traceback:\n{full_context['traceback']}")
            cls._store_critical_error(full_context)
        else:
            logger.warning("Error Handled", details)
            logger.debug(f"Traceback:\n{full_context['traceback']}")

        return full_context

    @staticmethod
    def _store_critical_error(context: Dict[str, Any]) -> None:
        """Dump a critical error's context as JSON next to the logs."""
        error_dir = Path(logger.log_root) / "errors"
        try:
            error_dir.mkdir(exist_ok=True, parents=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            error_file = error_dir / f"error_{timestamp}.json"
            with open(error_file, "w", encoding="utf-8") as f:
                json.dump(context, f, indent=2, default=str)
            logger.info(f"Critical error saved to {error_file}")
        except OSError as save_error:
            logger.info(f"Failed to save error details: {save_error}")


def install_loop_exception_handler(loop: asyncio.AbstractEventLoop) -> None:
    """
    Log exceptions from tasks nobody awaited instead of letting asyncio
    print them to stderr. The process keeps running.
    """

    def _handler(active_loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
        exception = context.get("exception")
        message = context.get("message", "Unhandled exception in event loop")
        if exception is not None:
            ErrorHandler.handle(exception, location="event_loop", loop_message=message)
        else:
            logger.error("Unhandled Event Loop Error", [("Message", str(message))])

    loop.set_exception_handler(_handler)


__all__ = [
    "ErrorContext",
    "ErrorHandler",
    "install_loop_exception_handler",
]
