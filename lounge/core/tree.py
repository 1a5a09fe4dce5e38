"""
Lounge Discord Bot - Command Tree
=================================

The slash command dispatcher and its error boundary.

DESIGN:
    discord.py's CommandTree already maps command names to handlers. This
    subclass adds the two behaviours it lacks:

    1. Fallback: a command name with no registered handler is answered
       from the custom command table, or with a "not implemented" reply.
    2. Error boundary: every handler failure arrives in on_error, is
       classified into an ErrorKind, logged once, and turned into exactly
       one user-visible reply (initial response, deferred edit or
       follow-up, depending on what was already sent).
"""

from typing import TYPE_CHECKING

import discord
from discord import app_commands

from lounge.core.errors import (
    GENERIC_ERROR_MESSAGE,
    NOT_IMPLEMENTED_MESSAGE,
    CommandFailure,
    ErrorKind,
)
from lounge.core.logger import logger
from lounge.core.storage import CustomCommandStore
from lounge.utils.error_handler import ErrorHandler
from lounge.utils.interaction import respond

if TYPE_CHECKING:
    from lounge.bot import LoungeBot


# =============================================================================
# Fallback
# =============================================================================

async def reply_custom_or_missing(
    interaction: discord.Interaction,
    name: str,
    custom_commands: CustomCommandStore,
) -> bool:
    """
    Answer a command that has no built-in handler.

    Returns:
        True if a custom command answered, False for "not implemented".
    """
    entry = await custom_commands.get(name)
    if entry is not None:
        await respond(interaction, entry.response)
        logger.tree("Custom Command Used", [
            ("Command", f"/{name}"),
            ("User", f"{interaction.user} ({interaction.user.id})"),
        ], emoji="⚙️")
        return True

    await respond(interaction, NOT_IMPLEMENTED_MESSAGE)
    logger.tree("Unimplemented Command", [
        ("Command", f"/{name}"),
        ("User", f"{interaction.user} ({interaction.user.id})"),
    ], emoji="🚧")
    return False


# =============================================================================
# Error Classification
# =============================================================================

def classify_error(error: Exception) -> CommandFailure:
    """Map any handler exception onto a CommandFailure."""
    if isinstance(error, app_commands.CommandInvokeError):
        error = error.original

    if isinstance(error, CommandFailure):
        return error

    if isinstance(error, app_commands.CheckFailure):
        return CommandFailure(
            ErrorKind.PERMISSION_DENIED,
            "❌ You don't have permission to use this command.",
            ephemeral=True,
            cause=error,
        )

    if isinstance(error, app_commands.TransformerError):
        return CommandFailure(
            ErrorKind.INVALID_INPUT,
            f"❌ Invalid value: {error.value}",
            ephemeral=True,
            cause=error,
        )

    return CommandFailure(
        ErrorKind.INTERNAL,
        GENERIC_ERROR_MESSAGE,
        ephemeral=True,
        cause=error,
    )


async def handle_command_error(
    interaction: discord.Interaction,
    error: app_commands.AppCommandError,
    custom_commands: CustomCommandStore,
) -> None:
    """
    Turn a failed (or unknown) command into exactly one reply.

    Args:
        interaction: The failed interaction.
        error: What discord.py reported.
        custom_commands: Table consulted for unknown command names.
    """
    if isinstance(error, app_commands.CommandNotFound):
        await reply_custom_or_missing(interaction, error.name, custom_commands)
        return

    failure = classify_error(error)
    command_name = interaction.command.qualified_name if interaction.command else "unknown"

    if failure.kind is ErrorKind.INTERNAL:
        ErrorHandler.handle(
            failure.cause or error,
            location=f"command./{command_name}",
            interaction=interaction,
        )
    else:
        logger.tree("Command Failed", [
            ("Command", f"/{command_name}"),
            ("Kind", failure.kind.value),
            ("User", f"{interaction.user} ({interaction.user.id})"),
            ("Reply", failure.message[:80]),
        ], emoji="🚫")

    try:
        await respond(interaction, failure.message, ephemeral=failure.ephemeral)
    except discord.HTTPException as e:
        # Interaction token expired or the channel vanished
        logger.warning("Error Reply Failed", [
            ("Command", f"/{command_name}"),
            ("Status", str(e.status)),
            ("Error", str(e)[:100]),
        ])


# =============================================================================
# Command Tree
# =============================================================================

class LoungeCommandTree(app_commands.CommandTree):
    """CommandTree with custom-command fallback and a central error reply."""

    client: "LoungeBot"

    async def on_error(
        self,
        interaction: discord.Interaction,
        error: app_commands.AppCommandError,
    ) -> None:
        await handle_command_error(interaction, error, self.client.storage.custom_commands)


__all__ = [
    "LoungeCommandTree",
    "classify_error",
    "handle_command_error",
    "reply_custom_or_missing",
]
