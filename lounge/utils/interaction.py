"""
Lounge Discord Bot - Interaction Utilities
==========================================

Reply helpers that pick the right delivery path for an interaction.

DESIGN:
    Discord allows one initial response per interaction. After that the
    bot must either edit the deferred response or send a follow-up.
    respond() chooses exactly one of the three paths from the current
    response state, so callers never check is_done() themselves.
"""

from typing import Any, Dict, Optional

import discord


DEFERRED_RESPONSE_TYPES = (
    discord.InteractionResponseType.deferred_channel_message,
    discord.InteractionResponseType.deferred_message_update,
)


def is_deferred(interaction: discord.Interaction) -> bool:
    """True if the initial response was a deferral still awaiting content."""
    return (
        interaction.response.is_done()
        and interaction.response.type in DEFERRED_RESPONSE_TYPES
    )


async def respond(
    interaction: discord.Interaction,
    content: Optional[str] = None,
    *,
    embed: Optional[discord.Embed] = None,
    ephemeral: bool = False,
) -> None:
    """
    Deliver a reply through whichever path the interaction state allows.

    1. Nothing sent yet -> initial response.
    2. Deferred -> edit the deferred response.
    3. Already replied -> follow-up message.

    Args:
        interaction: The interaction to answer.
        content: Message text.
        embed: Optional embed.
        ephemeral: Only visible to the invoker (ignored when editing a
            deferral, which keeps the visibility it was deferred with).
    """
    kwargs: Dict[str, Any] = {}
    if content is not None:
        kwargs["content"] = content
    if embed is not None:
        kwargs["embed"] = embed

    if not interaction.response.is_done():
        await interaction.response.send_message(ephemeral=ephemeral, **kwargs)
    elif is_deferred(interaction):
        await interaction.edit_original_response(**kwargs)
    else:
        await interaction.followup.send(ephemeral=ephemeral, **kwargs)


__all__ = [
    "is_deferred",
    "respond",
]
