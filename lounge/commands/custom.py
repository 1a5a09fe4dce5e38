"""
Lounge Discord Bot - Custom Commands Cog
========================================

User-defined text commands and the declared-but-unbuilt placeholders.

DESIGN:
    Custom replies live in the custom command table. A stored name is
    answered in two ways:

    1. If it is a valid slash command name that no built-in uses, it is
       published as its own slash command whose callback reads the table
       at call time, so re-adding the name only updates the table.
    2. The placeholder commands (/weather, /translate, ...) and unknown
       names go through the tree fallback, which also reads the table.

Features:
    - /addcmd <name> <response>
    - /weather, /translate, /qr, /play, /stop, /balance, /daily
"""

import re
from typing import Set, TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from lounge.core.errors import CommandFailure, ErrorKind
from lounge.core.logger import logger
from lounge.core.models import CustomCommand
from lounge.core.storage import CustomCommandStore
from lounge.core.tree import reply_custom_or_missing

if TYPE_CHECKING:
    from lounge.bot import LoungeBot


SLASH_NAME_PATTERN = re.compile(r"[-_a-z0-9]{1,32}", re.ASCII)
"""Names Discord accepts for a chat input command."""

CUSTOM_COMMAND_DESCRIPTION = "Custom command"


def normalize_command_name(raw: str) -> str:
    """Lower-case a command name and drop a leading slash."""
    return raw.strip().lstrip("/").lower()


def is_publishable(name: str, builtin: Set[str]) -> bool:
    return SLASH_NAME_PATTERN.fullmatch(name) is not None and name not in builtin


def make_custom_command(name: str, store: CustomCommandStore) -> app_commands.Command:
    """Slash command that answers with whatever the table holds for name."""

    async def callback(interaction: discord.Interaction) -> None:
        await reply_custom_or_missing(interaction, name, store)

    return app_commands.Command(
        name=name,
        description=CUSTOM_COMMAND_DESCRIPTION,
        callback=callback,
    )


# =============================================================================
# Custom Commands Cog
# =============================================================================

class CustomCommandsCog(commands.Cog):
    """/addcmd plus the placeholder commands."""

    def __init__(self, bot: "LoungeBot") -> None:
        self.bot = bot

        logger.tree("Custom Commands Cog Loaded", [
            ("Commands", "/addcmd"),
            ("Placeholders", "/weather, /translate, /qr, /play, /stop, /balance, /daily"),
        ], emoji="⚙️")

    @property
    def store(self) -> CustomCommandStore:
        return self.bot.storage.custom_commands

    @app_commands.command(name="addcmd", description="Add a custom command")
    @app_commands.describe(name="Command name", response="Command response")
    @app_commands.default_permissions(manage_guild=True)
    async def addcmd(self, interaction: discord.Interaction, name: str, response: str) -> None:
        """Store a custom reply and publish it as a slash command when possible."""
        name = normalize_command_name(name)
        if not name:
            raise CommandFailure(ErrorKind.INVALID_INPUT, "❌ Command name cannot be empty.")

        await interaction.response.defer(ephemeral=True, thinking=True)

        previous = await self.store.add(CustomCommand(
            name=name,
            response=response,
            created_by=interaction.user.id,
        ))

        reply = f"✅ Custom command /{name} added!"
        published = self.bot.tree.get_command(name, guild=self.bot.command_guild) is not None

        if not published and is_publishable(name, self.bot.builtin_commands):
            if not await self.bot.publish_command(make_custom_command(name, self.store)):
                reply += "\n⚠️ Saved, but Discord rejected the slash command registration."

        await interaction.edit_original_response(content=reply)

        logger.tree("Custom Command Added", [
            ("Command", f"/{name}"),
            ("Author", f"{interaction.user} ({interaction.user.id})"),
            ("Replaced", "Yes" if previous else "No"),
            ("Response", response[:50]),
        ], emoji="⚙️")

    # =========================================================================
    # Placeholders
    # =========================================================================

    @app_commands.command(name="weather", description="Get weather information")
    @app_commands.describe(location="Location to get weather for")
    async def weather(self, interaction: discord.Interaction, location: str) -> None:
        await reply_custom_or_missing(interaction, "weather", self.store)

    @app_commands.command(name="translate", description="Translate text")
    @app_commands.describe(text="Text to translate", to="Language to translate to")
    async def translate(self, interaction: discord.Interaction, text: str, to: str) -> None:
        await reply_custom_or_missing(interaction, "translate", self.store)

    @app_commands.command(name="qr", description="Generate QR code")
    @app_commands.describe(text="Text to encode")
    async def qr(self, interaction: discord.Interaction, text: str) -> None:
        await reply_custom_or_missing(interaction, "qr", self.store)

    @app_commands.command(name="play", description="Play music (placeholder)")
    @app_commands.describe(song="Song to play")
    async def play(self, interaction: discord.Interaction, song: str) -> None:
        await reply_custom_or_missing(interaction, "play", self.store)

    @app_commands.command(name="stop", description="Stop music")
    async def stop(self, interaction: discord.Interaction) -> None:
        await reply_custom_or_missing(interaction, "stop", self.store)

    @app_commands.command(name="balance", description="Check your balance")
    async def balance(self, interaction: discord.Interaction) -> None:
        await reply_custom_or_missing(interaction, "balance", self.store)

    @app_commands.command(name="daily", description="Claim daily reward")
    async def daily(self, interaction: discord.Interaction) -> None:
        await reply_custom_or_missing(interaction, "daily", self.store)


async def setup(bot: "LoungeBot") -> None:
    """Load the Custom Commands cog."""
    await bot.add_cog(CustomCommandsCog(bot))
