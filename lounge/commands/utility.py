"""
Lounge Discord Bot - Utility Command Cog
========================================

Reminders, AFK status and the help overview.

DESIGN:
    /remind only validates and schedules; the ReminderScheduler owns the
    timer. Delivery is a follow-up on the original interaction, which
    Discord only accepts for 15 minutes, so longer reminders fall back to
    a channel message that mentions the user.

Features:
    - /remind <time> <message>
    - /afk [reason]
    - /help
"""

from typing import Optional, TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from lounge.core.config import EmbedColors
from lounge.core.errors import CommandFailure, ErrorKind
from lounge.core.logger import logger
from lounge.core.models import AfkRecord, Reminder
from lounge.services.reminders import fire_time
from lounge.utils.duration import MS_PER_SECOND, parse_time_ms

if TYPE_CHECKING:
    from lounge.bot import LoungeBot


# =============================================================================
# Constants
# =============================================================================

DEFAULT_AFK_REASON = "AFK"

INVALID_TIME_MESSAGE = "❌ Invalid time format. Use format like: 5m, 1h, 2d"

HELP_SECTIONS = [
    ("🎨 Fun Commands", "`/petpet` `/avatar` `/userinfo` `/serverinfo` `/poll` `/meme` `/joke` `/8ball`"),
    ("🛡️ Moderation", "`/kick` `/ban` `/warn` `/warnings` `/clear`"),
    ("🔧 Utility", "`/remind` `/afk` `/weather` `/translate` `/qr`"),
    ("🎵 Music", "`/play` `/stop` (Basic implementation)"),
    ("💰 Economy", "`/balance` `/daily` (Basic implementation)"),
    ("⚙️ Custom", "`/addcmd` (Add custom commands)"),
]


def build_help_embed() -> discord.Embed:
    embed = discord.Embed(
        title="🤖 Bot Commands",
        description="Here are all available commands:",
        color=EmbedColors.BLURPLE,
    )
    for name, value in HELP_SECTIONS:
        embed.add_field(name=name, value=value, inline=False)
    embed.set_footer(text="Made with ❤️ using discord.py")
    return embed


# =============================================================================
# Utility Cog
# =============================================================================

class UtilityCog(commands.Cog):
    """Remind, AFK and help."""

    def __init__(self, bot: "LoungeBot") -> None:
        self.bot = bot

        logger.tree("Utility Cog Loaded", [
            ("Commands", "/remind, /afk, /help"),
        ], emoji="🔧")

    # =========================================================================
    # Remind
    # =========================================================================

    @app_commands.command(name="remind", description="Set a reminder")
    @app_commands.describe(
        time="Time (e.g., 5m, 1h, 2d)",
        message="Reminder message",
    )
    async def remind(self, interaction: discord.Interaction, time: str, message: str) -> None:
        """Schedule a one-off reminder delivered back to this interaction."""
        delay_ms = parse_time_ms(time)
        if not delay_ms:
            raise CommandFailure(ErrorKind.INVALID_INPUT, INVALID_TIME_MESSAGE)

        # Delays past datetime.max are rejected before the confirmation is sent
        try:
            fire_time(delay_ms / MS_PER_SECOND)
        except OverflowError as e:
            raise CommandFailure(ErrorKind.INVALID_INPUT, INVALID_TIME_MESSAGE, cause=e) from e

        await interaction.response.send_message(f"⏰ Reminder set for {time}!")

        async def deliver(reminder: Reminder) -> None:
            await self._deliver(interaction, reminder)

        await self.bot.reminders.schedule(
            user_id=interaction.user.id,
            message=message,
            delay=delay_ms / MS_PER_SECOND,
            deliver=deliver,
            channel_id=interaction.channel_id,
        )

    async def _deliver(self, interaction: discord.Interaction, reminder: Reminder) -> None:
        text = f"🔔 Reminder: {reminder.message}"
        try:
            await interaction.followup.send(text)
            return
        except discord.HTTPException as e:
            logger.warning("Reminder Follow-up Rejected", [
                ("ID", reminder.id),
                ("Status", str(e.status)),
            ])

        channel = interaction.channel
        if channel is None:
            raise RuntimeError(f"channel {reminder.channel_id} is no longer available")
        await channel.send(
            f"<@{reminder.user_id}> {text}",
            allowed_mentions=discord.AllowedMentions(users=True),
        )

    # =========================================================================
    # AFK
    # =========================================================================

    @app_commands.command(name="afk", description="Set AFK status")
    @app_commands.describe(reason="AFK reason")
    async def afk(self, interaction: discord.Interaction, reason: Optional[str] = None) -> None:
        reason = reason or DEFAULT_AFK_REASON
        await self.bot.storage.afk.set(interaction.user.id, AfkRecord(reason=reason))
        await interaction.response.send_message(f"😴 You are now AFK: {reason}")

        logger.tree("AFK Set", [
            ("User", f"{interaction.user} ({interaction.user.id})"),
            ("Reason", reason[:50]),
        ], emoji="😴")

    # =========================================================================
    # Help
    # =========================================================================

    @app_commands.command(name="help", description="Show bot commands and features")
    async def help(self, interaction: discord.Interaction) -> None:
        await interaction.response.send_message(embed=build_help_embed())


async def setup(bot: "LoungeBot") -> None:
    """Load the Utility cog."""
    await bot.add_cog(UtilityCog(bot))
