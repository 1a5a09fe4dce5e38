"""
Lounge Discord Bot - Moderation Command Cog
===========================================

Server moderation commands.

DESIGN:
    Role hierarchy and permission checks are left to Discord: the bot only
    asks whether a member is actionable and reports a single failure
    message when Discord refuses, without telling the causes apart.
    Warnings are append-only and live in the warnings table.

Features:
    - /kick <user> [reason]
    - /ban <user> [reason]
    - /warn <user> <reason>
    - /warnings <user>
    - /clear <amount>: bulk delete up to 100 messages younger than 14 days
"""

from datetime import timedelta
from typing import Optional, Sequence, TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from lounge.core.config import EmbedColors
from lounge.core.errors import CommandFailure, ErrorKind
from lounge.core.logger import logger
from lounge.core.models import WarningRecord
from lounge.utils.members import is_actionable

if TYPE_CHECKING:
    from lounge.bot import LoungeBot


# =============================================================================
# Constants
# =============================================================================

DEFAULT_REASON = "No reason provided"

BULK_DELETE_LIMIT = 100
"""Discord's limit for one bulk delete."""

MESSAGE_AGE_LIMIT = timedelta(days=14)
"""Messages older than this cannot be bulk deleted."""

CLEAR_FAILED_MESSAGE = "❌ Failed to clear messages. Messages may be too old (>14 days)."


# =============================================================================
# Formatting
# =============================================================================

def format_warnings(records: Sequence[WarningRecord]) -> str:
    """Numbered list of reasons with the issuing moderator, oldest first."""
    if not records:
        return "No warnings"
    return "\n".join(
        f"{i}. {record.reason} - <@{record.moderator_id}>"
        for i, record in enumerate(records, start=1)
    )


def build_warnings_embed(user: discord.abc.User, records: Sequence[WarningRecord]) -> discord.Embed:
    return discord.Embed(
        title=f"Warnings for {user}",
        description=format_warnings(records),
        color=EmbedColors.WARNING,
    )


# =============================================================================
# Moderation Cog
# =============================================================================

class ModerationCog(commands.Cog):
    """Kick, ban, warn, warnings and clear."""

    def __init__(self, bot: "LoungeBot") -> None:
        self.bot = bot

        logger.tree("Moderation Cog Loaded", [
            ("Commands", "/kick, /ban, /warn, /warnings, /clear"),
        ], emoji="🛡️")

    # =========================================================================
    # Kick / Ban
    # =========================================================================

    async def _remove_member(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: Optional[str],
        *,
        action: str,
    ) -> None:
        """
        Shared kick/ban logic.

        Args:
            interaction: Discord interaction context.
            user: Target user.
            reason: Optional free-text reason.
            action: "kick" or "ban".
        """
        reason = reason or DEFAULT_REASON
        past = "kicked" if action == "kick" else "banned"
        permission = "kick_members" if action == "kick" else "ban_members"
        failed = f"❌ Failed to {action} user. They may not be in the server."

        try:
            member = await interaction.guild.fetch_member(user.id)
        except discord.HTTPException as e:
            raise CommandFailure(ErrorKind.NOT_FOUND, failed, cause=e) from e

        if not is_actionable(member, permission):
            raise CommandFailure(
                ErrorKind.PERMISSION_DENIED,
                f"❌ Cannot {action} this user (insufficient permissions or higher role).",
            )

        try:
            if action == "kick":
                await member.kick(reason=reason)
            else:
                await member.ban(reason=reason)
        except discord.HTTPException as e:
            raise CommandFailure(ErrorKind.NOT_FOUND, failed, cause=e) from e

        await interaction.response.send_message(f"✅ {user} has been {past}. Reason: {reason}")

        logger.tree(f"USER {past.upper()}", [
            ("User", f"{user} ({user.id})"),
            ("Moderator", f"{interaction.user} ({interaction.user.id})"),
            ("Reason", reason[:50]),
        ], emoji="🔨" if action == "ban" else "👢")

    @app_commands.command(name="kick", description="Kick a user from the server")
    @app_commands.describe(user="User to kick", reason="Reason for kick")
    @app_commands.default_permissions(kick_members=True)
    @app_commands.guild_only()
    async def kick(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: Optional[str] = None,
    ) -> None:
        """Kick a member."""
        await self._remove_member(interaction, user, reason, action="kick")

    @app_commands.command(name="ban", description="Ban a user from the server")
    @app_commands.describe(user="User to ban", reason="Reason for ban")
    @app_commands.default_permissions(ban_members=True)
    @app_commands.guild_only()
    async def ban(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: Optional[str] = None,
    ) -> None:
        """Ban a member."""
        await self._remove_member(interaction, user, reason, action="ban")

    # =========================================================================
    # Warnings
    # =========================================================================

    @app_commands.command(name="warn", description="Warn a user")
    @app_commands.describe(user="User to warn", reason="Reason for warning")
    @app_commands.default_permissions(moderate_members=True)
    @app_commands.guild_only()
    async def warn(
        self,
        interaction: discord.Interaction,
        user: discord.User,
        reason: str,
    ) -> None:
        """Record a warning. Always succeeds."""
        count = await self.bot.storage.warnings.append(WarningRecord(
            user_id=user.id,
            reason=reason,
            moderator_id=interaction.user.id,
        ))

        await interaction.response.send_message(f"⚠️ {user} has been warned. Reason: {reason}")

        logger.tree("USER WARNED", [
            ("User", f"{user} ({user.id})"),
            ("Moderator", f"{interaction.user} ({interaction.user.id})"),
            ("Total Warnings", str(count)),
            ("Reason", reason[:50]),
        ], emoji="⚠️")

    @app_commands.command(name="warnings", description="Check warnings for a user")
    @app_commands.describe(user="User to check warnings for")
    @app_commands.default_permissions(moderate_members=True)
    @app_commands.guild_only()
    async def warnings(
        self,
        interaction: discord.Interaction,
        user: discord.User,
    ) -> None:
        records = await self.bot.storage.warnings.list(user.id)
        await interaction.response.send_message(embed=build_warnings_embed(user, records))

    # =========================================================================
    # Clear
    # =========================================================================

    @app_commands.command(name="clear", description="Clear messages from a channel")
    @app_commands.describe(amount="Number of messages to clear (1-100)")
    @app_commands.default_permissions(manage_messages=True)
    @app_commands.guild_only()
    async def clear(
        self,
        interaction: discord.Interaction,
        amount: app_commands.Range[int, 1, BULK_DELETE_LIMIT],
    ) -> None:
        """
        Bulk delete recent messages.

        Messages older than 14 days are skipped; Discord refuses to bulk
        delete them. The reply is an ephemeral deferral so the bot's own
        response is never part of the sweep.
        """
        await interaction.response.defer(ephemeral=True, thinking=True)

        channel = interaction.channel
        cutoff = discord.utils.utcnow() - MESSAGE_AGE_LIMIT

        try:
            messages = [
                message
                async for message in channel.history(limit=amount)
                if message.created_at > cutoff
            ]
            await channel.delete_messages(messages, reason=f"/clear by {interaction.user}")
        except discord.HTTPException as e:
            raise CommandFailure(ErrorKind.PLATFORM_REJECTED, CLEAR_FAILED_MESSAGE, cause=e) from e

        await interaction.edit_original_response(content=f"✅ Cleared {len(messages)} messages.")

        logger.tree("MESSAGES CLEARED", [
            ("Channel", f"#{getattr(channel, 'name', channel.id)}"),
            ("Moderator", f"{interaction.user} ({interaction.user.id})"),
            ("Requested", str(amount)),
            ("Deleted", str(len(messages))),
        ], emoji="🗑️")


# =============================================================================
# Setup
# =============================================================================

async def setup(bot: "LoungeBot") -> None:
    """Load the Moderation cog."""
    await bot.add_cog(ModerationCog(bot))
