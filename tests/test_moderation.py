"""
Tests for lounge/commands/moderation.py and lounge/utils/members.py
"""

from datetime import timedelta
from unittest.mock import MagicMock

import discord
import pytest

from conftest import AsyncIter
from lounge.commands.moderation import (
    CLEAR_FAILED_MESSAGE,
    ModerationCog,
    build_warnings_embed,
    format_warnings,
)
from lounge.core.errors import CommandFailure, ErrorKind
from lounge.core.models import WarningRecord
from lounge.utils.members import is_actionable, truncate_field


def http_error(status: int = 403, message: str = "Missing Permissions") -> discord.HTTPException:
    return discord.HTTPException(MagicMock(status=status, reason="Error"), message)


@pytest.fixture
def cog(mock_bot):
    return ModerationCog(mock_bot)


# =============================================================================
# Member Helpers
# =============================================================================

class TestIsActionable:

    def test_lower_member_is_actionable(self, mock_member):
        assert is_actionable(mock_member, "kick_members") is True

    def test_equal_role_is_not_actionable(self, mock_member):
        mock_member.top_role.position = mock_member.guild.me.top_role.position
        assert is_actionable(mock_member, "kick_members") is False

    def test_missing_permission(self, mock_member):
        mock_member.guild.me.guild_permissions.ban_members = False
        assert is_actionable(mock_member, "ban_members") is False

    def test_owner_is_never_actionable(self, mock_member):
        mock_member.guild.owner_id = mock_member.id
        assert is_actionable(mock_member, "kick_members") is False

    def test_bot_owned_guild_skips_hierarchy(self, mock_member):
        mock_member.guild.owner_id = mock_member.guild.me.id
        mock_member.top_role.position = 50
        assert is_actionable(mock_member, "kick_members") is True


def test_truncate_field():
    assert truncate_field("short") == "short"
    assert len(truncate_field("x" * 2000)) == 1024
    assert truncate_field("x" * 2000).endswith("…")


# =============================================================================
# Kick / Ban
# =============================================================================

class TestKickBan:

    @pytest.mark.asyncio
    async def test_kick_success(self, cog, mock_interaction, mock_target, mock_member):
        mock_interaction.guild.fetch_member.return_value = mock_member

        await cog.kick.callback(cog, mock_interaction, mock_target, "rude")

        mock_member.kick.assert_awaited_once_with(reason="rude")
        mock_interaction.response.send_message.assert_awaited_once_with(
            "✅ target has been kicked. Reason: rude"
        )

    @pytest.mark.asyncio
    async def test_ban_default_reason(self, cog, mock_interaction, mock_target, mock_member):
        mock_interaction.guild.fetch_member.return_value = mock_member

        await cog.ban.callback(cog, mock_interaction, mock_target, None)

        mock_member.ban.assert_awaited_once_with(reason="No reason provided")
        mock_interaction.response.send_message.assert_awaited_once_with(
            "✅ target has been banned. Reason: No reason provided"
        )

    @pytest.mark.asyncio
    async def test_not_actionable(self, cog, mock_interaction, mock_target, mock_member):
        mock_member.top_role.position = 99
        mock_interaction.guild.fetch_member.return_value = mock_member

        with pytest.raises(CommandFailure) as exc:
            await cog.kick.callback(cog, mock_interaction, mock_target, None)

        assert exc.value.kind is ErrorKind.PERMISSION_DENIED
        assert exc.value.message == "❌ Cannot kick this user (insufficient permissions or higher role)."
        mock_member.kick.assert_not_awaited()
        mock_interaction.response.send_message.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_member_not_in_guild(self, cog, mock_interaction, mock_target):
        mock_interaction.guild.fetch_member.side_effect = http_error(404, "Unknown Member")

        with pytest.raises(CommandFailure) as exc:
            await cog.ban.callback(cog, mock_interaction, mock_target, None)

        assert exc.value.kind is ErrorKind.NOT_FOUND
        assert exc.value.message == "❌ Failed to ban user. They may not be in the server."

    @pytest.mark.asyncio
    async def test_platform_refuses_kick(self, cog, mock_interaction, mock_target, mock_member):
        mock_interaction.guild.fetch_member.return_value = mock_member
        mock_member.kick.side_effect = http_error()

        with pytest.raises(CommandFailure) as exc:
            await cog.kick.callback(cog, mock_interaction, mock_target, None)

        assert exc.value.message == "❌ Failed to kick user. They may not be in the server."


# =============================================================================
# Warnings
# =============================================================================

class TestWarnings:

    @pytest.mark.asyncio
    async def test_warn_then_list(self, cog, mock_bot, mock_interaction, mock_target, mock_moderator):
        await cog.warn.callback(cog, mock_interaction, mock_target, "spam")

        mock_interaction.response.send_message.assert_awaited_once_with(
            "⚠️ target has been warned. Reason: spam"
        )

        mock_interaction.response.send_message.reset_mock()
        await cog.warnings.callback(cog, mock_interaction, mock_target)

        embed = mock_interaction.response.send_message.await_args.kwargs["embed"]
        assert embed.title == "Warnings for target"
        assert embed.description == f"1. spam - <@{mock_moderator.id}>"

    @pytest.mark.asyncio
    async def test_warnings_empty(self, cog, mock_interaction, mock_target):
        await cog.warnings.callback(cog, mock_interaction, mock_target)

        embed = mock_interaction.response.send_message.await_args.kwargs["embed"]
        assert embed.description == "No warnings"

    def test_format_numbering(self):
        records = [WarningRecord(1, "a", 10), WarningRecord(1, "b", 11)]
        assert format_warnings(records) == "1. a - <@10>\n2. b - <@11>"

    def test_embed_color(self, mock_target):
        embed = build_warnings_embed(mock_target, [])
        assert embed.color.value == 0xFFCC00


# =============================================================================
# Clear
# =============================================================================

class TestClear:

    def _messages(self, *ages_days):
        now = discord.utils.utcnow()
        return [MagicMock(created_at=now - timedelta(days=age)) for age in ages_days]

    @pytest.mark.asyncio
    async def test_clear_deletes_recent(self, cog, mock_interaction, mock_channel):
        messages = self._messages(0, 1, 2)
        mock_channel.history.return_value = AsyncIter(messages)

        await cog.clear.callback(cog, mock_interaction, 3)

        mock_channel.history.assert_called_once_with(limit=3)
        mock_interaction.response.defer.assert_awaited_once_with(ephemeral=True, thinking=True)
        assert mock_channel.delete_messages.await_args.args[0] == messages
        mock_interaction.edit_original_response.assert_awaited_once_with(content="✅ Cleared 3 messages.")

    @pytest.mark.asyncio
    async def test_clear_skips_old_messages(self, cog, mock_interaction, mock_channel):
        mock_channel.history.return_value = AsyncIter(self._messages(1, 20, 30))

        await cog.clear.callback(cog, mock_interaction, 3)

        assert len(mock_channel.delete_messages.await_args.args[0]) == 1
        mock_interaction.edit_original_response.assert_awaited_once_with(content="✅ Cleared 1 messages.")

    @pytest.mark.asyncio
    async def test_clear_failure(self, cog, mock_interaction, mock_channel):
        mock_channel.history.return_value = AsyncIter(self._messages(1))
        mock_channel.delete_messages.side_effect = http_error(400, "too old")

        with pytest.raises(CommandFailure) as exc:
            await cog.clear.callback(cog, mock_interaction, 1)

        assert exc.value.kind is ErrorKind.PLATFORM_REJECTED
        assert exc.value.message == CLEAR_FAILED_MESSAGE
