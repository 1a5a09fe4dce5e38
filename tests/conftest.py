"""
Lounge Discord Bot - Test Fixtures
==================================

Shared fixtures for all tests.
"""

import os
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set up test environment before importing modules (the logger opens its
# log directory on import)
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="lounge-test-logs-"))
os.environ.pop("ERROR_WEBHOOK_URL", None)

from lounge.core.storage import Storage  # noqa: E402
from lounge.services.reminders import ReminderScheduler  # noqa: E402


# =============================================================================
# Helpers
# =============================================================================

class AsyncIter:
    """Async iterator over a list, for mocking channel.history()."""

    def __init__(self, items):
        self._items = list(items)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._items:
            raise StopAsyncIteration
        return self._items.pop(0)


def make_user(user_id: int, tag: str, *, bot: bool = False) -> MagicMock:
    """Mock discord.User whose str() is the user tag."""
    user = MagicMock()
    user.id = user_id
    user.bot = bot
    user.name = tag
    user.display_name = tag.title()
    user.mention = f"<@{user_id}>"
    user.__str__.return_value = tag
    user.created_at = datetime(2020, 9, 13, 12, 0, 0, tzinfo=timezone.utc)
    user.display_avatar.url = f"https://cdn.example.com/avatars/{user_id}.png"
    user.display_avatar.replace.return_value.url = f"https://cdn.example.com/avatars/{user_id}.png?size=128"
    user.display_avatar.with_size.return_value.url = f"https://cdn.example.com/avatars/{user_id}.png?size=512"
    return user


# =============================================================================
# Discord Objects
# =============================================================================

@pytest.fixture
def mock_target():
    """User on the receiving end of a command."""
    return make_user(123456789, "target")


@pytest.fixture
def mock_moderator():
    """User invoking commands."""
    return make_user(111222333, "moderator")


@pytest.fixture
def mock_guild():
    """Create a mock Discord guild where the bot sits high in the role list."""
    guild = MagicMock()
    guild.id = 987654321
    guild.name = "Test Lounge"
    guild.owner_id = 1
    guild.member_count = 42
    guild.channels = [MagicMock() for _ in range(5)]
    guild.roles = [MagicMock() for _ in range(3)]
    guild.created_at = datetime(2019, 1, 1, tzinfo=timezone.utc)
    guild.icon = None

    guild.me.id = 999
    guild.me.top_role.position = 10
    guild.me.guild_permissions.kick_members = True
    guild.me.guild_permissions.ban_members = True

    guild.fetch_member = AsyncMock()
    guild.get_member = MagicMock(return_value=None)
    return guild


@pytest.fixture
def mock_member(mock_guild):
    """Guild member below the bot in the role hierarchy."""
    member = MagicMock()
    member.id = 123456789
    member.guild = mock_guild
    member.top_role.position = 2
    member.joined_at = datetime(2022, 4, 15, 10, 0, 0, tzinfo=timezone.utc)
    member.roles = []
    member.kick = AsyncMock()
    member.ban = AsyncMock()
    return member


@pytest.fixture
def mock_channel():
    """Create a mock text channel."""
    channel = MagicMock()
    channel.id = 555666777
    channel.name = "general"
    channel.send = AsyncMock()
    channel.delete_messages = AsyncMock()
    channel.history = MagicMock(return_value=AsyncIter([]))
    return channel


@pytest.fixture
def mock_interaction(mock_moderator, mock_guild, mock_channel):
    """Fresh slash-command interaction that has not been answered yet."""
    interaction = MagicMock()
    interaction.user = mock_moderator
    interaction.guild = mock_guild
    interaction.channel = mock_channel
    interaction.channel_id = mock_channel.id
    interaction.command.qualified_name = "test"

    interaction.response.is_done = MagicMock(return_value=False)
    interaction.response.type = None
    interaction.response.send_message = AsyncMock()
    interaction.response.defer = AsyncMock()

    interaction.edit_original_response = AsyncMock()
    interaction.original_response = AsyncMock(return_value=MagicMock(add_reaction=AsyncMock()))
    interaction.followup.send = AsyncMock()
    return interaction


@pytest.fixture
def mock_message(mock_channel):
    """Create a mock chat message from a human author."""
    message = MagicMock()
    message.author = make_user(444555666, "chatter")
    message.channel = mock_channel
    message.mentions = []
    message.reply = AsyncMock()
    return message


# =============================================================================
# Bot
# =============================================================================

@pytest.fixture
def storage():
    return Storage.in_memory()


@pytest.fixture
def mock_bot(storage):
    """Bot stand-in carrying real storage and a real reminder scheduler."""
    bot = MagicMock()
    bot.storage = storage
    bot.reminders = ReminderScheduler(storage.reminders)
    bot.content_api.fetch_meme = AsyncMock()
    bot.content_api.fetch_pat_gif = AsyncMock()
    bot.builtin_commands = {
        "kick", "ban", "warn", "warnings", "clear", "avatar", "userinfo",
        "serverinfo", "poll", "remind", "afk", "meme", "joke", "8ball",
        "petpet", "help", "addcmd", "weather", "translate", "qr", "play",
        "stop", "balance", "daily",
    }
    bot.command_guild = None
    bot.tree.get_command = MagicMock(return_value=None)
    bot.publish_command = AsyncMock(return_value=True)
    return bot
