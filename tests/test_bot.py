"""
Tests for lounge/bot.py and the startup diagnostics in main.py

Uses a real LoungeBot (never connected) with the command tree's sync
call replaced, so cog loading and registration run for real.
"""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from lounge.bot import LoungeBot, build_intents
from lounge.commands.custom import make_custom_command
from lounge.core.config import Config
from lounge.core.errors import CommandRegistrationError


EXPECTED_COMMANDS = {
    "kick", "ban", "warn", "warnings", "clear",
    "avatar", "userinfo", "serverinfo",
    "petpet", "meme", "joke", "8ball", "poll",
    "remind", "afk", "help",
    "addcmd", "weather", "translate", "qr", "play", "stop", "balance", "daily",
}


def make_config(guild_id=None) -> Config:
    return Config(discord_token="x" * 72, client_id=1234, guild_id=guild_id)


def registration_error(status: int, code: int, message: str) -> discord.HTTPException:
    return discord.HTTPException(
        MagicMock(status=status, reason="Error"),
        {"code": code, "message": message},
    )


@pytest.fixture
def bot():
    bot = LoungeBot(make_config())
    bot.content_api.start = AsyncMock()
    bot.tree.sync = AsyncMock(return_value=[])
    return bot


class TestIntents:

    def test_gateway_intents(self):
        intents = build_intents()

        assert intents.guilds
        assert intents.guild_messages
        assert intents.message_content
        assert intents.members
        assert intents.moderation
        assert intents.voice_states
        assert not intents.presences


class TestSetupHook:

    @pytest.mark.asyncio
    async def test_loads_every_command(self, bot):
        await bot.setup_hook()

        assert bot.builtin_commands == EXPECTED_COMMANDS
        bot.tree.sync.assert_awaited_once_with(guild=None)
        bot.content_api.start.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_guild_scoped_registration(self):
        bot = LoungeBot(make_config(guild_id=42))
        bot.content_api.start = AsyncMock()
        bot.tree.sync = AsyncMock(return_value=[])

        await bot.setup_hook()

        guild = bot.tree.sync.await_args.kwargs["guild"]
        assert guild.id == 42
        copied = {command.name for command in bot.tree.get_commands(guild=guild)}
        assert copied == EXPECTED_COMMANDS

    @pytest.mark.asyncio
    async def test_registration_failure_is_fatal(self, bot):
        bot.tree.sync.side_effect = registration_error(403, 50001, "Missing Access")

        with pytest.raises(CommandRegistrationError) as exc:
            await bot.setup_hook()

        assert exc.value.__cause__.code == 50001


class TestPublishCommand:

    @pytest.mark.asyncio
    async def test_publish_adds_and_syncs(self, bot):
        command = make_custom_command("hello", bot.storage.custom_commands)

        assert await bot.publish_command(command) is True
        assert bot.tree.get_command("hello") is command
        bot.tree.sync.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_publish_failure_rolls_back(self, bot):
        bot.tree.sync.side_effect = registration_error(400, 50035, "Invalid Form Body")
        command = make_custom_command("hello", bot.storage.custom_commands)

        assert await bot.publish_command(command) is False
        assert bot.tree.get_command("hello") is None

    @pytest.mark.asyncio
    async def test_full_tree_is_reported_not_raised(self, bot):
        await bot.setup_hook()
        free_slots = 100 - len(bot.builtin_commands)

        for i in range(free_slots):
            command = make_custom_command(f"c{i}", bot.storage.custom_commands)
            assert await bot.publish_command(command) is True

        overflow = make_custom_command("one-too-many", bot.storage.custom_commands)
        assert await bot.publish_command(overflow) is False
        assert bot.tree.get_command("one-too-many") is None
        assert len(bot.tree.get_commands()) == 100


class TestShutdown:

    @pytest.mark.asyncio
    async def test_close_cancels_reminders(self, bot):
        await bot.reminders.schedule(user_id=1, message="x", delay=60, deliver=AsyncMock())
        bot.content_api.close = AsyncMock()

        await bot.close()

        assert await bot.reminders.pending() == []
        bot.content_api.close.assert_awaited_once()
        assert bot.is_closed()


class TestRegistrationDiagnostics:

    def _wrap(self, cause):
        try:
            raise CommandRegistrationError(str(cause)) from cause
        except CommandRegistrationError as e:
            return e

    def test_missing_access(self):
        from main import describe_registration_failure

        lines = describe_registration_failure(self._wrap(registration_error(403, 50001, "Missing Access")))
        assert "50001" in lines[0]

    def test_unauthorized(self):
        from main import describe_registration_failure

        lines = describe_registration_failure(self._wrap(registration_error(401, 0, "401: Unauthorized")))
        assert lines[0].startswith("Unauthorized")
