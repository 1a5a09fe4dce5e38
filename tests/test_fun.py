"""
Tests for lounge/commands/fun.py
"""

from unittest.mock import call

import pytest

from lounge.commands.fun import (
    EIGHT_BALL_ANSWERS,
    JOKES,
    NUMBER_EMOJIS,
    FunCog,
    build_poll_embed,
    parse_poll_options,
)
from lounge.core.errors import CommandFailure, ContentAPIError, ErrorKind
from lounge.services.content_api import Meme


@pytest.fixture
def cog(mock_bot):
    return FunCog(mock_bot)


# =============================================================================
# Poll
# =============================================================================

class TestPoll:

    def test_parse_trims_options(self):
        assert parse_poll_options(" a ,b,  c") == ["a", "b", "c"]

    @pytest.mark.parametrize("count", [0, 1, 11])
    def test_rejects_option_count(self, count):
        with pytest.raises(CommandFailure) as exc:
            build_poll_embed("Q?", [f"opt{i}" for i in range(count)])
        assert exc.value.kind is ErrorKind.INVALID_INPUT
        assert exc.value.message == "❌ Poll must have 2-10 options."

    @pytest.mark.parametrize("count", [2, 10])
    def test_accepts_option_count(self, count):
        embed = build_poll_embed("Q?", [f"opt{i}" for i in range(count)])

        lines = embed.description.split("\n")
        assert embed.title == "📊 Q?"
        assert len(lines) == count
        assert lines[0] == "1️⃣ opt0"
        assert lines[-1] == f"{NUMBER_EMOJIS[count - 1]} opt{count - 1}"

    def test_tenth_option_uses_keycap_ten(self):
        embed = build_poll_embed("Q?", [str(i) for i in range(10)])
        assert embed.description.split("\n")[-1] == "🔟 9"

    @pytest.mark.asyncio
    async def test_poll_adds_reactions_in_order(self, cog, mock_interaction):
        await cog.poll.callback(cog, mock_interaction, "Lunch?", "pizza, sushi, tacos")

        mock_interaction.response.send_message.assert_awaited_once()
        message = mock_interaction.original_response.return_value
        assert message.add_reaction.await_args_list == [call("1️⃣"), call("2️⃣"), call("3️⃣")]

    @pytest.mark.asyncio
    async def test_single_option_poll_sends_nothing(self, cog, mock_interaction):
        with pytest.raises(CommandFailure):
            await cog.poll.callback(cog, mock_interaction, "Lunch?", "pizza")

        mock_interaction.response.send_message.assert_not_awaited()


# =============================================================================
# Joke / 8ball
# =============================================================================

class TestStaticReplies:

    def test_lists(self):
        assert len(JOKES) == 5
        assert len(EIGHT_BALL_ANSWERS) == 15

    @pytest.mark.asyncio
    async def test_joke(self, cog, mock_interaction):
        await cog.joke.callback(cog, mock_interaction)

        assert mock_interaction.response.send_message.await_args.args[0] in JOKES

    @pytest.mark.asyncio
    async def test_eight_ball(self, cog, mock_interaction):
        await cog.eight_ball.callback(cog, mock_interaction, "Will it rain?")

        reply = mock_interaction.response.send_message.await_args.args[0]
        header, answer = reply.split("\n")
        assert header == "🎱 **Will it rain?**"
        assert answer in EIGHT_BALL_ANSWERS


# =============================================================================
# API-backed
# =============================================================================

class TestMeme:

    @pytest.mark.asyncio
    async def test_meme_success(self, cog, mock_bot, mock_interaction):
        mock_bot.content_api.fetch_meme.return_value = Meme(
            title="Funny", url="https://i.example.com/m.png", post_link="https://example.com/p/1"
        )

        await cog.meme.callback(cog, mock_interaction)

        mock_interaction.response.defer.assert_awaited_once()
        embed = mock_interaction.edit_original_response.await_args.kwargs["embed"]
        assert embed.title == "Funny"
        assert embed.image.url == "https://i.example.com/m.png"

    @pytest.mark.asyncio
    async def test_meme_failure(self, cog, mock_bot, mock_interaction):
        mock_bot.content_api.fetch_meme.side_effect = ContentAPIError("down")

        await cog.meme.callback(cog, mock_interaction)

        mock_interaction.edit_original_response.assert_awaited_once_with(content="❌ Failed to fetch meme!")


class TestPetPet:

    @pytest.mark.asyncio
    async def test_petpet_target(self, cog, mock_bot, mock_interaction, mock_target):
        mock_bot.content_api.fetch_pat_gif.return_value = "https://i.waifu.pics/pat.gif"

        await cog.petpet.callback(cog, mock_interaction, mock_target)

        embed = mock_interaction.edit_original_response.await_args.kwargs["embed"]
        assert embed.title == "Moderator pets Target!"
        assert embed.description == "*Pat pat pat* 🤗"
        assert embed.thumbnail.url == "https://i.waifu.pics/pat.gif"
        assert embed.image.url.endswith("?size=128")
        assert embed.footer.text == "Pet pet! So cute!"
        mock_target.display_avatar.replace.assert_called_once_with(format="png", size=128)

    @pytest.mark.asyncio
    async def test_petpet_defaults_to_invoker(self, cog, mock_bot, mock_interaction):
        mock_bot.content_api.fetch_pat_gif.return_value = "https://i.waifu.pics/pat.gif"

        await cog.petpet.callback(cog, mock_interaction, None)

        embed = mock_interaction.edit_original_response.await_args.kwargs["embed"]
        assert embed.title == "Moderator pets Moderator!"

    @pytest.mark.asyncio
    async def test_petpet_failure(self, cog, mock_bot, mock_interaction, mock_target):
        mock_bot.content_api.fetch_pat_gif.side_effect = ContentAPIError("down")

        await cog.petpet.callback(cog, mock_interaction, mock_target)

        mock_interaction.edit_original_response.assert_awaited_once_with(
            content="❌ Failed to generate pet pet!"
        )
