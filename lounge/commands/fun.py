"""
Lounge Discord Bot - Fun Command Cog
====================================

Light-hearted commands.

DESIGN:
    /petpet and /meme call external APIs, so they defer first and edit the
    deferred response once the API answers (or fails). /poll keeps no state:
    it posts the question once and lets Discord's reactions count votes.

Features:
    - /petpet [user]
    - /meme
    - /joke
    - /8ball <question>
    - /poll <question> <options>
"""

import random
from typing import List, Optional, TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from lounge.core.config import EmbedColors
from lounge.core.errors import CommandFailure, ContentAPIError, ErrorKind
from lounge.core.logger import logger

if TYPE_CHECKING:
    from lounge.bot import LoungeBot


# =============================================================================
# Constants
# =============================================================================

JOKES = [
    "Why don't scientists trust atoms? Because they make up everything!",
    "Why did the scarecrow win an award? He was outstanding in his field!",
    "Why don't eggs tell jokes? They'd crack each other up!",
    "What do you call a fake noodle? An impasta!",
    "Why did the math book look so sad? Because it had too many problems!",
]

EIGHT_BALL_ANSWERS = [
    "It is certain", "Reply hazy, try again", "Don't count on it",
    "It is decidedly so", "Ask again later", "My reply is no",
    "Without a doubt", "Better not tell you now", "My sources say no",
    "Yes definitely", "Cannot predict now", "Outlook not so good",
    "You may rely on it", "Concentrate and ask again", "Very doubtful",
]

POLL_MIN_OPTIONS = 2
POLL_MAX_OPTIONS = 10

NUMBER_EMOJIS = ["1️⃣", "2️⃣", "3️⃣", "4️⃣", "5️⃣", "6️⃣", "7️⃣", "8️⃣", "9️⃣", "🔟"]
"""Reaction per poll option, in option order."""


# =============================================================================
# Poll Helpers
# =============================================================================

def parse_poll_options(raw: str) -> List[str]:
    """Split comma-separated options and trim each one."""
    return [option.strip() for option in raw.split(",")]


def build_poll_embed(question: str, options: List[str]) -> discord.Embed:
    """
    Render a poll.

    Raises:
        CommandFailure: If there are fewer than 2 or more than 10 options.
    """
    if not POLL_MIN_OPTIONS <= len(options) <= POLL_MAX_OPTIONS:
        raise CommandFailure(ErrorKind.INVALID_INPUT, "❌ Poll must have 2-10 options.")

    return discord.Embed(
        title=f"📊 {question}",
        description="\n".join(
            f"{emoji} {option}" for emoji, option in zip(NUMBER_EMOJIS, options)
        ),
        color=EmbedColors.INFO,
    )


# =============================================================================
# Fun Cog
# =============================================================================

class FunCog(commands.Cog):
    """Petpet, memes, jokes, the magic 8-ball and polls."""

    def __init__(self, bot: "LoungeBot") -> None:
        self.bot = bot

        logger.tree("Fun Cog Loaded", [
            ("Commands", "/petpet, /meme, /joke, /8ball, /poll"),
        ], emoji="🎨")

    @app_commands.command(name="petpet", description="Generate a pet pet GIF of a user")
    @app_commands.describe(user="User to pet")
    async def petpet(
        self,
        interaction: discord.Interaction,
        user: Optional[discord.User] = None,
    ) -> None:
        await interaction.response.defer()
        target = user or interaction.user

        try:
            pat_gif = await self.bot.content_api.fetch_pat_gif()
        except ContentAPIError as e:
            logger.warning("Pet Pet Failed", [("Error", str(e)[:100])])
            await interaction.edit_original_response(content="❌ Failed to generate pet pet!")
            return

        embed = discord.Embed(
            title=f"{interaction.user.display_name} pets {target.display_name}!",
            description="*Pat pat pat* 🤗",
            color=EmbedColors.PETPET,
        )
        embed.set_image(url=target.display_avatar.replace(format="png", size=128).url)
        embed.set_thumbnail(url=pat_gif)
        embed.set_footer(text="Pet pet! So cute!")

        await interaction.edit_original_response(embed=embed)

    @app_commands.command(name="meme", description="Get a random meme")
    async def meme(self, interaction: discord.Interaction) -> None:
        await interaction.response.defer()

        try:
            meme = await self.bot.content_api.fetch_meme()
        except ContentAPIError as e:
            logger.warning("Meme Fetch Failed", [("Error", str(e)[:100])])
            await interaction.edit_original_response(content="❌ Failed to fetch meme!")
            return

        embed = discord.Embed(title=meme.title[:256], url=meme.post_link, color=EmbedColors.MEME)
        embed.set_image(url=meme.url)
        await interaction.edit_original_response(embed=embed)

    @app_commands.command(name="joke", description="Get a random joke")
    async def joke(self, interaction: discord.Interaction) -> None:
        await interaction.response.send_message(random.choice(JOKES))

    @app_commands.command(name="8ball", description="Ask the magic 8-ball a question")
    @app_commands.describe(question="Your question")
    async def eight_ball(self, interaction: discord.Interaction, question: str) -> None:
        answer = random.choice(EIGHT_BALL_ANSWERS)
        await interaction.response.send_message(f"🎱 **{question}**\n{answer}")

    @app_commands.command(name="poll", description="Create a poll")
    @app_commands.describe(question="Poll question", options="Poll options separated by commas")
    async def poll(self, interaction: discord.Interaction, question: str, options: str) -> None:
        choices = parse_poll_options(options)
        embed = build_poll_embed(question, choices)

        await interaction.response.send_message(embed=embed)
        message = await interaction.original_response()
        for emoji in NUMBER_EMOJIS[:len(choices)]:
            await message.add_reaction(emoji)

        logger.tree("Poll Created", [
            ("Question", question[:50]),
            ("Options", str(len(choices))),
            ("Author", f"{interaction.user} ({interaction.user.id})"),
        ], emoji="📊")


async def setup(bot: "LoungeBot") -> None:
    """Load the Fun cog."""
    await bot.add_cog(FunCog(bot))
