"""
Lounge Discord Bot - Message Events
===================================

AFK handling on every chat message.

DESIGN:
    Two independent routes per message, both skipped for bot authors:
    1. Author is AFK -> clear the record and welcome them back
    2. Message mentions AFK users -> one notice per mentioned AFK user
    The second route never changes state.
"""

from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from lounge.core.logger import logger

if TYPE_CHECKING:
    from lounge.bot import LoungeBot


WELCOME_BACK_MESSAGE = "👋 Welcome back! Your AFK status has been removed."


class MessageEvents(commands.Cog):
    """Message event handlers."""

    def __init__(self, bot: "LoungeBot") -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot:
            return

        afk = self.bot.storage.afk

        # -----------------------------------------------------------------
        # Route 1: Author returns from AFK
        # -----------------------------------------------------------------
        record = await afk.pop(message.author.id)
        if record is not None:
            logger.tree("AFK Cleared", [
                ("User", f"{message.author} ({message.author.id})"),
                ("Was AFK For", str(discord.utils.utcnow() - record.created_at).split(".")[0]),
            ], emoji="👋")
            await self._safe_reply(message, WELCOME_BACK_MESSAGE)

        # -----------------------------------------------------------------
        # Route 2: Mentions of AFK users
        # -----------------------------------------------------------------
        for user in message.mentions:
            if user.id == message.author.id:
                continue
            mentioned = await afk.get(user.id)
            if mentioned is not None:
                await self._safe_reply(message, f"💤 {user} is AFK: {mentioned.reason}")

    async def _safe_reply(self, message: discord.Message, content: str) -> None:
        try:
            await message.reply(content, mention_author=False)
        except discord.HTTPException as e:
            logger.warning("AFK Reply Failed", [
                ("Channel", str(message.channel.id)),
                ("Status", str(e.status)),
                ("Error", str(e)[:100]),
            ])


async def setup(bot: "LoungeBot") -> None:
    """Load the message events cog."""
    await bot.add_cog(MessageEvents(bot))
