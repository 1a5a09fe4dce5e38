"""
Lounge Discord Bot - Info Command Cog
=====================================

Read-only user and server information.

Features:
    - /avatar [user]
    - /userinfo [user]
    - /serverinfo
"""

from typing import Optional, TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands
from discord.utils import format_dt

from lounge.core.config import EmbedColors
from lounge.core.logger import logger
from lounge.utils.members import truncate_field

if TYPE_CHECKING:
    from lounge.bot import LoungeBot


def build_avatar_embed(user: discord.abc.User) -> discord.Embed:
    embed = discord.Embed(title=f"{user}'s Avatar", color=EmbedColors.INFO)
    embed.set_image(url=user.display_avatar.with_size(512).url)
    return embed


def build_userinfo_embed(user: discord.abc.User, member: discord.Member) -> discord.Embed:
    """ID, account age, join age and roles (highest first, @everyone omitted)."""
    roles = [role.mention for role in reversed(member.roles) if not role.is_default()]
    joined = format_dt(member.joined_at, "R") if member.joined_at else "Unknown"

    embed = discord.Embed(title=f"User Info: {user}", color=EmbedColors.INFO)
    embed.set_thumbnail(url=user.display_avatar.url)
    embed.add_field(name="ID", value=str(user.id), inline=True)
    embed.add_field(name="Created", value=format_dt(user.created_at, "R"), inline=True)
    embed.add_field(name="Joined", value=joined, inline=True)
    embed.add_field(name="Roles", value=truncate_field(", ".join(roles)) or "None", inline=False)
    return embed


def build_serverinfo_embed(guild: discord.Guild) -> discord.Embed:
    embed = discord.Embed(title=guild.name, color=EmbedColors.INFO)
    if guild.icon:
        embed.set_thumbnail(url=guild.icon.url)
    embed.add_field(name="Members", value=str(guild.member_count), inline=True)
    embed.add_field(name="Channels", value=str(len(guild.channels)), inline=True)
    embed.add_field(name="Roles", value=str(len(guild.roles)), inline=True)
    embed.add_field(name="Created", value=format_dt(guild.created_at, "R"), inline=True)
    return embed


class InfoCog(commands.Cog):
    """Avatar, user info and server info."""

    def __init__(self, bot: "LoungeBot") -> None:
        self.bot = bot

        logger.tree("Info Cog Loaded", [
            ("Commands", "/avatar, /userinfo, /serverinfo"),
        ], emoji="ℹ️")

    @app_commands.command(name="avatar", description="Get user avatar")
    @app_commands.describe(user="User to get avatar of")
    async def avatar(
        self,
        interaction: discord.Interaction,
        user: Optional[discord.User] = None,
    ) -> None:
        target = user or interaction.user
        await interaction.response.send_message(embed=build_avatar_embed(target))

    @app_commands.command(name="userinfo", description="Get information about a user")
    @app_commands.describe(user="User to get info about")
    @app_commands.guild_only()
    async def userinfo(
        self,
        interaction: discord.Interaction,
        user: Optional[discord.User] = None,
    ) -> None:
        target = user or interaction.user
        member = interaction.guild.get_member(target.id) or await interaction.guild.fetch_member(target.id)
        await interaction.response.send_message(embed=build_userinfo_embed(target, member))

    @app_commands.command(name="serverinfo", description="Get server information")
    @app_commands.guild_only()
    async def serverinfo(self, interaction: discord.Interaction) -> None:
        await interaction.response.send_message(embed=build_serverinfo_embed(interaction.guild))


async def setup(bot: "LoungeBot") -> None:
    """Load the Info cog."""
    await bot.add_cog(InfoCog(bot))
