"""
Lounge Discord Bot - Member Helpers
===================================

Role-hierarchy and permission checks for moderation targets.
"""

import discord


def is_actionable(member: discord.Member, permission: str) -> bool:
    """
    Whether the bot can apply a moderation action to a member.

    The bot needs the guild permission for the action and a top role
    strictly above the target's. The guild owner and the bot itself are
    never actionable.

    Args:
        member: Target member.
        permission: Permission attribute name, e.g. "kick_members".
    """
    guild = member.guild
    me = guild.me

    if member.id == guild.owner_id or member.id == me.id:
        return False
    if not getattr(me.guild_permissions, permission, False):
        return False
    if me.id == guild.owner_id:
        return True
    return me.top_role.position > member.top_role.position


def truncate_field(value: str, limit: int = 1024) -> str:
    """Cut an embed field value to Discord's length limit."""
    if len(value) <= limit:
        return value
    return value[: limit - 1] + "…"


__all__ = [
    "is_actionable",
    "truncate_field",
]
