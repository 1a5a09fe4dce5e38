"""
Lounge Discord Bot - Commands Package
=====================================

Slash command implementations, one discord.py Cog per command group.

DESIGN:
    Each command file contains a Cog class with related commands and an
    async setup(bot) function. The bot loads every module listed in
    COMMAND_COGS with load_extension() before registering commands.

Available Commands:
    moderation: /kick /ban /warn /warnings /clear
    info: /avatar /userinfo /serverinfo
    fun: /petpet /meme /joke /8ball /poll
    utility: /remind /afk /help
    custom: /addcmd, plus the /weather /translate /qr /play /stop
        /balance /daily placeholders
"""

# =============================================================================
# Command Cog Registry
# =============================================================================

COMMAND_COGS = [
    "lounge.commands.moderation",
    "lounge.commands.info",
    "lounge.commands.fun",
    "lounge.commands.utility",
    "lounge.commands.custom",
]
