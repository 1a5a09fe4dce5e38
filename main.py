#!/usr/bin/env python3
"""
Lounge Discord Bot Entry Point
==============================

A general-purpose community bot built on discord.py slash commands.

Features:
- Moderation (/kick, /ban, /warn, /warnings, /clear)
- Info (/avatar, /userinfo, /serverinfo)
- Fun (/petpet, /meme, /joke, /8ball, /poll)
- Utility (/remind, /afk, /help) and custom text commands (/addcmd)
- Graceful shutdown on SIGINT/SIGTERM

Exit codes:
    0: Clean shutdown (signal or normal disconnect)
    1: Startup failure (configuration, login or command registration)
"""

import asyncio
import signal
import sys
from typing import List

import discord
from dotenv import load_dotenv

from lounge.core.config import ConfigValidationError, validate_and_log_config
from lounge.core.errors import CommandRegistrationError
from lounge.core.logger import logger
from lounge.bot import LoungeBot
from lounge.utils.error_handler import ErrorHandler, install_loop_exception_handler


MISSING_ACCESS_CODE = 50001


def describe_registration_failure(error: CommandRegistrationError) -> List[str]:
    """Human-readable diagnostics for a rejected command registration."""
    cause = error.__cause__
    status = getattr(cause, "status", None)
    code = getattr(cause, "code", None)

    if code == MISSING_ACCESS_CODE:
        return [
            "Missing Access (50001): the bot is not in the guild or lacks the",
            "applications.commands scope. Re-invite it with that scope.",
        ]
    if status == 401:
        return ["Unauthorized: DISCORD_TOKEN and CLIENT_ID do not belong to the same application."]
    return [f"Discord rejected the command list: {error}"]


def install_signal_handlers(bot: LoungeBot, loop: asyncio.AbstractEventLoop) -> List[asyncio.Task]:
    """
    Close the bot on SIGINT/SIGTERM.

    Returns:
        List that receives the shutdown task, so it is not garbage collected.
    """
    shutdown_tasks: List[asyncio.Task] = []

    def handle_shutdown(sig: signal.Signals) -> None:
        if shutdown_tasks:
            return
        logger.info(f"Shutdown Signal Received ({sig.name})")
        shutdown_tasks.append(loop.create_task(bot.close()))

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, handle_shutdown, sig)
        except NotImplementedError:
            # Windows: fall back to signal.signal for Ctrl+C only
            if sig == signal.SIGINT:
                signal.signal(
                    signal.SIGINT,
                    lambda s, f: loop.call_soon_threadsafe(handle_shutdown, signal.SIGINT),
                )

    return shutdown_tasks


async def main() -> int:
    """
    Run the bot until it disconnects.

    1. Loads .env and validates configuration
    2. Creates the bot and installs loop and signal handlers
    3. Logs in, registers commands (setup_hook) and connects

    Returns:
        Process exit code.
    """
    load_dotenv()

    try:
        config = validate_and_log_config()
    except ConfigValidationError as e:
        logger.error(str(e), [("Variable", name) for name in e.problems])
        logger.error("Set the variables above in the environment or a .env file")
        return 1

    logger.tree("LOUNGE STARTING", [
        ("Client ID", str(config.client_id)),
        ("Commands", "Guild" if config.guild_id else "Global"),
    ], emoji="🔥")

    if config.error_webhook_url:
        logger.set_webhook(config.error_webhook_url)

    loop = asyncio.get_running_loop()
    install_loop_exception_handler(loop)

    bot = LoungeBot(config)
    install_signal_handlers(bot, loop)

    try:
        async with bot:
            await bot.start(config.discord_token)
    except discord.LoginFailure:
        logger.error("Login Failed", [("Reason", "Invalid DISCORD_TOKEN")])
        return 1
    except discord.PrivilegedIntentsRequired:
        logger.error("Login Failed", [
            ("Reason", "Privileged intents are not enabled"),
            ("Fix", "Enable Server Members and Message Content intents in the Developer Portal"),
        ])
        return 1
    except CommandRegistrationError as e:
        logger.critical("Startup Aborted: slash command registration failed")
        for line in describe_registration_failure(e):
            logger.error(line)
        return 1
    except Exception as e:
        ErrorHandler.handle(e, location="main.main", critical=True)
        return 1

    logger.success("Bot stopped cleanly")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (Ctrl+C)")
        sys.exit(0)
