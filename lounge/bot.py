"""
Lounge Discord Bot - Main Bot Class
===================================

Core Discord client: loads the command and event cogs, registers slash
commands with Discord, and owns the shared services (storage, reminder
scheduler, content API client).

Startup order:
    1. __init__: intents, command tree, storage, services
    2. setup_hook (after login, before the gateway connects):
       - HTTP session for the content APIs
       - command and event cogs
       - slash command registration (fatal on failure)
    3. on_ready: presence
"""

import sys
from datetime import datetime
from typing import Optional, Set

import discord
from discord import app_commands
from discord.ext import commands

from lounge.core.config import Config, get_config
from lounge.core.errors import CommandRegistrationError
from lounge.core.logger import logger
from lounge.core.storage import Storage
from lounge.core.tree import LoungeCommandTree
from lounge.services.content_api import ContentAPI
from lounge.services.reminders import ReminderScheduler
from lounge.utils.error_handler import ErrorHandler


def build_intents() -> discord.Intents:
    """Gateway event categories the bot subscribes to."""
    intents = discord.Intents.none()
    intents.guilds = True
    intents.guild_messages = True
    intents.message_content = True
    intents.members = True
    intents.moderation = True
    intents.voice_states = True
    return intents


# =============================================================================
# LoungeBot Class
# =============================================================================

class LoungeBot(commands.Bot):
    """
    Main Discord bot class.

    Attributes:
        config: Validated configuration.
        storage: In-memory tables shared by every handler.
        reminders: Scheduler for /remind.
        content_api: HTTP client for memes and pat GIFs.
        builtin_commands: Names of the statically declared slash commands.
    """

    tree: LoungeCommandTree

    def __init__(
        self,
        config: Optional[Config] = None,
        storage: Optional[Storage] = None,
    ) -> None:
        self.config = config or get_config()

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=build_intents(),
            help_command=None,
            application_id=self.config.client_id,
            tree_cls=LoungeCommandTree,
        )

        self.storage = storage or Storage.in_memory()
        self.reminders = ReminderScheduler(self.storage.reminders)
        self.content_api = ContentAPI(
            meme_url=self.config.meme_api_url,
            pat_url=self.config.pat_api_url,
        )
        self.builtin_commands: Set[str] = set()
        self.start_time: datetime = datetime.now()

        logger.info("Bot Instance Created")

    @property
    def command_guild(self) -> Optional[discord.Object]:
        """Guild the commands are scoped to, or None for global commands."""
        if self.config.guild_id:
            return discord.Object(id=self.config.guild_id)
        return None

    # =========================================================================
    # Setup Hook
    # =========================================================================

    async def setup_hook(self) -> None:
        """Open the HTTP session, load cogs and register slash commands."""
        await self.content_api.start()

        from lounge.commands import COMMAND_COGS
        from lounge.events import EVENT_COGS

        for cog in COMMAND_COGS + EVENT_COGS:
            await self.load_extension(cog)
            logger.info(f"Cog Loaded: {cog.split('.')[-1]}")

        self.builtin_commands = {command.name for command in self.tree.get_commands()}

        if self.command_guild:
            self.tree.copy_global_to(guild=self.command_guild)

        await self.sync_commands()

    async def sync_commands(self) -> int:
        """
        Push the full command list to Discord (bulk overwrite).

        Returns:
            Number of commands Discord now has registered.

        Raises:
            CommandRegistrationError: If Discord rejects the registration.
        """
        guild = self.command_guild
        scope = f"guild {guild.id}" if guild else "global (up to 1 hour to propagate)"
        logger.info("Started refreshing application (/) commands")

        try:
            synced = await self.tree.sync(guild=guild)
        except discord.HTTPException as e:
            logger.error("Command Registration Failed", [
                ("Scope", scope),
                ("Status", str(e.status)),
                ("Code", str(e.code)),
                ("Error", str(e)[:100]),
            ])
            raise CommandRegistrationError(str(e)) from e

        logger.tree("Commands Synced", [
            ("Scope", scope),
            ("Count", str(len(synced))),
        ], emoji="✅")
        return len(synced)

    async def publish_command(self, command: app_commands.Command) -> bool:
        """
        Add a slash command at runtime and re-register the command list.

        Returns:
            True if Discord accepted the new list. False if the tree is full
            (100 commands per scope) or the sync failed; on a failed sync the
            command is removed from the tree again.
        """
        guild = self.command_guild
        try:
            self.tree.add_command(command, guild=guild, override=True)
        except app_commands.AppCommandError as e:
            logger.warning("Command Not Published", [
                ("Command", f"/{command.name}"),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
            return False

        try:
            await self.sync_commands()
        except CommandRegistrationError:
            self.tree.remove_command(command.name, guild=guild)
            return False
        return True

    # =========================================================================
    # Events
    # =========================================================================

    async def on_ready(self) -> None:
        if not self.user:
            return

        await self.change_presence(activity=discord.Game(name=self.config.activity))

        logger.tree("BOT READY", [
            ("Logged In As", f"{self.user} ({self.user.id})"),
            ("Guilds", str(len(self.guilds))),
            ("Commands", str(len(self.builtin_commands))),
            ("Activity", f"Playing {self.config.activity}"),
        ], emoji="🚀")

    async def on_app_command_completion(
        self,
        interaction: discord.Interaction,
        command: app_commands.Command,
    ) -> None:
        logger.tree("Command Used", [
            ("Command", f"/{command.qualified_name}"),
            ("User", f"{interaction.user} ({interaction.user.id})"),
            ("Guild", interaction.guild.name if interaction.guild else "DM"),
        ], emoji="💬")

    async def on_error(self, event_method: str, /, *args, **kwargs) -> None:
        """Log exceptions escaping event listeners; the bot keeps running."""
        error = sys.exc_info()[1]
        if error is None:
            return
        message = args[0] if args and isinstance(args[0], discord.Message) else None
        ErrorHandler.handle(error, location=f"event.{event_method}", message=message)

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def close(self) -> None:
        """Cancel pending reminders, close HTTP, then disconnect."""
        if self.is_closed():
            return
        logger.info("Initiating Graceful Shutdown")

        counts = await self.storage.counts()
        cancelled = await self.reminders.cancel_all()
        await self.content_api.close()
        await super().close()

        logger.tree_nested("SHUTDOWN COMPLETE", [
            ("Session", [
                ("Uptime", str(datetime.now() - self.start_time).split(".")[0]),
                ("Reminders Cancelled", str(cancelled)),
            ]),
            ("Discarded State", [
                (table.replace("_", " ").title(), str(count))
                for table, count in counts.items()
            ]),
        ], emoji="🛑")


__all__ = ["LoungeBot", "build_intents"]
