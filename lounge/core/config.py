"""
Lounge Discord Bot - Configuration Module
=========================================

Centralized configuration loaded from environment variables.

DESIGN:
    A single Config dataclass is built once at startup. Required values are
    all collected before failing, so one diagnostic names every missing
    variable. get_config() caches the instance for the rest of the process.
"""

import os
from dataclasses import dataclass
from typing import List, Optional


# =============================================================================
# Constants
# =============================================================================

MIN_TOKEN_LENGTH = 50
"""Discord bot tokens are 70+ characters; anything under this is malformed."""

DEFAULT_MEME_API_URL = "https://meme-api.com/gimme"
DEFAULT_PAT_API_URL = "https://api.waifu.pics/sfw/pat"
DEFAULT_ACTIVITY = "with Discord API"


# =============================================================================
# Embed Colors
# =============================================================================

class EmbedColors:
    """Color palette for embeds."""

    BLURPLE = 0x5865F2  # Discord blurple, informational embeds
    WARNING = 0xFFCC00  # Warning listings
    MEME = 0xFF6B6B
    PETPET = 0xFFB6C1

    INFO = BLURPLE


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class Config:
    """
    Bot configuration loaded from environment variables.

    Attributes:
        discord_token: Bot authentication token.
        client_id: Application ID the slash commands are registered under.
        guild_id: When set, commands are registered to this guild only.
        error_webhook_url: Discord webhook that receives error alerts.
        meme_api_url: Endpoint returning a random meme as JSON.
        pat_api_url: Endpoint returning a random pat GIF as JSON.
        activity: Presence text shown as "Playing ...".
    """

    # -------------------------------------------------------------------------
    # Required
    # -------------------------------------------------------------------------

    discord_token: str
    client_id: int

    # -------------------------------------------------------------------------
    # Optional
    # -------------------------------------------------------------------------

    guild_id: Optional[int] = None
    error_webhook_url: Optional[str] = None
    meme_api_url: str = DEFAULT_MEME_API_URL
    pat_api_url: str = DEFAULT_PAT_API_URL
    activity: str = DEFAULT_ACTIVITY

    @property
    def masked_token(self) -> str:
        """First ten characters of the token, for startup diagnostics."""
        return f"{self.discord_token[:10]}..."


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """
    Raised when required configuration is missing or invalid.

    Attributes:
        problems: One entry per offending variable.
    """

    def __init__(self, message: str, problems: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.problems = problems or []


def _parse_int(value: str, name: str) -> int:
    """
    Parse a required integer (Discord snowflake).

    Raises:
        ConfigValidationError: If value is not a valid integer.
    """
    try:
        return int(value.strip())
    except ValueError:
        raise ConfigValidationError(
            f"Invalid integer for {name}: {value}", [name]
        ) from None


def _parse_int_optional(value: Optional[str], name: str) -> Optional[int]:
    """Parse an optional integer; empty means unset, garbage is an error."""
    if not value or not value.strip():
        return None
    return _parse_int(value, name)


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """Return the URL if it looks like http(s), otherwise ignore it."""
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        from lounge.core.logger import logger
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config() -> Config:
    """
    Load and validate configuration from environment variables.

    Returns:
        Validated Config object.

    Raises:
        ConfigValidationError: If any required variable is missing or invalid.
    """
    missing = []

    discord_token = os.getenv("DISCORD_TOKEN", "").strip()
    if not discord_token:
        missing.append("DISCORD_TOKEN")

    client_id_str = os.getenv("CLIENT_ID", "").strip()
    if not client_id_str:
        missing.append("CLIENT_ID")

    if missing:
        raise ConfigValidationError(
            f"Missing required environment variables: {', '.join(missing)}",
            missing,
        )

    if len(discord_token) < MIN_TOKEN_LENGTH:
        raise ConfigValidationError(
            "Invalid DISCORD_TOKEN format. Please check your bot token.",
            ["DISCORD_TOKEN"],
        )

    return Config(
        discord_token=discord_token,
        client_id=_parse_int(client_id_str, "CLIENT_ID"),
        guild_id=_parse_int_optional(os.getenv("GUILD_ID"), "GUILD_ID"),
        error_webhook_url=_validate_url(os.getenv("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
        meme_api_url=_validate_url(os.getenv("MEME_API_URL"), "MEME_API_URL") or DEFAULT_MEME_API_URL,
        pat_api_url=_validate_url(os.getenv("PAT_API_URL"), "PAT_API_URL") or DEFAULT_PAT_API_URL,
        activity=os.getenv("BOT_ACTIVITY") or DEFAULT_ACTIVITY,
    )


# =============================================================================
# Global Config Instance
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance, loading it on first use.

    Raises:
        ConfigValidationError: On first call if config is invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def validate_and_log_config() -> Config:
    """
    Load the config (triggering validation) and log a masked summary.

    Raises:
        ConfigValidationError: If required configuration is missing.
    """
    from lounge.core.logger import logger

    config = get_config()

    logger.tree("Configuration Validated", [
        ("Token", config.masked_token),
        ("Client ID", str(config.client_id)),
        ("Guild ID", str(config.guild_id) if config.guild_id else "Not set (global commands)"),
        ("Error Webhook", "Enabled" if config.error_webhook_url else "Disabled"),
    ], emoji="⚙️")

    return config


__all__ = [
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "MIN_TOKEN_LENGTH",
    "get_config",
    "load_config",
    "validate_and_log_config",
]
