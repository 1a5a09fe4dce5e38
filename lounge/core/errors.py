"""
Lounge Discord Bot - Error Types
================================

Error kinds produced by command handlers and translated to user text at
the command tree boundary.
"""

from enum import Enum
from typing import Optional


GENERIC_ERROR_MESSAGE = "❌ An error occurred while executing this command."
NOT_IMPLEMENTED_MESSAGE = "❌ Command not implemented yet!"


class ErrorKind(Enum):
    """Why a command could not complete."""

    PERMISSION_DENIED = "permission_denied"
    NOT_FOUND = "not_found"
    PLATFORM_REJECTED = "platform_rejected"
    INVALID_INPUT = "invalid_input"
    INTERNAL = "internal"


class CommandFailure(Exception):
    """
    Expected, user-facing failure raised from a command handler.

    Attributes:
        kind: Classification used for logging.
        message: Text shown to the invoking user.
        ephemeral: Whether the reply is only visible to the invoker.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        ephemeral: bool = False,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.ephemeral = ephemeral
        self.cause = cause


class CommandRegistrationError(Exception):
    """Slash command registration with Discord failed at startup."""


class ContentAPIError(Exception):
    """An outbound content API (memes, pat GIFs) call failed."""


__all__ = [
    "CommandFailure",
    "CommandRegistrationError",
    "ContentAPIError",
    "ErrorKind",
    "GENERIC_ERROR_MESSAGE",
    "NOT_IMPLEMENTED_MESSAGE",
]
