"""
Lounge Discord Bot - Data Models
================================

Records held by the in-memory stores. All are created once and never
mutated afterwards.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class WarningRecord:
    """A single moderator warning issued to a user."""

    user_id: int
    reason: str
    moderator_id: int
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class AfkRecord:
    """Self-declared absence of a user."""

    reason: str
    created_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class CustomCommand:
    """Literal reply text registered under a command name."""

    name: str
    response: str
    created_by: Optional[int] = None


@dataclass(frozen=True)
class Reminder:
    """A pending fire-once reminder."""

    id: str
    user_id: int
    message: str
    fire_at: datetime
    channel_id: Optional[int] = None


__all__ = [
    "AfkRecord",
    "CustomCommand",
    "Reminder",
    "WarningRecord",
]
