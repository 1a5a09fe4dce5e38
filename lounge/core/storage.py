"""
Lounge Discord Bot - Storage Module
===================================

Key-value tables for warnings, AFK status, custom commands and reminders.

DESIGN:
    Handlers never touch a dict directly; they go through a table object
    with async get/set/append/delete methods. The in-memory backend below
    is the only one shipped, but a persistent backend only needs to
    implement KeyValueBackend to be swapped in through Storage.

    Every mutation of a key runs under a per-key asyncio.Lock, so a
    read-modify-write (append a warning) stays atomic even if a backend
    awaits I/O in the middle of it.
"""

import asyncio
import weakref
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, Hashable, List, Optional, Tuple, TypeVar

from lounge.core.models import AfkRecord, CustomCommand, Reminder, WarningRecord


K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


# =============================================================================
# Backend Interface
# =============================================================================

class KeyValueBackend(ABC, Generic[K, V]):
    """Minimal async key-value interface a table is built on."""

    @abstractmethod
    async def get(self, key: K) -> Optional[V]:
        ...

    @abstractmethod
    async def set(self, key: K, value: V) -> None:
        ...

    @abstractmethod
    async def delete(self, key: K) -> Optional[V]:
        """Remove a key and return its previous value (None if absent)."""

    @abstractmethod
    async def items(self) -> List[Tuple[K, V]]:
        ...


class InMemoryBackend(KeyValueBackend[K, V]):
    """Dict-backed storage, process lifetime only."""

    def __init__(self) -> None:
        self._data: Dict[K, V] = {}

    async def get(self, key: K) -> Optional[V]:
        return self._data.get(key)

    async def set(self, key: K, value: V) -> None:
        self._data[key] = value

    async def delete(self, key: K) -> Optional[V]:
        return self._data.pop(key, None)

    async def items(self) -> List[Tuple[K, V]]:
        return list(self._data.items())


# =============================================================================
# Table Base
# =============================================================================

class Table(Generic[K, V]):
    """
    A backend plus one lock per key.

    Locks live only while some coroutine holds or waits on them, so the
    lock map never outgrows the number of keys being mutated right now.
    """

    def __init__(self, backend: Optional[KeyValueBackend[K, V]] = None) -> None:
        self._backend: KeyValueBackend[K, V] = backend or InMemoryBackend()
        self._locks: "weakref.WeakValueDictionary[K, asyncio.Lock]" = weakref.WeakValueDictionary()

    def lock(self, key: K) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    async def get(self, key: K) -> Optional[V]:
        return await self._backend.get(key)

    async def set(self, key: K, value: V) -> None:
        async with self.lock(key):
            await self._backend.set(key, value)

    async def delete(self, key: K) -> Optional[V]:
        async with self.lock(key):
            return await self._backend.delete(key)

    async def update(self, key: K, fn: Callable[[Optional[V]], V]) -> V:
        """Replace the value of key with fn(old value), atomically per key."""
        async with self.lock(key):
            value = fn(await self._backend.get(key))
            await self._backend.set(key, value)
            return value

    async def contains(self, key: K) -> bool:
        return await self._backend.get(key) is not None

    async def items(self) -> List[Tuple[K, V]]:
        return await self._backend.items()


# =============================================================================
# Tables
# =============================================================================

class WarningStore(Table[int, Tuple[WarningRecord, ...]]):
    """Warnings by user id, oldest first. Append-only."""

    async def append(self, record: WarningRecord) -> int:
        """Add a warning and return the user's new warning count."""
        records = await self.update(
            record.user_id,
            lambda old: (old or ()) + (record,),
        )
        return len(records)

    async def list(self, user_id: int) -> Tuple[WarningRecord, ...]:
        return await self.get(user_id) or ()


class AfkStore(Table[int, AfkRecord]):
    """AFK status by user id, at most one record per user."""

    async def pop(self, user_id: int) -> Optional[AfkRecord]:
        return await self.delete(user_id)


class CustomCommandStore(Table[str, CustomCommand]):
    """Custom command replies by name. Re-adding a name overwrites it."""

    async def add(self, command: CustomCommand) -> Optional[CustomCommand]:
        """Store a command and return the entry it replaced, if any."""
        async with self.lock(command.name):
            previous = await self._backend.get(command.name)
            await self._backend.set(command.name, command)
            return previous

    async def names(self) -> List[str]:
        return [name for name, _ in await self.items()]


class ReminderStore(Table[str, Reminder]):
    """Pending reminders by reminder id."""

    async def add(self, reminder: Reminder) -> None:
        await self.set(reminder.id, reminder)

    async def remove(self, reminder_id: str) -> Optional[Reminder]:
        return await self.delete(reminder_id)

    async def pending(self, user_id: Optional[int] = None) -> List[Reminder]:
        """Pending reminders ordered by fire time, optionally for one user."""
        reminders = [r for _, r in await self.items()]
        if user_id is not None:
            reminders = [r for r in reminders if r.user_id == user_id]
        return sorted(reminders, key=lambda r: r.fire_at)


# =============================================================================
# Storage Container
# =============================================================================

class Storage:
    """The bot's tables. Nothing references across tables."""

    def __init__(
        self,
        warnings: WarningStore,
        afk: AfkStore,
        custom_commands: CustomCommandStore,
        reminders: ReminderStore,
    ) -> None:
        self.warnings = warnings
        self.afk = afk
        self.custom_commands = custom_commands
        self.reminders = reminders

    @classmethod
    def in_memory(cls) -> "Storage":
        return cls(
            warnings=WarningStore(),
            afk=AfkStore(),
            custom_commands=CustomCommandStore(),
            reminders=ReminderStore(),
        )

    async def counts(self) -> Dict[str, Any]:
        """Row counts per table, for status logging."""
        return {
            "warnings": len(await self.warnings.items()),
            "afk": len(await self.afk.items()),
            "custom_commands": len(await self.custom_commands.items()),
            "reminders": len(await self.reminders.items()),
        }


__all__ = [
    "AfkStore",
    "CustomCommandStore",
    "InMemoryBackend",
    "KeyValueBackend",
    "ReminderStore",
    "Storage",
    "Table",
    "WarningStore",
]
