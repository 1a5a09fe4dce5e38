"""
Lounge Discord Bot - Reminder Scheduler
=======================================

Fire-once delayed reminders.

DESIGN:
    Each reminder is an asyncio task sleeping until its fire time, keyed by
    an opaque id that also keys an entry in the ReminderStore. The store
    entry lives exactly as long as the reminder is pending, so pending
    reminders can be listed and cancelled. Nothing is persisted; a restart
    drops every pending reminder.
"""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Dict, List, Optional

from lounge.core.logger import logger
from lounge.core.models import Reminder
from lounge.core.storage import ReminderStore


DeliverFn = Callable[[Reminder], Awaitable[None]]


def fire_time(delay: float) -> datetime:
    """
    UTC time delay seconds from now.

    Raises:
        OverflowError: If the result is past datetime.max.
    """
    return datetime.now(timezone.utc) + timedelta(seconds=delay)


class ReminderScheduler:
    """Schedules, lists and cancels pending reminders."""

    def __init__(self, store: ReminderStore) -> None:
        self.store = store
        self._tasks: Dict[str, asyncio.Task] = {}

    async def schedule(
        self,
        *,
        user_id: int,
        message: str,
        delay: float,
        deliver: DeliverFn,
        channel_id: Optional[int] = None,
    ) -> Reminder:
        """
        Schedule a reminder.

        Args:
            user_id: Who asked for the reminder.
            message: Reminder text.
            delay: Seconds until delivery.
            deliver: Coroutine function called once with the reminder.
            channel_id: Channel the reminder was requested in.

        Returns:
            The stored reminder.
        """
        reminder = Reminder(
            id=uuid.uuid4().hex[:12],
            user_id=user_id,
            message=message,
            fire_at=fire_time(delay),
            channel_id=channel_id,
        )
        await self.store.add(reminder)
        self._tasks[reminder.id] = asyncio.create_task(
            self._run(reminder, delay, deliver),
            name=f"reminder-{reminder.id}",
        )

        logger.tree("Reminder Scheduled", [
            ("ID", reminder.id),
            ("User", str(user_id)),
            ("Fires At", reminder.fire_at.isoformat(timespec="seconds")),
        ], emoji="⏰")
        return reminder

    async def _run(self, reminder: Reminder, delay: float, deliver: DeliverFn) -> None:
        try:
            await asyncio.sleep(delay)
            await self.store.remove(reminder.id)
            await deliver(reminder)
            logger.tree("Reminder Delivered", [
                ("ID", reminder.id),
                ("User", str(reminder.user_id)),
            ], emoji="🔔")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Reminder Delivery Failed", [
                ("ID", reminder.id),
                ("User", str(reminder.user_id)),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:100]),
            ])
        finally:
            self._tasks.pop(reminder.id, None)

    async def pending(self, user_id: Optional[int] = None) -> List[Reminder]:
        return await self.store.pending(user_id)

    async def cancel(self, reminder_id: str) -> bool:
        """Cancel a pending reminder. Returns False if it is not pending."""
        task = self._tasks.pop(reminder_id, None)
        removed = await self.store.remove(reminder_id)
        if task is not None:
            task.cancel()
        return removed is not None or task is not None

    async def cancel_all(self) -> int:
        """Cancel every pending reminder (shutdown). Returns how many."""
        ids = [r.id for r in await self.store.pending()]
        cancelled = 0
        for reminder_id in ids:
            if await self.cancel(reminder_id):
                cancelled += 1
        if cancelled:
            logger.info(f"Cancelled {cancelled} pending reminder(s)")
        return cancelled


__all__ = [
    "ReminderScheduler",
    "fire_time",
]
