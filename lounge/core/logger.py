"""
Lounge Discord Bot - Logger Module
==================================

Tree-style console and file logging with daily rotation.

DESIGN:
    Structured, hierarchical output that is easy to scan in a terminal.
    Related values are grouped under a title with tree connectors.

    Key features:
    - Tree-style formatting for structured data
    - Configurable timezone for timestamps (LOG_TIMEZONE, default UTC)
    - Daily log directories with a separate errors-only file
    - Retention cleanup of old log directories (LOG_RETENTION_DAYS)
    - Session header with a unique run ID
    - Optional Discord webhook for error alerts
"""

import asyncio
import os
import uuid
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import aiohttp


# =============================================================================
# Constants
# =============================================================================

DEFAULT_LOG_DIR = "logs"
"""Directory for log files when LOG_DIR is not set."""

DEFAULT_RETENTION_DAYS = 7
"""Days to keep dated log directories when LOG_RETENTION_DAYS is not set."""


def _resolve_timezone(name: Optional[str]) -> ZoneInfo:
    """Resolve an IANA zone name, falling back to UTC."""
    try:
        return ZoneInfo(name or "UTC")
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def _retention_days() -> int:
    value = os.getenv("LOG_RETENTION_DAYS", "")
    return int(value) if value.isdigit() else DEFAULT_RETENTION_DAYS


# =============================================================================
# Tree Logger Class
# =============================================================================

class TreeLogger:
    """
    Logger with tree-style formatting.

    Attributes:
        run_id: Unique identifier for this bot session.
        tz: Timezone used for timestamps and dated folders.
        log_file: Path to the main log file.
        error_file: Path to the error-only log file.
    """

    def __init__(
        self,
        log_root: Optional[Path] = None,
        tz: Optional[ZoneInfo] = None,
        retention_days: Optional[int] = None,
    ) -> None:
        self.run_id: str = uuid.uuid4().hex[:8]
        self.tz = tz or _resolve_timezone(os.getenv("LOG_TIMEZONE"))
        self.log_root = Path(log_root or os.getenv("LOG_DIR") or DEFAULT_LOG_DIR)
        self.retention_days = retention_days if retention_days is not None else _retention_days()
        self._webhook_url: Optional[str] = None

        today = datetime.now(self.tz).strftime("%Y-%m-%d")
        self.log_dir = self.log_root / today
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.log_file = self.log_dir / f"Lounge-{today}.log"
        self.error_file = self.log_dir / f"Lounge-Errors-{today}.log"

        self._cleanup_old_logs()
        self._write_session_header()

    def set_webhook(self, url: Optional[str]) -> None:
        """Set the Discord webhook URL used for error alerts."""
        self._webhook_url = url

    # =========================================================================
    # Log Cleanup
    # =========================================================================

    def _cleanup_old_logs(self) -> None:
        """Remove dated log directories older than the retention period."""
        now = datetime.now(self.tz).replace(tzinfo=None)
        deleted = 0

        for item in self.log_root.iterdir():
            if not item.is_dir():
                continue
            try:
                dir_date = datetime.strptime(item.name, "%Y-%m-%d")
            except ValueError:
                continue
            if (now - dir_date).days > self.retention_days:
                for f in item.iterdir():
                    f.unlink()
                item.rmdir()
                deleted += 1

        if deleted:
            print(f"[LOG CLEANUP] Removed {deleted} old log directories")

    def _write_session_header(self) -> None:
        header = (
            "\n============================================================\n"
            f"NEW SESSION - RUN ID: {self.run_id}\n"
            f"[{datetime.now(self.tz).strftime('%I:%M:%S %p %Z')}]\n"
            "============================================================\n"
        )
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(header)

    # =========================================================================
    # Core Logging
    # =========================================================================

    def _get_timestamp(self) -> str:
        return datetime.now(self.tz).strftime("[%I:%M:%S %p %Z]")

    def _write(
        self,
        message: str,
        emoji: str = "",
        include_timestamp: bool = True,
        is_error: bool = False,
    ) -> None:
        """
        Write a line to the console and the log file.

        Args:
            message: Log message content.
            emoji: Optional emoji prefix.
            include_timestamp: Whether to prepend the timestamp.
            is_error: Whether to also write to the error log.
        """
        parts = []
        if include_timestamp:
            parts.append(self._get_timestamp())
        if emoji:
            parts.append(emoji)
        parts.append(message)
        full_message = " ".join(parts)

        print(full_message)

        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(f"{full_message}\n")

        if is_error:
            with open(self.error_file, "a", encoding="utf-8") as f:
                f.write(f"{full_message}\n")

    # =========================================================================
    # Tree Formatting
    # =========================================================================

    def tree(
        self,
        title: str,
        items: List[Tuple[str, str]],
        emoji: str = "📦",
    ) -> None:
        """
        Log structured data in tree format.

        Example output:
            [02:30:45 PM UTC] 📦 Command Used
              ├─ Command: /warn
              └─ User: someone (1234)
        """
        self._write(title, emoji=emoji)

        for i, (key, value) in enumerate(items):
            prefix = "└─" if i == len(items) - 1 else "├─"
            self._write(f"  {prefix} {key}: {value}", include_timestamp=False)

    def tree_nested(
        self,
        title: str,
        sections: List[Tuple[str, List[Tuple[str, str]]]],
        emoji: str = "📦",
    ) -> None:
        """Log a two-level tree: sections, each with its own items."""
        self._write(title, emoji=emoji)

        for i, (section_name, items) in enumerate(sections):
            is_last_section = i == len(sections) - 1
            section_prefix = "└─" if is_last_section else "├─"
            self._write(f"  {section_prefix} {section_name}", include_timestamp=False)

            connector = "   " if is_last_section else "│  "
            for j, (key, value) in enumerate(items):
                item_prefix = "└─" if j == len(items) - 1 else "├─"
                self._write(
                    f"  {connector} {item_prefix} {key}: {value}",
                    include_timestamp=False,
                )

    # =========================================================================
    # Log Levels
    # =========================================================================

    def debug(self, msg: str) -> None:
        """Log debug message (only if DEBUG env var set)."""
        if os.getenv("DEBUG"):
            self._write(msg, "🔍")

    def info(self, msg: str) -> None:
        self._write(msg, "ℹ️")

    def success(self, msg: str) -> None:
        self._write(msg, "✅")

    def warning(
        self,
        msg: str,
        details: Optional[List[Tuple[str, str]]] = None,
    ) -> None:
        if details:
            self.tree(msg, details, emoji="⚠️")
        else:
            self._write(msg, "⚠️")

    def error(
        self,
        msg: str,
        details: Optional[List[Tuple[str, str]]] = None,
    ) -> None:
        """
        Log an error with optional structured details.

        Errors are written to both the main and the error log. With details,
        the error is also forwarded to the webhook when one is configured.

        Args:
            msg: Error message or title.
            details: Optional list of (key, value) detail tuples.
        """
        self._write(msg, "❌", is_error=True)
        if not details:
            return

        for i, (key, value) in enumerate(details):
            prefix = "└─" if i == len(details) - 1 else "├─"
            self._write(
                f"  {prefix} {key}: {value}",
                include_timestamp=False,
                is_error=True,
            )

        if self._webhook_url:
            try:
                asyncio.get_running_loop().create_task(
                    self._send_webhook_error(msg, details)
                )
            except RuntimeError:
                pass  # No running loop (startup/shutdown)

    def critical(self, msg: str) -> None:
        self._write(msg, "🚨", is_error=True)

    # =========================================================================
    # Webhook Integration
    # =========================================================================

    async def _send_webhook_error(
        self,
        title: str,
        details: List[Tuple[str, str]],
    ) -> None:
        """Post an error embed to the configured Discord webhook."""
        if not self._webhook_url:
            return

        payload = {
            "embeds": [{
                "title": f"❌ {title}",
                "description": "\n".join(f"**{k}:** {v}" for k, v in details),
                "color": 0xDC3545,
                "timestamp": datetime.now(self.tz).isoformat(),
                "footer": {"text": f"Run ID: {self.run_id}"},
            }]
        }

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self._webhook_url,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=10),
                ) as resp:
                    if resp.status != 204:
                        print(f"Webhook error: {resp.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            print(f"Failed to send webhook: {e}")


# =============================================================================
# Global Instance
# =============================================================================

logger = TreeLogger()
"""Global logger instance shared by every module."""


__all__ = [
    "logger",
    "TreeLogger",
]
