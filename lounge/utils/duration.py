"""
Duration Utilities
==================

Parsing of the compact reminder duration format: digits followed by
exactly one unit letter (s, m, h or d).

Usage:
    from lounge.utils.duration import parse_time_ms

    parse_time_ms("5m")   # 300000
    parse_time_ms("2d")   # 172800000
    parse_time_ms("5x")   # None
"""

import re
from typing import Optional


# =============================================================================
# Time Constants
# =============================================================================

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

UNIT_MULTIPLIERS = {
    "s": MS_PER_SECOND,
    "m": MS_PER_MINUTE,
    "h": MS_PER_HOUR,
    "d": MS_PER_DAY,
}

DURATION_PATTERN = re.compile(r"(\d+)([smhd])", re.ASCII)
"""Whole-string pattern; used with fullmatch so no trailing text is accepted."""


# =============================================================================
# Parsing
# =============================================================================

def parse_time_ms(time_str: str) -> Optional[int]:
    """
    Parse a compact duration into milliseconds.

    Args:
        time_str: Duration such as "30s", "5m", "1h" or "2d".

    Returns:
        Duration in milliseconds, or None when the string does not match.
        "0m" parses to 0; callers decide whether zero is acceptable.
    """
    match = DURATION_PATTERN.fullmatch(time_str)
    if not match:
        return None
    value, unit = match.groups()
    return int(value) * UNIT_MULTIPLIERS[unit]


__all__ = [
    "MS_PER_DAY",
    "MS_PER_HOUR",
    "MS_PER_MINUTE",
    "MS_PER_SECOND",
    "parse_time_ms",
]
