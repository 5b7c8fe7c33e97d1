"""Human-readable formatting of speeds and durations for the progress line."""

import math

__all__ = [
    "DURATION_WIDTH",
    "SPEED_WIDTH",
    "format_duration",
    "format_speed",
]

# Longest strings the formatters may return
DURATION_WIDTH = 6
SPEED_WIDTH = 10


def _floor_one_decimal(value: float) -> str:
    """Truncate a non-negative value to one decimal (never rounds up)."""
    return f"{math.floor(value * 10) / 10:.1f}"


def format_speed(speed: float) -> str:
    """Format units per second, at most 10 characters."""
    if speed == 0:
        # Exact zero is distinct from a tiny rate like "0.00 bps"
        return "0 bps"
    if speed < 1000:
        return f"{math.floor(speed * 100) / 100:.2f} bps"
    if speed < 1000**2:
        return f"{_floor_one_decimal(speed / 1000)} kbps"
    if speed < 1000**3:
        return f"{_floor_one_decimal(speed / 1000**2)} mbps"
    if speed < 1000**4:
        return f"{_floor_one_decimal(speed / 1000**3)} gbps"
    if speed < 1000**4 * 100:
        return f"{math.floor(speed / 1000**3)} gbps"
    return "99999 gbps"


def format_duration(seconds: float) -> str:
    """Format seconds as a short duration, at most 6 characters.

    Zero means the work is finished and infinity means no estimate is possible
    yet (usually right after starting, or when nothing moves).
    """
    if seconds == 0:
        return "done"
    if seconds == math.inf:
        return "--"

    seconds = round(seconds)
    if seconds < 60:
        return f"{seconds}s"
    elif seconds < 3600:
        m, s = divmod(seconds, 60)
        return f"{m}m{s:>2}s"
    elif seconds < 3600 * 100:
        h = seconds // 3600
        m = seconds // 60 % 60
        return f"{h}h{m:>2}m"
    elif seconds < 86400 * 100:
        d = seconds // 86400
        h = seconds // 3600 % 24
        return f"{d}d{h:>2}h"
    elif seconds < 86400 * 100_000:
        return f"{seconds // 86400}d"
    return "99999d"
