"""tickbar - Terminal progress bar with sliding-window ETA.

This package draws a single-line progress bar that estimates speed and
remaining time over a sliding window of recent samples, adapts its layout to
the terminal width and lets log lines be printed without breaking the bar.
"""

from importlib.metadata import PackageNotFoundError, version

from tickbar.eta import EtaTracker, RateEstimate
from tickbar.layout import MIN_BAR_WIDTH, render_line
from tickbar.progress import (
    BarLogHandler,
    BarState,
    BarStateError,
    ProgressBar,
    ProgressBarError,
    ProgressOverflowError,
)
from tickbar.stats import format_duration, format_speed

try:
    __version__ = version("tickbar")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"

__all__ = [
    "MIN_BAR_WIDTH",
    "BarLogHandler",
    "BarState",
    "BarStateError",
    "EtaTracker",
    "ProgressBar",
    "ProgressBarError",
    "ProgressOverflowError",
    "RateEstimate",
    "__version__",
    "format_duration",
    "format_speed",
    "render_line",
]
