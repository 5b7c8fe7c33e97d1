"""Single-line progress layout that drops sections as the width shrinks.

A full line looks like this::

    [#####----------]  333/1000 (33%) |    eta 30s |  20.00 bps

The bracketed bar always comes first and takes every column the optional
sections leave over. Sections are added in priority order (ETA value,
progress/total, speed, percentage, ETA label) for as long as they fit, and
are joined in display order (bar, progress/total, percentage, ETA, speed).
"""

import math

from tickbar.eta import RateEstimate
from tickbar.stats import SPEED_WIDTH as SPEED_TEXT_WIDTH
from tickbar.stats import format_duration, format_speed

__all__ = [
    "MIN_BAR_WIDTH",
    "PROCESSED",
    "UNPROCESSED",
    "needs_estimate",
    "render_line",
]

MIN_BAR_WIDTH = 16

PROCESSED = "#"
UNPROCESSED = "-"
SEPARATOR = "|"

# Columns taken by the fixed-size optional sections
ETA_VALUE_WIDTH = 7
SPEED_WIDTH = 13
PERCENT_WIDTH = 6
ETA_LABEL_WIDTH = 4


def needs_estimate(width: int) -> bool:
    """Whether a line of this width shows any rate information."""
    return width - MIN_BAR_WIDTH >= ETA_VALUE_WIDTH


def _bar(width: int, ratio: float) -> str:
    fill = width - 2
    done = math.floor(fill * ratio)
    return f"[{PROCESSED * done}{UNPROCESSED * (fill - done)}]"


def render_line(width: int, progress: int, total: int, estimate: RateEstimate | None) -> str:
    """Compose the progress line; never longer than width.

    Args:
        width: Columns available for the whole line
        progress: Units processed so far
        total: Total units
        estimate: Latest speed/ETA; required once the width fits the ETA section
    """
    if width < MIN_BAR_WIDTH:
        # No room for a bar, show a plain row of processed glyphs
        return PROCESSED * max(0, width)

    remaining = width - MIN_BAR_WIDTH
    ratio = progress / total if total else 1.0

    def assemble(*sections: str) -> str:
        return _bar(MIN_BAR_WIDTH + remaining, ratio) + "".join(sections)

    # ETA value: " 30s" padded to 7, leading space doubles as separator
    if remaining < ETA_VALUE_WIDTH:
        return assemble()
    if estimate is None:
        raise ValueError(f"an estimate is required for width {width}")
    duration = format_duration(estimate.eta)
    eta_section = duration.rjust(ETA_VALUE_WIDTH)
    remaining -= ETA_VALUE_WIDTH

    # Progress and total: two numbers, the slash, padding and the " |" before ETA
    digits = len(str(total))
    counts_width = 2 * digits + 4
    if remaining < counts_width:
        return assemble(eta_section)
    counts_section = f"{progress}/{total}".rjust(2 * digits + 2)
    eta_section = f" {SEPARATOR}{eta_section}"
    remaining -= counts_width

    if remaining < SPEED_WIDTH:
        return assemble(counts_section, eta_section)
    speed_section = f" {SEPARATOR} {format_speed(estimate.speed).rjust(SPEED_TEXT_WIDTH)}"
    remaining -= SPEED_WIDTH

    if remaining < PERCENT_WIDTH:
        return assemble(counts_section, eta_section, speed_section)
    percent_section = f"({math.floor(ratio * 100)}%)".rjust(PERCENT_WIDTH)
    remaining -= PERCENT_WIDTH

    if remaining < ETA_LABEL_WIDTH:
        return assemble(counts_section, percent_section, eta_section, speed_section)
    eta_section = f" {SEPARATOR} {f'eta {duration}'.rjust(10)}"
    remaining -= ETA_LABEL_WIDTH

    return assemble(counts_section, percent_section, eta_section, speed_section)
