"""Terminal output: cursor movement, line clearing and size queries."""

import os
import sys
from typing import TextIO

__all__ = [
    "CSI",
    "Terminal",
    "open_terminal",
]

CSI = "\x1b["

CURSOR_HIDE = f"{CSI}?25l"
CURSOR_SHOW = f"{CSI}?25h"

# Apple Terminal only understands the DEC save/restore sequences
if os.environ.get("TERM_PROGRAM") == "Apple_Terminal":
    CURSOR_SAVE = "\x1b7"
    CURSOR_RESTORE = "\x1b8"
else:
    CURSOR_SAVE = f"{CSI}s"
    CURSOR_RESTORE = f"{CSI}u"

# Used when the stream is not attached to a terminal
DEFAULT_SIZE = (80, 24)


class Terminal:
    """Escape-sequence writer over a text stream (stderr by default).

    Every method writes to the stream without flushing; callers flush once
    their write sequence is complete so it reaches the terminal in one piece.
    """

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream if stream is not None else sys.stderr

    @property
    def is_interactive(self) -> bool:
        try:
            return self.stream.isatty()
        except (AttributeError, ValueError):
            return False

    def size(self) -> tuple[int, int]:
        """Return (columns, rows)."""
        try:
            size = os.get_terminal_size(self.stream.fileno())
            return size.columns, size.lines
        except (AttributeError, OSError, ValueError):
            return DEFAULT_SIZE

    @property
    def columns(self) -> int:
        return self.size()[0]

    @property
    def rows(self) -> int:
        return self.size()[1]

    def write(self, text: str):
        self.stream.write(text)

    def flush(self):
        self.stream.flush()

    def cursor_to(self, x: int, y: int | None = None):
        """Move to column x (0-based), and to row y if given."""
        if y is None:
            self.write(f"{CSI}{x + 1}G")
        else:
            self.write(f"{CSI}{y + 1};{x + 1}H")

    def move_cursor(self, dx: int, dy: int):
        """Move relative to the current position."""
        seq = ""
        if dx < 0:
            seq += f"{CSI}{-dx}D"
        elif dx > 0:
            seq += f"{CSI}{dx}C"
        if dy < 0:
            seq += f"{CSI}{-dy}A"
        elif dy > 0:
            seq += f"{CSI}{dy}B"
        if seq:
            self.write(seq)

    def clear_line(self):
        """Erase from the cursor to the end of the line."""
        self.write(f"{CSI}0K")

    def hide_cursor(self):
        self.write(CURSOR_HIDE)

    def show_cursor(self):
        self.write(CURSOR_SHOW)

    def save_cursor(self):
        self.write(CURSOR_SAVE)

    def restore_cursor(self):
        self.write(CURSOR_RESTORE)


def open_terminal(output: Terminal | TextIO | None = None) -> Terminal:
    """Wrap a text stream as a Terminal; Terminal instances pass through."""
    if isinstance(output, Terminal):
        return output
    return Terminal(output)
