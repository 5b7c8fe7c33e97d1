"""Progress bar with periodic ETA refresh and log lines that do not break it."""

import atexit
import logging
import signal
import threading
from collections.abc import Callable
from enum import Enum, auto
from typing import TextIO

from tickbar.eta import EtaTracker, RateEstimate
from tickbar.io import Terminal, open_terminal
from tickbar.layout import MIN_BAR_WIDTH, needs_estimate, render_line

__all__ = [
    "BarLogHandler",
    "BarState",
    "BarStateError",
    "ProgressBar",
    "ProgressBarError",
    "ProgressOverflowError",
]

logger = logging.getLogger(__name__)

# Samples kept by the ETA tracker; at one refresh per second this is two minutes
WINDOW_SIZE = 120


class BarState(Enum):
    READY = auto()
    RUNNING = auto()
    STOPPED = auto()


class ProgressBarError(Exception):
    """The progress bar was used in a way its contract does not allow."""


class BarStateError(ProgressBarError):
    """Operation not valid in the current state."""


class ProgressOverflowError(ProgressBarError, ValueError):
    """A tick would take progress past the total."""


def _check_int(name: str, value, minimum: int):
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an integer")
    if value < minimum:
        raise ValueError(f"{name} must be at least {minimum}")


class ProgressBar:
    """Single-line progress bar, refreshed once per interval while running.

    Only draws when the output is a tty; otherwise start/stop only change the
    state and log() prints plainly. The bar is drawn inline on the cursor line,
    or pinned to the last terminal row with draw_at_bottom (which always clears
    the bar on stop).

    A background thread re-estimates speed and ETA every interval and redraws.
    tick() and log() redraw right away with the latest estimate. All terminal
    write sequences run under one lock so redraws and log lines never
    interleave mid-sequence.
    """

    def __init__(
        self,
        total: int,
        *,
        width: int | None = None,
        output: Terminal | TextIO | None = None,
        clear_after_stop: bool = False,
        draw_at_bottom: bool = False,
        avoid_blink: bool = False,
        interval: float = 1.0,
        window: int = WINDOW_SIZE,
        clock: Callable[[], int] | None = None,
    ):
        _check_int("total", total, 1)
        if width is not None:
            _check_int("width", width, MIN_BAR_WIDTH)
        if not interval > 0:
            raise ValueError("interval must be positive")
        _check_int("window", window, 1)

        self._total = total
        self._progress = 0
        self._state = BarState.READY
        self.fixed_width = width
        self.terminal = open_terminal(output)
        self.active = self.terminal.is_interactive
        self.draw_at_bottom = draw_at_bottom
        self.clear_after_stop = clear_after_stop or draw_at_bottom
        self.avoid_blink = avoid_blink
        self.interval = interval
        self.window = window
        self.clock = clock

        self._lock = threading.RLock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._tracker: EtaTracker | None = None
        self._latest: RateEstimate | None = None
        # Exit hooks that restore the cursor while it is hidden
        self._hooked = False
        self._prev_sigint = None

    @property
    def progress(self) -> int:
        return self._progress

    @property
    def total(self) -> int:
        return self._total

    @property
    def state(self) -> BarState:
        return self._state

    @property
    def latest_estimate(self) -> RateEstimate | None:
        return self._latest

    @property
    def width(self) -> int:
        """Columns used for the line, queried from the terminal unless fixed."""
        if self.fixed_width is not None:
            return self.fixed_width
        return self.terminal.columns

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.stop()

    def start(self):
        """Start drawing and refreshing the bar."""
        if self._state is not BarState.READY:
            raise BarStateError("cannot start() twice")
        if not self.active:
            self._state = BarState.RUNNING
            logger.debug("Output is not a terminal, progress bar disabled")
            return

        self._tracker = EtaTracker(self.window, clock=self.clock)
        self._thread = threading.Thread(target=self._run, daemon=True)
        with self._lock:
            self._hide_cursor()
            self.terminal.flush()
            self._state = BarState.RUNNING
        self._thread.start()
        logger.debug("Progress bar started: total=%d", self._total)

    def tick(self, value: int = 1):
        """Advance progress by value and redraw."""
        _check_int("value", value, 1)
        with self._lock:
            if self._state is not BarState.RUNNING:
                raise BarStateError("progress bar is not running")
            if self._progress + value > self._total:
                raise ProgressOverflowError(
                    f"progress {self._progress + value} exceeds total {self._total}"
                )
            if not self.active:
                return
            self._progress += value
            self._refresh()
            self.terminal.flush()

    def stop(self):
        """Stop refreshing, then clear the bar or leave it above the cursor."""
        if self._state is BarState.READY:
            raise BarStateError("progress bar is not running")
        if self._state is BarState.STOPPED:
            return
        if not self.active:
            self._state = BarState.STOPPED
            return

        self._stop.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()

        with self._lock:
            term = self.terminal
            if self.draw_at_bottom:
                term.save_cursor()
                term.cursor_to(0, term.rows - 1)
                term.clear_line()
                term.restore_cursor()
            elif self.clear_after_stop:
                term.cursor_to(0)
                term.clear_line()
            else:
                term.write("\n")
            self._show_cursor()
            term.flush()
            self._tracker = None
            self._state = BarState.STOPPED
        logger.debug("Progress bar stopped at %d/%d", self._progress, self._total)

    def log(self, fmt: str, *args):
        """Print a message (printf-style with args) without corrupting the bar."""
        message = fmt % args if args else str(fmt)
        with self._lock:
            term = self.terminal
            if not self.active or self._state is not BarState.RUNNING:
                term.write(message)
                term.write("\n")
                term.flush()
                return

            if self.avoid_blink:
                # Draw the new bar on the next line before the old one is
                # overwritten by the message, so a bar is always visible.
                term.write("\n")
                self._refresh()
                term.move_cursor(0, -1)
                term.cursor_to(0)
                term.write(message)
                term.clear_line()
                term.move_cursor(0, 1)
            else:
                term.cursor_to(0)
                term.write(message)
                term.clear_line()
                term.write("\n")
                self._refresh()
            term.flush()

    def _refresh(self):
        """Render and draw one frame; caller holds the lock and flushes."""
        width = self.width
        if self._latest is None and needs_estimate(width):
            # First frame before any periodic refresh
            self._latest = self._tracker.update(self._progress, self._total)
        self._draw(render_line(width, self._progress, self._total, self._latest), width)

    def _draw(self, line: str, width: int):
        term = self.terminal
        if self.draw_at_bottom:
            term.save_cursor()
            term.cursor_to(0, term.rows - 1)
        else:
            term.cursor_to(0)
        term.write(line)
        if len(line) < width:
            term.clear_line()
        if self.draw_at_bottom:
            term.restore_cursor()

    def _run(self):
        """Background thread: re-estimate and redraw every interval."""
        try:
            done = False
            while not done and not self._stop.wait(self.interval):
                with self._lock:
                    # stop() may have been called while waiting for the lock
                    if self._stop.is_set():
                        return
                    self._latest = self._tracker.update(self._progress, self._total)
                    self._refresh()
                    self.terminal.flush()
                    done = self._progress == self._total
            # Log outside the lock; handlers may print through log()
            if done:
                logger.debug("Progress complete, refresher exiting")
        except Exception as e:
            logger.exception("Progress refresher exception: %s", e)

    def _hide_cursor(self):
        self.terminal.hide_cursor()
        self._install_exit_hooks()

    def _show_cursor(self):
        self._remove_exit_hooks()
        self.terminal.show_cursor()

    def _install_exit_hooks(self):
        atexit.register(self._restore_cursor)
        # Signal handlers can only be changed from the main thread
        if threading.current_thread() is threading.main_thread():
            self._prev_sigint = signal.getsignal(signal.SIGINT)
            signal.signal(signal.SIGINT, self._on_sigint)
        self._hooked = True

    def _remove_exit_hooks(self):
        if not self._hooked:
            return
        atexit.unregister(self._restore_cursor)
        if (
            threading.current_thread() is threading.main_thread()
            and signal.getsignal(signal.SIGINT) == self._on_sigint
        ):
            # None means the previous handler was not installed from Python
            prev = self._prev_sigint if self._prev_sigint is not None else signal.SIG_DFL
            signal.signal(signal.SIGINT, prev)
            self._prev_sigint = None
        self._hooked = False

    def _restore_cursor(self):
        """Show the cursor again if the process exits while the bar is up."""
        if self._hooked:
            self.terminal.show_cursor()
            self.terminal.flush()

    def _on_sigint(self, signum, frame):
        self._restore_cursor()
        prev = self._prev_sigint
        if callable(prev):
            prev(signum, frame)
        elif prev != signal.SIG_IGN:
            raise SystemExit(128 + signum)


class BarLogHandler(logging.Handler):
    """Logging handler that prints records through ProgressBar.log."""

    def __init__(self, bar: ProgressBar, level: int = logging.NOTSET):
        super().__init__(level)
        self.bar = bar

    def emit(self, record: logging.LogRecord):
        try:
            self.bar.log("%s", self.format(record))
        except Exception:
            self.handleError(record)
