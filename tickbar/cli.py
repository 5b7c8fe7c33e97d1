"""Command-line demo that runs a simulated job under a progress bar."""

import argparse
import logging
import sys
import time

import tracerite

from tickbar.layout import MIN_BAR_WIDTH
from tickbar.progress import BarLogHandler, ProgressBar

tracerite.load()

__all__ = ["main"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tickbar", description="Run a simulated job under a terminal progress bar"
    )
    parser.add_argument("-n", "--total", help="Total units of work", type=int, default=100)
    parser.add_argument(
        "-w",
        "--width",
        help=f"Bar width (at least {MIN_BAR_WIDTH}, default: terminal width)",
        type=int,
        default=None,
    )
    parser.add_argument(
        "-r", "--rate", help="Units processed per second", type=float, default=10.0
    )
    parser.add_argument(
        "--log-every",
        help="Print a log line every N units (0 disables)",
        type=int,
        default=0,
    )
    parser.add_argument(
        "--interval",
        help="Seconds between ETA refreshes (default: 1)",
        type=float,
        default=1.0,
    )
    parser.add_argument(
        "--bottom",
        action="store_true",
        help="Pin the bar to the last terminal row",
    )
    parser.add_argument(
        "--avoid-blink",
        action="store_true",
        help="Redraw the bar before printing log lines to reduce flicker",
    )
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Remove the bar when done",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose mode: route debug logging through the bar",
    )
    return parser


def run(args) -> ProgressBar:
    """Run the simulated job described by parsed args."""
    if args.rate <= 0:
        raise ValueError("--rate must be positive")
    if args.log_every < 0:
        raise ValueError("--log-every must not be negative")

    bar = ProgressBar(
        args.total,
        width=args.width,
        clear_after_stop=args.clear,
        draw_at_bottom=args.bottom,
        avoid_blink=args.avoid_blink,
        interval=args.interval,
    )

    root = logging.getLogger()
    old_level = root.level
    handler = None
    if args.verbose:
        handler = BarLogHandler(bar)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        root.addHandler(handler)
        root.setLevel(logging.DEBUG)

    delay = 1 / args.rate
    try:
        with bar:
            for done in range(1, args.total + 1):
                time.sleep(delay)
                bar.tick()
                if args.log_every and done % args.log_every == 0:
                    bar.log("processed %d of %d", done, args.total)
    finally:
        if handler is not None:
            root.removeHandler(handler)
            root.setLevel(old_level)
    return bar


def main():
    """Main entry point for the CLI with exception handling."""
    args = build_parser().parse_args()
    try:
        run(args)
    except (KeyboardInterrupt, BrokenPipeError):
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
