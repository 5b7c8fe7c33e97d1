import sys

import pytest

from tickbar import cli
from tickbar.progress import BarState


def test_run_without_tty_prints_logs(capsys):
    args = cli.build_parser().parse_args(["-n", "5", "-r", "1000", "--log-every", "2"])
    bar = cli.run(args)
    assert bar.state is BarState.STOPPED
    err = capsys.readouterr().err
    assert "processed 2 of 5" in err
    assert "processed 4 of 5" in err
    # Not a tty, so no escape sequences are written
    assert "\x1b[" not in err


def test_parser_defaults():
    args = cli.build_parser().parse_args([])
    assert args.total == 100
    assert args.width is None
    assert not (args.bottom or args.avoid_blink or args.clear)


@pytest.mark.parametrize(
    "argv,message",
    [
        (["-w", "10"], "width must be at least 16"),
        (["-n", "0"], "total must be at least 1"),
        (["-r", "0"], "--rate must be positive"),
    ],
)
def test_main_reports_errors(monkeypatch, capsys, argv, message):
    monkeypatch.setattr(sys, "argv", ["tickbar", *argv])
    with pytest.raises(SystemExit) as exc:
        cli.main()
    assert exc.value.code == 1
    assert f"Error: {message}" in capsys.readouterr().err


def test_verbose_routes_debug_logging_through_bar(capsys):
    args = cli.build_parser().parse_args(["-n", "2", "-r", "1000", "-v"])
    cli.run(args)
    err = capsys.readouterr().err
    assert "DEBUG tickbar.progress: Output is not a terminal" in err
