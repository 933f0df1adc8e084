"""Argument parsing.

Options are attached in small groups (General, Mode, Target, Logging).
Target options default to ``None`` so :func:`~claw_autoupdate.config.resolve_config`
can tell "not given" apart from a value and let the environment fill in.
"""

from __future__ import annotations
import argparse
import sys
from typing import List, Optional

from .defaults import (
    DEFAULT_CHANNEL,
    DEFAULT_CHECK_KEY,
    DEFAULT_PACKAGE,
    DEFAULT_REGISTRY_CMD,
    DEFAULT_THROTTLE_MS,
    DEFAULT_TIMEOUT,
    DEFAULT_UPDATE_CMD,
    DEFAULT_VERSION_CMD,
)


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}")
    if value < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return value


def _positive_float(text: str) -> float:
    try:
        value = float(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {text!r}")
    if not value > 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return value


def add_general_args(p: argparse.ArgumentParser) -> None:
    general = p.add_argument_group("General")
    general.add_argument(
        "-V", "--version", action="store_true", help="Print version and exit"
    )
    general.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="Report what would happen but never run the update command",
    )


def add_mode_args(p: argparse.ArgumentParser) -> None:
    mode = p.add_argument_group("Mode")
    excl = mode.add_mutually_exclusive_group()
    excl.add_argument(
        "-s",
        "--silent",
        action="store_true",
        help="Throttled background check: no output, never fails",
    )
    excl.add_argument(
        "--status",
        action="store_true",
        help="Show when the last silent check ran and when the next is due",
    )
    excl.add_argument(
        "--reset-state",
        action="store_true",
        help="Forget the last silent check so the next one runs immediately",
    )
    mode.add_argument(
        "--force",
        action="store_true",
        help="With --silent: ignore the throttle window for this run",
    )


def add_target_args(p: argparse.ArgumentParser) -> None:
    target = p.add_argument_group("Target")
    target.add_argument(
        "--package", help=f"Registry package name (default: {DEFAULT_PACKAGE})"
    )
    target.add_argument(
        "--channel", help=f"Registry dist-tag/channel (default: {DEFAULT_CHANNEL})"
    )
    target.add_argument(
        "--version-cmd",
        help=f"Command printing the installed version (default: {DEFAULT_VERSION_CMD!r})",
    )
    target.add_argument(
        "--registry-cmd",
        help=(
            "Command printing the published version; {package} and {channel} "
            f"are substituted (default: {DEFAULT_REGISTRY_CMD!r})"
        ),
    )
    target.add_argument(
        "--update-cmd",
        help=f"Command that updates and restarts (default: {DEFAULT_UPDATE_CMD!r})",
    )
    target.add_argument(
        "--state-file",
        help="Path of the JSON state file (default: <workspace>/memory/heartbeat-state.json)",
    )
    target.add_argument(
        "--check-key",
        help=f"Key under lastChecks used for throttling (default: {DEFAULT_CHECK_KEY})",
    )
    target.add_argument(
        "--throttle-ms",
        type=_non_negative_int,
        help=f"Minimum milliseconds between silent checks (default: {DEFAULT_THROTTLE_MS})",
    )
    target.add_argument(
        "--timeout",
        type=_positive_float,
        help=f"Seconds allowed per version query (default: {DEFAULT_TIMEOUT:g})",
    )


def add_logging_args(p: argparse.ArgumentParser) -> None:
    logs = p.add_argument_group("Logging")
    logs.add_argument(
        "-v", "--verbose", action="store_true", help="Enable INFO/DEBUG logging"
    )
    logs.add_argument(
        "-ll",
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        help="Explicit log level (overrides --verbose)",
    )
    logs.add_argument("-f", "--log-file", help="Write logs to a file")
    logs.add_argument(
        "-J", "--log-json", action="store_true", help="Also log JSON to stdout"
    )


def build_parser(prog: Optional[str] = None) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=prog,
        description="Check the installed OpenClaw version against the registry and update on mismatch",
    )
    add_general_args(p)
    add_mode_args(p)
    add_target_args(p)
    add_logging_args(p)
    return p


def parse_args(
    argv: Optional[List[str]] = None, *, prog: Optional[str] = None
) -> argparse.Namespace:
    """Parse command-line arguments (defaults to ``sys.argv[1:]``)."""
    if argv is None:
        argv = sys.argv[1:]
    return build_parser(prog).parse_args(argv)


__all__ = ["build_parser", "parse_args"]
