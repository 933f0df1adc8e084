from __future__ import annotations

import contextlib
import io
from typing import List, Optional

from .args import parse_args
from .checker import now_millis, run_interactive, run_silent
from .config import UpdaterConfig, resolve_config
from .errors import StateLoadFailure, StatePersistFailure
from .logging_utils import configure_logging
from .state import StateStore
from .ui import err, info, ok
from .utils import format_duration, format_millis, get_version


def show_status(config: UpdaterConfig, *, clock=now_millis) -> int:
    """Print the last silent check time and when the next one is due."""
    store = StateStore(config.state_path)
    key = config.check_key
    try:
        state = store.read()
    except StateLoadFailure as e:
        err(f"Could not read state: {e}")
        return 1
    info(f"State file: {store.path}")
    last = state.last_check(key)
    if not last:
        ok(f"No '{key}' check recorded; the next silent check runs immediately.")
        return 0
    info(f"Last '{key}' check: {format_millis(last)}")
    remaining = last + config.throttle_window_ms - clock()
    if remaining > 0:
        info(f"Next silent check due in {format_duration(remaining)}.")
    else:
        ok("The next silent check runs immediately.")
    return 0


def reset_state(config: UpdaterConfig) -> int:
    """Drop the check key from the state file, surfacing any failure."""
    store = StateStore(config.state_path)
    try:
        removed = store.forget(config.check_key)
    except (StateLoadFailure, StatePersistFailure) as e:
        err(f"Could not reset state: {e}")
        return 1
    if removed:
        ok(f"Cleared '{config.check_key}' in {store.path}")
    else:
        info(f"No '{config.check_key}' check recorded in {store.path}")
    return 0


def _parse_quietly(argv: Optional[List[str]]):
    """Parse ``argv`` with usage errors discarded; None when parsing exits."""
    try:
        with contextlib.redirect_stderr(io.StringIO()):
            return parse_args(argv)
    except SystemExit:
        return None


def main(argv: Optional[List[str]] = None, *, silent: bool = False) -> int:
    """Entry point for the CLI tool; returns the process exit code.

    With ``silent`` set (the silent console entry), bad flags from the
    scheduler are ignored and the run exits ``0`` without output.
    """
    if silent:
        args = _parse_quietly(argv)
        if args is None:
            return 0
    else:
        args = parse_args(argv)
    silent = silent or args.silent
    try:
        configure_logging(args.verbose, args.log_file, args.log_json, args.log_level)
    except OSError:
        # An unwritable --log-file must not surface from a background run
        if not silent:
            raise
    if args.version:
        print(get_version())
        return 0
    config = resolve_config(args)
    if args.status:
        return show_status(config)
    if args.reset_state:
        return reset_state(config)
    if silent:
        run_silent(config, force=args.force, dry_run=args.dry_run)
        return 0
    return run_interactive(config, dry_run=args.dry_run)


__all__ = ["main", "show_status", "reset_state"]
