#!/usr/bin/env python3
"""Launcher for running the updater from a source checkout.

Hosts that schedule the check by path (a heartbeat hook, cron) can call this
file directly without installing the package:

    python openclaw-autoupdate.py            # interactive check
    python openclaw-autoupdate.py --silent   # throttled background check

Behavior:
 - Prefer a static import of ``claw_autoupdate`` (installed or frozen).
 - Otherwise add the local ``./src`` directory to ``sys.path`` and retry.
 - Re-export the public API so scripts can import it from this file.
"""

import importlib
import sys
from pathlib import Path


def _load_package():
    """Import ``claw_autoupdate``, falling back to the ``./src`` tree."""
    try:
        import claw_autoupdate as _pkg  # type: ignore

        return _pkg
    except ImportError:
        pass

    _src = Path(__file__).resolve().parent / "src"
    if _src.exists():
        src_str = str(_src)
        if src_str not in sys.path:
            sys.path.insert(0, src_str)
    return importlib.import_module("claw_autoupdate")


_pkg = _load_package()
_utils = importlib.import_module("claw_autoupdate.utils")

decide = _pkg.decide
Decision = _pkg.Decision
VersionPair = _pkg.VersionPair
run_interactive = _pkg.run_interactive
run_silent = _pkg.run_silent
silent_check = _pkg.silent_check
SilentOutcome = _pkg.SilentOutcome
UpdaterConfig = _pkg.UpdaterConfig
resolve_config = _pkg.resolve_config
CheckState = _pkg.CheckState
StateStore = _pkg.StateStore
run_update_trigger = _pkg.run_update_trigger
get_version = _utils.get_version
pkg_version = _utils.pkg_version
main = _pkg.main
silent_main = _pkg.silent_main

__all__ = [
    "decide",
    "Decision",
    "VersionPair",
    "run_interactive",
    "run_silent",
    "silent_check",
    "SilentOutcome",
    "UpdaterConfig",
    "resolve_config",
    "CheckState",
    "StateStore",
    "run_update_trigger",
    "get_version",
    "pkg_version",
    "main",
    "silent_main",
]


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
