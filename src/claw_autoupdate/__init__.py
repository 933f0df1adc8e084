"""Throttled self-update checks for the OpenClaw CLI.

Public surface: the decision engine (:func:`decide`), the two checkers
(:func:`run_interactive`, :func:`run_silent`/:func:`silent_check`), the
state store, and the console entry points.
"""

from .checker import SilentOutcome, run_interactive, run_silent, silent_check
from .cli import main, silent_main
from .config import UpdaterConfig, resolve_config
from .decision import Decision, VersionPair, decide
from .state import CheckLock, CheckState, StateStore
from .trigger import TriggerOutcome, TriggerResult, run_update_trigger
from .versions import VersionProbe, fetch_versions

__all__ = [
    "Decision",
    "VersionPair",
    "decide",
    "SilentOutcome",
    "run_interactive",
    "run_silent",
    "silent_check",
    "UpdaterConfig",
    "resolve_config",
    "CheckState",
    "StateStore",
    "CheckLock",
    "TriggerOutcome",
    "TriggerResult",
    "run_update_trigger",
    "VersionProbe",
    "fetch_versions",
    "main",
    "silent_main",
]
