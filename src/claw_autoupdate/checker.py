"""Interactive and silent update checkers.

Both checkers fetch the two version tokens, hand them to
:func:`~claw_autoupdate.decision.decide`, and run the update command at most
once per run when an update is available. They differ in failure policy:

 - :func:`run_interactive` reports everything and returns an exit code
   (``0`` up to date or update started, ``1`` versions unknown or the update
   command failed).
 - :func:`silent_check` is throttled by the persisted :class:`CheckState`
   and raises on persistence and trigger failures; :func:`run_silent` is the
   one place those are discarded, so a periodic host never sees an error.

Silent run, in order::

    lock → load state → THROTTLED?
         → fetch versions → record now → persist → unlock
         → UP_TO_DATE | INDETERMINATE | announce + trigger
"""

from __future__ import annotations

import logging
import sys
import time
from enum import Enum
from typing import Callable, Optional

from .config import UpdaterConfig
from .decision import Decision, VersionPair
from .errors import RetrievalFailure
from .logging_utils import log_event
from .state import StateStore
from .trigger import TriggerResult, run_update_trigger
from .ui import announce, err, info, ok, warn
from .versions import fetch_versions

Fetcher = Callable[[UpdaterConfig], VersionPair]
Trigger = Callable[[str], TriggerResult]


class SilentOutcome(str, Enum):
    THROTTLED = "throttled"
    LOCKED = "locked"
    UP_TO_DATE = "up_to_date"
    INDETERMINATE = "indeterminate"
    TRIGGERED = "triggered"
    DRY_RUN = "dry_run"


def now_millis() -> int:
    return int(time.time() * 1000)


def run_interactive(
    config: UpdaterConfig,
    *,
    fetch: Fetcher = fetch_versions,
    trigger: Trigger = run_update_trigger,
    dry_run: bool = False,
) -> int:
    """Check once, report to the console, and update on mismatch.

    Returns the process exit code.
    """
    info(f"Checking for {config.package} updates...")
    pair = fetch(config)
    try:
        current, remote = pair.require()
    except RetrievalFailure as e:
        err("Could not determine versions.")
        for reason in pair.failures():
            err(f"  {reason}")
        log_event("interactive_check_failed", level=logging.INFO, error=str(e))
        return 1

    info(f"Current: {current}")
    info(f"Remote:  {remote}")
    decision = pair.decision
    log_event(
        "interactive_check_decision",
        level=logging.INFO,
        decision=decision.value,
        current=current,
        remote=remote,
    )
    if decision is Decision.UP_TO_DATE:
        ok("System is up to date.")
        return 0

    warn("Update available! Initiating update sequence...")
    if dry_run:
        info(f"Dry run: would run '{config.update_cmd}'")
        return 0
    # Child output shares our stdout; keep ordering intact
    sys.stdout.flush()
    result = trigger(config.update_cmd)
    if not result.started:
        err(f"Update failed: {result.reason}")
        return 1
    return 0


def silent_check(
    config: UpdaterConfig,
    *,
    store: Optional[StateStore] = None,
    fetch: Fetcher = fetch_versions,
    trigger: Trigger = run_update_trigger,
    clock: Callable[[], int] = now_millis,
    force: bool = False,
    dry_run: bool = False,
) -> SilentOutcome:
    """Run one throttled check and return what happened.

    Raises ``StatePersistFailure`` when the new timestamp cannot be written
    (nothing is triggered then) and ``TriggerFailure`` when the update
    command fails to start. An unreadable state file is not an error: it
    counts as "never checked".
    """
    store = store or StateStore(config.state_path)
    key = config.check_key
    lock = store.lock()
    if not lock.acquire():
        log_event("silent_check_locked", level=logging.DEBUG, path=str(lock.path))
        return SilentOutcome.LOCKED
    try:
        state, load_error = store.load()
        if load_error:
            log_event(
                "state_load_failed",
                level=logging.DEBUG,
                path=str(store.path),
                error=load_error,
            )
        now = clock()
        elapsed = now - state.last_check(key)
        if not force and elapsed < config.throttle_window_ms:
            log_event(
                "silent_check_throttled",
                level=logging.DEBUG,
                key=key,
                duration_ms=elapsed,
            )
            return SilentOutcome.THROTTLED

        pair = fetch(config)
        # Persist before acting on the result so a hung or restarting
        # update cannot cause an immediate re-check
        state.record(key, now)
        store.write(state)
    finally:
        lock.release()

    decision = pair.decision
    log_event(
        "silent_check_decision",
        level=logging.DEBUG,
        key=key,
        decision=decision.value,
        current=pair.current,
        remote=pair.remote,
    )
    if decision is Decision.UP_TO_DATE:
        return SilentOutcome.UP_TO_DATE
    if decision is Decision.INDETERMINATE:
        log_event(
            "silent_check_indeterminate",
            level=logging.DEBUG,
            error="; ".join(pair.failures()),
        )
        return SilentOutcome.INDETERMINATE

    announce(
        "UPDATE DETECTED",
        [
            f"Current: {pair.current} | New: {pair.remote}",
            "Initiating auto-update sequence...",
        ],
    )
    if dry_run:
        return SilentOutcome.DRY_RUN
    trigger(config.update_cmd).raise_for_failure()
    return SilentOutcome.TRIGGERED


def run_silent(config: UpdaterConfig, **kwargs) -> None:
    """Best-effort :func:`silent_check`; never raises and prints no errors."""
    try:
        outcome = silent_check(config, **kwargs)
    except Exception as e:
        log_event(
            "silent_check_failed",
            level=logging.DEBUG,
            error=str(e),
            error_type=type(e).__name__,
        )
        return
    log_event("silent_check_done", level=logging.DEBUG, outcome=outcome.value)


__all__ = [
    "SilentOutcome",
    "now_millis",
    "run_interactive",
    "silent_check",
    "run_silent",
]
