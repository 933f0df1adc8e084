"""Update trigger: run the external update-and-restart command.

The command inherits stdin/stdout/stderr so its progress is visible to
whoever is watching. It may restart the host, which can kill this process
before ``subprocess.run`` returns; that is the expected way for a
successful update to end. A return is therefore classified, not assumed to
be a failure:

 - exit status ``0`` → ``STARTED``
 - child killed by SIGTERM/SIGKILL/SIGHUP (restart tore down the group)
   → ``STARTED``
 - executable missing or any other non-zero status → ``FAILED_TO_START``
"""

from __future__ import annotations

import logging
import signal
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import TriggerFailure
from .logging_utils import log_event
from .versions import Command, platform_argv, split_command

_RESTART_SIGNALS = {
    int(getattr(signal, name))
    for name in ("SIGTERM", "SIGKILL", "SIGHUP")
    if hasattr(signal, name)
}


class TriggerOutcome(str, Enum):
    STARTED = "started"
    FAILED_TO_START = "failed_to_start"


@dataclass(frozen=True)
class TriggerResult:
    outcome: TriggerOutcome
    reason: Optional[str] = None
    returncode: Optional[int] = None

    @property
    def started(self) -> bool:
        return self.outcome is TriggerOutcome.STARTED

    def raise_for_failure(self) -> None:
        if not self.started:
            raise TriggerFailure(self.reason or "update command failed")


def run_update_trigger(cmd: Command) -> TriggerResult:
    """Invoke the update command once and classify how it ended."""
    argv = split_command(cmd)
    if not argv:
        return _failed("empty update command")
    log_event("update_trigger_start", level=logging.INFO)
    try:
        rc = subprocess.run(platform_argv(argv)).returncode
    except FileNotFoundError:
        return _failed(f"command not found: {argv[0]}")
    except OSError as e:
        return _failed(str(e))
    if rc == 0:
        log_event("update_trigger_done", level=logging.INFO, returncode=rc)
        return TriggerResult(TriggerOutcome.STARTED, returncode=rc)
    if rc < 0 and -rc in _RESTART_SIGNALS:
        log_event("update_trigger_restarted", level=logging.INFO, returncode=rc)
        return TriggerResult(TriggerOutcome.STARTED, returncode=rc)
    return _failed(f"exit status {rc}", rc)


def _failed(reason: str, returncode: Optional[int] = None) -> TriggerResult:
    log_event(
        "update_trigger_failed",
        level=logging.DEBUG,
        error=reason,
        returncode=returncode,
    )
    return TriggerResult(TriggerOutcome.FAILED_TO_START, reason, returncode)


__all__ = ["TriggerOutcome", "TriggerResult", "run_update_trigger"]
