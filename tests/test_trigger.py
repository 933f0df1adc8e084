import signal

import pytest

from claw_autoupdate import trigger, versions
from claw_autoupdate.errors import TriggerFailure
from claw_autoupdate.trigger import TriggerOutcome, run_update_trigger


class R:
    def __init__(self, returncode):
        self.returncode = returncode


def patch_run(monkeypatch, result, seen=None):
    def fake_run(cmd, **kwargs):
        if seen is not None:
            seen.append((list(cmd), kwargs))
        if isinstance(result, BaseException):
            raise result
        return R(result)

    monkeypatch.setattr(versions.os, "name", "posix")
    monkeypatch.setattr(trigger.subprocess, "run", fake_run)


def test_success_inherits_stdio(monkeypatch):
    seen = []
    patch_run(monkeypatch, 0, seen)
    result = run_update_trigger("openclaw gateway update.run")
    assert result.outcome is TriggerOutcome.STARTED and result.started
    cmd, kwargs = seen[0]
    assert cmd == ["openclaw", "gateway", "update.run"]
    # No capture: the update's own progress goes to our terminal
    assert "stdout" not in kwargs and "capture_output" not in kwargs


def test_non_zero_exit_is_failure(monkeypatch):
    patch_run(monkeypatch, 3)
    result = run_update_trigger("openclaw gateway update.run")
    assert result.outcome is TriggerOutcome.FAILED_TO_START
    assert result.reason == "exit status 3" and result.returncode == 3
    with pytest.raises(TriggerFailure, match="exit status 3"):
        result.raise_for_failure()


def test_missing_executable_is_failure(monkeypatch):
    patch_run(monkeypatch, FileNotFoundError())
    result = run_update_trigger("openclaw gateway update.run")
    assert not result.started
    assert result.reason == "command not found: openclaw"


@pytest.mark.skipif(not hasattr(signal, "SIGTERM"), reason="no SIGTERM")
def test_killed_by_restart_signal_counts_as_started(monkeypatch):
    patch_run(monkeypatch, -int(signal.SIGTERM))
    assert run_update_trigger("openclaw gateway update.run").started


def test_killed_by_other_signal_is_failure(monkeypatch):
    patch_run(monkeypatch, -int(signal.SIGSEGV))
    assert not run_update_trigger("openclaw gateway update.run").started


def test_empty_command_is_failure():
    result = run_update_trigger("")
    assert not result.started and result.reason == "empty update command"
