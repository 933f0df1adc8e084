import importlib.util
import json
import re
import subprocess
import sys
from pathlib import Path

import pytest

from claw_autoupdate import cli, main_flow

ROOT = Path(__file__).resolve().parents[1]


def load_launcher():
    spec = importlib.util.spec_from_file_location(
        "openclaw_autoupdate", ROOT / "openclaw-autoupdate.py"
    )
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    assert spec.loader is not None
    spec.loader.exec_module(module)
    return module


class Completed:
    def __init__(self, returncode=0, stdout=""):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = ""


@pytest.fixture
def fake_commands(monkeypatch):
    """Answer the three external commands from a mutable table."""
    table = {
        ("openclaw", "--version"): Completed(stdout="1.2.0\n"),
        ("npm", "view", "openclaw@beta", "version"): Completed(stdout="1.2.0\n"),
        ("openclaw", "gateway", "update.run"): Completed(),
    }
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(tuple(cmd))
        result = table[tuple(cmd)]
        if isinstance(result, BaseException):
            raise result
        return result

    monkeypatch.setattr(subprocess, "run", fake_run)
    monkeypatch.setattr("os.name", "posix")
    return table, calls


def test_scenario_up_to_date(fake_commands, capsys):
    _, calls = fake_commands
    rc = cli.main([])
    out = capsys.readouterr().out
    assert rc == 0
    assert "Checking for openclaw updates..." in out
    assert "Current: 1.2.0" in out and "Remote:  1.2.0" in out
    assert "System is up to date." in out
    assert ("openclaw", "gateway", "update.run") not in calls


def test_scenario_update_triggers_once(fake_commands):
    table, calls = fake_commands
    table[("npm", "view", "openclaw@beta", "version")] = Completed(stdout="1.3.0\n")
    assert cli.main([]) == 0
    assert calls.count(("openclaw", "gateway", "update.run")) == 1


def test_scenario_remote_failure(fake_commands):
    table, calls = fake_commands
    table[("npm", "view", "openclaw@beta", "version")] = Completed(returncode=1)
    assert cli.main([]) == 1
    assert ("openclaw", "--version") in calls
    assert ("openclaw", "gateway", "update.run") not in calls


def test_scenario_trigger_failure(fake_commands, capsys):
    table, _ = fake_commands
    table[("npm", "view", "openclaw@beta", "version")] = Completed(stdout="1.3.0")
    table[("openclaw", "gateway", "update.run")] = Completed(returncode=1)
    assert cli.main([]) == 1
    assert "Update failed: exit status 1" in capsys.readouterr().out


def test_silent_entry_throttles_second_run(fake_commands, tmp_path, capsys):
    _, calls = fake_commands
    state = tmp_path / "memory" / "heartbeat-state.json"
    assert cli.silent_main(["--state-file", str(state)]) == 0
    first = len(calls)
    assert first == 2
    assert cli.silent_main(["--state-file", str(state)]) == 0
    assert len(calls) == first
    assert capsys.readouterr().out == ""
    assert "update" in json.loads(state.read_text(encoding="utf-8"))["lastChecks"]


def test_silent_flag_swallows_missing_tools(fake_commands, tmp_path, capsys):
    table, _ = fake_commands
    table[("openclaw", "--version")] = FileNotFoundError()
    table[("npm", "view", "openclaw@beta", "version")] = FileNotFoundError()
    assert cli.main(["--silent", "--state-file", str(tmp_path / "s.json")]) == 0
    captured = capsys.readouterr()
    assert captured.out == "" and captured.err == ""


@pytest.mark.parametrize(
    "argv",
    [["--throttle-ms", "-5"], ["--no-such-flag"], ["--timeout", "soon"]],
)
def test_silent_entry_ignores_bad_arguments(fake_commands, capsys, argv):
    _, calls = fake_commands
    assert cli.silent_main(argv) == 0
    assert calls == []
    captured = capsys.readouterr()
    assert captured.out == "" and captured.err == ""


def test_interactive_entry_still_rejects_bad_arguments(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--throttle-ms", "-5"])
    assert exc.value.code == 2
    assert "--throttle-ms" in capsys.readouterr().err


def test_status_and_reset(tmp_path, capsys):
    state = tmp_path / "s.json"
    state.write_text(json.dumps({"lastChecks": {"update": 1, "email": 2}}), encoding="utf-8")
    assert cli.main(["--status", "--state-file", str(state)]) == 0
    out = capsys.readouterr().out
    assert "Last 'update' check" in out
    assert "runs immediately" in out

    assert cli.main(["--reset-state", "--state-file", str(state)]) == 0
    assert json.loads(state.read_text(encoding="utf-8")) == {"lastChecks": {"email": 2}}
    assert cli.main(["--reset-state", "--state-file", str(state)]) == 0
    assert "No 'update' check recorded" in capsys.readouterr().out


def test_status_reports_next_due(tmp_path, capsys):
    state = tmp_path / "s.json"
    state.write_text(json.dumps({"lastChecks": {"update": 1_000_000}}), encoding="utf-8")
    cfg = main_flow.resolve_config(main_flow.parse_args(["--state-file", str(state)]), {})
    assert main_flow.show_status(cfg, clock=lambda: 1_000_000 + 60_000) == 0
    assert "due in 59m" in capsys.readouterr().out


def test_status_surfaces_corrupt_state(tmp_path, capsys):
    state = tmp_path / "s.json"
    state.write_text("nope", encoding="utf-8")
    assert cli.main(["--status", "--state-file", str(state)]) == 1
    assert "Could not read state" in capsys.readouterr().out


def test_keyboard_interrupt_is_reported(monkeypatch, capsys):
    def boom(argv=None, **kwargs):
        raise KeyboardInterrupt

    monkeypatch.setattr(cli, "_main", boom)
    assert cli.main([]) == 130
    assert "Aborted by user." in capsys.readouterr().out


def read_pyproject_version() -> str:
    txt = (ROOT / "pyproject.toml").read_text(encoding="utf-8")
    m = re.search(r"(?ms)^\[project\].*?^version\s*=\s*\"([^\"]+)\"", txt)
    assert m, "version not found in pyproject.toml"
    return m.group(1)


def test_version_from_pyproject(monkeypatch, capsys):
    launcher = load_launcher()

    def missing(_name):
        raise Exception("not installed")

    monkeypatch.setattr(launcher, "pkg_version", missing)
    assert launcher.main(["--version"]) == 0
    assert capsys.readouterr().out.strip() == read_pyproject_version()


def test_version_from_distribution(monkeypatch, capsys):
    launcher = load_launcher()
    monkeypatch.setattr(launcher, "pkg_version", lambda name: "9.9.9")
    assert launcher.main(["-V"]) == 0
    assert capsys.readouterr().out.strip() == "9.9.9"


def test_launcher_reexports_package():
    launcher = load_launcher()
    import claw_autoupdate

    assert launcher.decide is claw_autoupdate.decide
    assert launcher.silent_main is claw_autoupdate.silent_main
