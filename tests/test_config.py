from pathlib import Path

from claw_autoupdate.args import parse_args
from claw_autoupdate.config import UpdaterConfig, config_from_env, resolve_config
from claw_autoupdate.defaults import DEFAULT_THROTTLE_MS


def test_defaults_use_workspace_memory_dir(tmp_path):
    cfg = config_from_env({"OPENCLAW_WORKSPACE": str(tmp_path)})
    assert cfg.state_path == tmp_path / "memory" / "heartbeat-state.json"
    assert cfg.throttle_window_ms == DEFAULT_THROTTLE_MS == 3_600_000
    assert cfg.check_key == "update"
    assert cfg.version_cmd == "openclaw --version"
    assert cfg.registry_cmd == "npm view {package}@{channel} version"
    assert cfg.update_cmd == "openclaw gateway update.run"
    assert (cfg.package, cfg.channel) == ("openclaw", "beta")


def test_default_workspace_is_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cfg = config_from_env({})
    assert cfg.state_path == Path.cwd() / "memory" / "heartbeat-state.json"


def test_env_overrides(tmp_path):
    env = {
        "OPENCLAW_UPDATE_STATE_FILE": str(tmp_path / "s.json"),
        "OPENCLAW_UPDATE_THROTTLE_MS": "60000",
        "OPENCLAW_UPDATE_TIMEOUT": "2.5",
        "OPENCLAW_UPDATE_CHANNEL": "latest",
        "OPENCLAW_UPDATE_CMD": "true",
    }
    cfg = config_from_env(env)
    assert cfg.state_path == tmp_path / "s.json"
    assert cfg.throttle_window_ms == 60000
    assert cfg.timeout == 2.5
    assert cfg.channel == "latest"
    assert cfg.update_cmd == "true"


def test_bad_numeric_env_ignored():
    cfg = config_from_env({"OPENCLAW_UPDATE_THROTTLE_MS": "soon", "OPENCLAW_UPDATE_TIMEOUT": "-1"})
    assert cfg.throttle_window_ms == DEFAULT_THROTTLE_MS
    assert cfg.timeout == UpdaterConfig().timeout


def test_cli_beats_env(tmp_path):
    args = parse_args(
        [
            "--throttle-ms",
            "1000",
            "--state-file",
            str(tmp_path / "cli.json"),
            "--channel",
            "next",
            "--check-key",
            "openclaw-update",
        ]
    )
    env = {
        "OPENCLAW_UPDATE_THROTTLE_MS": "60000",
        "OPENCLAW_UPDATE_STATE_FILE": str(tmp_path / "env.json"),
        "OPENCLAW_UPDATE_CHANNEL": "latest",
    }
    cfg = resolve_config(args, env)
    assert cfg.throttle_window_ms == 1000
    assert cfg.state_path == tmp_path / "cli.json"
    assert cfg.channel == "next"
    assert cfg.check_key == "openclaw-update"


def test_unset_flags_keep_env(tmp_path):
    cfg = resolve_config(parse_args([]), {"OPENCLAW_UPDATE_CHANNEL": "latest"})
    assert cfg.channel == "latest"


def test_zero_throttle_allowed():
    assert resolve_config(parse_args(["--throttle-ms", "0"]), {}).throttle_window_ms == 0
