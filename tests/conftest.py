import logging

import pytest

from claw_autoupdate.config import UpdaterConfig


@pytest.fixture
def config(tmp_path):
    return UpdaterConfig(
        state_path=tmp_path / "memory" / "heartbeat-state.json",
        throttle_window_ms=3_600_000,
    )


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "OPENCLAW_WORKSPACE",
        "OPENCLAW_UPDATE_PACKAGE",
        "OPENCLAW_UPDATE_CHANNEL",
        "OPENCLAW_VERSION_CMD",
        "OPENCLAW_REGISTRY_CMD",
        "OPENCLAW_UPDATE_CMD",
        "OPENCLAW_UPDATE_THROTTLE_MS",
        "OPENCLAW_UPDATE_STATE_FILE",
        "OPENCLAW_UPDATE_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
