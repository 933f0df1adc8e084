"""Built-in defaults (commands, package channel, throttle window, paths)."""

from __future__ import annotations

DEFAULT_PACKAGE = "openclaw"
DEFAULT_CHANNEL = "beta"
DEFAULT_VERSION_CMD = "openclaw --version"
# ``{package}`` and ``{channel}`` are substituted before running
DEFAULT_REGISTRY_CMD = "npm view {package}@{channel} version"
DEFAULT_UPDATE_CMD = "openclaw gateway update.run"

DEFAULT_CHECK_KEY = "update"
DEFAULT_THROTTLE_MS = 60 * 60 * 1000  # 1 hour
DEFAULT_TIMEOUT = 60.0
DEFAULT_STATE_RELPATH = "memory/heartbeat-state.json"

LOCK_STALE_AFTER_S = 10 * 60

ENV_WORKSPACE = "OPENCLAW_WORKSPACE"
ENV_PACKAGE = "OPENCLAW_UPDATE_PACKAGE"
ENV_CHANNEL = "OPENCLAW_UPDATE_CHANNEL"
ENV_VERSION_CMD = "OPENCLAW_VERSION_CMD"
ENV_REGISTRY_CMD = "OPENCLAW_REGISTRY_CMD"
ENV_UPDATE_CMD = "OPENCLAW_UPDATE_CMD"
ENV_THROTTLE_MS = "OPENCLAW_UPDATE_THROTTLE_MS"
ENV_STATE_FILE = "OPENCLAW_UPDATE_STATE_FILE"
ENV_TIMEOUT = "OPENCLAW_UPDATE_TIMEOUT"

__all__ = [
    "DEFAULT_PACKAGE",
    "DEFAULT_CHANNEL",
    "DEFAULT_VERSION_CMD",
    "DEFAULT_REGISTRY_CMD",
    "DEFAULT_UPDATE_CMD",
    "DEFAULT_CHECK_KEY",
    "DEFAULT_THROTTLE_MS",
    "DEFAULT_TIMEOUT",
    "DEFAULT_STATE_RELPATH",
    "LOCK_STALE_AFTER_S",
    "ENV_WORKSPACE",
    "ENV_PACKAGE",
    "ENV_CHANNEL",
    "ENV_VERSION_CMD",
    "ENV_REGISTRY_CMD",
    "ENV_UPDATE_CMD",
    "ENV_THROTTLE_MS",
    "ENV_STATE_FILE",
    "ENV_TIMEOUT",
]
