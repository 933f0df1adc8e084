"""Runtime configuration for the update checkers.

:class:`UpdaterConfig` is resolved from three layers, later layers winning:
built-in defaults, environment variables, then CLI flags. Bad numeric values
in the environment are ignored (logged at INFO) so a typo in a scheduler's
environment never breaks the check outright.
"""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping, Optional

from .defaults import (
    DEFAULT_CHANNEL,
    DEFAULT_CHECK_KEY,
    DEFAULT_PACKAGE,
    DEFAULT_REGISTRY_CMD,
    DEFAULT_THROTTLE_MS,
    DEFAULT_TIMEOUT,
    DEFAULT_UPDATE_CMD,
    DEFAULT_VERSION_CMD,
    ENV_CHANNEL,
    ENV_PACKAGE,
    ENV_REGISTRY_CMD,
    ENV_THROTTLE_MS,
    ENV_TIMEOUT,
    ENV_UPDATE_CMD,
    ENV_VERSION_CMD,
)
from .io_safe import default_state_path
from .logging_utils import log_event


@dataclass(frozen=True)
class UpdaterConfig:
    package: str = DEFAULT_PACKAGE
    channel: str = DEFAULT_CHANNEL
    version_cmd: str = DEFAULT_VERSION_CMD
    registry_cmd: str = DEFAULT_REGISTRY_CMD
    update_cmd: str = DEFAULT_UPDATE_CMD
    throttle_window_ms: int = DEFAULT_THROTTLE_MS
    state_path: Path = field(default_factory=default_state_path)
    check_key: str = DEFAULT_CHECK_KEY
    timeout: float = DEFAULT_TIMEOUT


def _env_number(env: Mapping[str, str], name: str, cast):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = cast(raw.strip())
    except ValueError:
        value = None
    if value is None or value < 0:
        log_event("config_env_ignored", level=logging.INFO, key=name, error=raw)
        return None
    return value


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> UpdaterConfig:
    """Build a config from defaults overlaid with environment variables."""
    env = os.environ if environ is None else environ
    cfg = UpdaterConfig(state_path=default_state_path(env))
    overrides = {}
    for attr, name in (
        ("package", ENV_PACKAGE),
        ("channel", ENV_CHANNEL),
        ("version_cmd", ENV_VERSION_CMD),
        ("registry_cmd", ENV_REGISTRY_CMD),
        ("update_cmd", ENV_UPDATE_CMD),
    ):
        value = env.get(name)
        if value and value.strip():
            overrides[attr] = value.strip()
    throttle = _env_number(env, ENV_THROTTLE_MS, int)
    if throttle is not None:
        overrides["throttle_window_ms"] = throttle
    timeout = _env_number(env, ENV_TIMEOUT, float)
    if timeout is not None:
        overrides["timeout"] = timeout
    return replace(cfg, **overrides)


def resolve_config(
    args: Optional[argparse.Namespace] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> UpdaterConfig:
    """Apply CLI flags (those left at ``None`` are skipped) over the env config."""
    cfg = config_from_env(environ)
    if args is None:
        return cfg
    overrides = {}
    for attr in (
        "package",
        "channel",
        "version_cmd",
        "registry_cmd",
        "update_cmd",
        "check_key",
        "timeout",
    ):
        value = getattr(args, attr, None)
        if value is not None:
            overrides[attr] = value
    if getattr(args, "throttle_ms", None) is not None:
        overrides["throttle_window_ms"] = args.throttle_ms
    if getattr(args, "state_file", None):
        overrides["state_path"] = Path(args.state_file).expanduser()
    return replace(cfg, **overrides)


__all__ = ["UpdaterConfig", "config_from_env", "resolve_config"]
