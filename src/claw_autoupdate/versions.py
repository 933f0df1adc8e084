"""Version queries against the installed CLI and the package registry.

Both queries are external commands whose trimmed stdout is the version
token. Any failure (missing executable, non-zero exit, timeout, empty or
multi-line output) yields a :class:`VersionProbe` with ``version=None`` and a
short ``error``; nothing here raises for those conditions.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from .decision import VersionPair
from .defaults import DEFAULT_TIMEOUT
from .logging_utils import log_event

Command = Union[str, Sequence[str]]


@dataclass
class VersionProbe:
    """Outcome of a single version query."""

    name: str
    version: Optional[str]
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.version is not None


def split_command(cmd: Command) -> List[str]:
    """Turn a configured command into an argv list."""
    if isinstance(cmd, str):
        return shlex.split(cmd, posix=os.name != "nt")
    return [str(part) for part in cmd]


def platform_argv(argv: List[str]) -> List[str]:
    """Route through ``cmd /c`` on Windows so ``npm.cmd``-style shims resolve."""
    if os.name == "nt":
        return ["cmd", "/c", subprocess.list2cmdline(argv)]
    return argv


def query_version(name: str, cmd: Command, timeout: float = DEFAULT_TIMEOUT) -> VersionProbe:
    """Run ``cmd`` and return its trimmed stdout as the version token."""
    argv = split_command(cmd)
    if not argv:
        return _failed(name, "empty command")
    try:
        proc = subprocess.run(
            platform_argv(argv),
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except FileNotFoundError:
        return _failed(name, f"command not found: {argv[0]}")
    except subprocess.TimeoutExpired:
        return _failed(name, f"timed out after {timeout:g}s")
    except OSError as e:
        return _failed(name, str(e))
    if proc.returncode != 0:
        detail = (proc.stderr or "").strip().splitlines()
        reason = f"exit status {proc.returncode}"
        if detail:
            reason += f": {detail[-1]}"
        return _failed(name, reason)
    version = (proc.stdout or "").strip()
    if not version:
        return _failed(name, "empty output")
    if "\n" in version:
        return _failed(name, "unexpected multi-line output")
    log_event("version_query_ok", level=logging.DEBUG, key=name, version=version)
    return VersionProbe(name, version)


def _failed(name: str, reason: str) -> VersionProbe:
    log_event("version_query_failed", level=logging.DEBUG, key=name, error=reason)
    return VersionProbe(name, None, reason)


def current_version(cmd: Command, timeout: float = DEFAULT_TIMEOUT) -> VersionProbe:
    """Query the locally installed version."""
    return query_version("current", cmd, timeout)


def remote_version(
    cmd_template: str,
    package: str,
    channel: str,
    timeout: float = DEFAULT_TIMEOUT,
) -> VersionProbe:
    """Query the latest published version of ``package`` on ``channel``."""
    try:
        cmd = cmd_template.format(package=package, channel=channel)
    except (KeyError, IndexError, ValueError) as e:
        return _failed("remote", f"bad registry command template: {e}")
    return query_version("remote", cmd, timeout)


def fetch_versions(config) -> VersionPair:
    """Query both versions for ``config``; both are always attempted."""
    current = current_version(config.version_cmd, config.timeout)
    remote = remote_version(
        config.registry_cmd, config.package, config.channel, config.timeout
    )
    return VersionPair(
        current=current.version,
        remote=remote.version,
        current_error=current.error,
        remote_error=remote.error,
    )


__all__ = [
    "VersionProbe",
    "split_command",
    "platform_argv",
    "query_version",
    "current_version",
    "remote_version",
    "fetch_versions",
]
