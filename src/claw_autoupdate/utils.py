"""Small helpers shared by the CLI entry points."""

from __future__ import annotations
import re
import sys
from datetime import datetime, timezone
from importlib.metadata import version as pkg_version
from pathlib import Path

DIST_NAME = "openclaw-autoupdater"


def get_version() -> str:
    """Return this tool's own version string.

    Lookup order (first match wins):
    1) ``importlib.metadata.version('openclaw-autoupdater')``
    2) ``project.version`` in ``pyproject.toml`` (source checkout)
    3) ``"0.0.0+unknown"``
    """
    pv = getattr(sys.modules.get("openclaw_autoupdate"), "pkg_version", pkg_version)
    try:
        return pv(DIST_NAME)
    except Exception:
        pass

    pyproj = Path(__file__).resolve().parents[2] / "pyproject.toml"
    try:
        text = pyproj.read_text(encoding="utf-8")
    except OSError:
        return "0.0.0+unknown"
    m = re.search(r"(?ms)^\[project\].*?^version\s*=\s*\"([^\"]+)\"", text)
    return m.group(1) if m else "0.0.0+unknown"


def format_millis(ms: int) -> str:
    """Render epoch milliseconds as a local ISO timestamp (seconds precision)."""
    dt = datetime.fromtimestamp(ms / 1000, tz=timezone.utc).astimezone()
    return dt.isoformat(timespec="seconds")


def format_duration(ms: int) -> str:
    """Render a millisecond duration as ``1h 2m 3s``."""
    seconds = max(0, int(ms // 1000))
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs or not parts:
        parts.append(f"{secs}s")
    return " ".join(parts)


__all__ = ["get_version", "pkg_version", "format_millis", "format_duration"]
