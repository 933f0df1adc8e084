"""Console output helpers (color and prefixed messages).

Everything the checkers show to a human goes through these printers so the
prefixes stay consistent between the interactive report and the silent
checker's update announcement.

 - ANSI colors only when stdout is a TTY and ``NO_COLOR`` is unset
 - ``info``/``ok``/``warn``/``err`` print to stdout with a one-glyph prefix
 - ``announce`` prints a multi-line, highlighted block
"""

from __future__ import annotations
import os
import sys
from typing import Iterable

RESET = "\033[0m"
BOLD = "\033[1m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
CYAN = "\033[36m"


def supports_color() -> bool:
    """Return True when ANSI colors are likely supported.

    Honors ``NO_COLOR`` and requires ``sys.stdout`` to be a TTY. Detection
    errors result in ``False``.
    """
    try:
        if os.environ.get("NO_COLOR"):
            return False
        return bool(getattr(sys.stdout, "isatty", lambda: False)())
    except Exception:
        return False


def c(s: str, color: str) -> str:
    """Wrap ``s`` in ``color`` when supported, otherwise return it unchanged."""
    return f"{color}{s}{RESET}" if supports_color() else s


def info(msg: str) -> None:
    """Print an informational message prefixed with "ℹ"."""
    print(c("ℹ ", BLUE) + msg)


def ok(msg: str) -> None:
    """Print a success message prefixed with "✓"."""
    print(c("✓ ", GREEN) + msg)


def warn(msg: str) -> None:
    """Print a warning message prefixed with "!"."""
    print(c("! ", YELLOW) + msg)


def err(msg: str) -> None:
    """Print an error message prefixed with "✗"."""
    print(c("✗ ", RED) + msg)


def _emit(text: str) -> None:
    try:
        print(text)
    except UnicodeEncodeError:
        # Legacy console code pages cannot encode the glyphs
        print(text.encode("ascii", "replace").decode("ascii"))


def announce(title: str, lines: Iterable[str]) -> None:
    """Print a highlighted title followed by plain lines, then flush."""
    _emit(c(f"🚨 {title}", BOLD + RED))
    for line in lines:
        _emit(line)
    sys.stdout.flush()


__all__ = [
    "supports_color",
    "c",
    "info",
    "ok",
    "warn",
    "err",
    "announce",
    "RESET",
    "BOLD",
    "RED",
    "GREEN",
    "YELLOW",
    "BLUE",
    "CYAN",
]
