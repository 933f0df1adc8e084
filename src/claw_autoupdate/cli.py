"""Console entry points.

``openclaw-autoupdate`` runs the interactive check (or whatever mode the
flags select); ``openclaw-autoupdate-silent`` always runs the throttled
silent check and exits ``0``.
"""

from __future__ import annotations

import sys
from typing import List, Optional

from .main_flow import main as _main
from .ui import warn


def main(argv: Optional[List[str]] = None) -> int:
    try:
        return _main(argv)
    except KeyboardInterrupt:
        print()
        warn("Aborted by user.")
        return 130


def silent_main(argv: Optional[List[str]] = None) -> int:
    try:
        return _main(argv, silent=True)
    except KeyboardInterrupt:
        return 130


__all__ = ["main", "silent_main"]


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
