"""Update decision: compare the installed and published version tokens.

Version strings are opaque. The registry channel always names "whatever is
newest", so any difference, a downgrade included, means the install should
converge to it. Do not add semver parsing or ordering here: it would change
when the update fires.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .errors import RetrievalFailure


class Decision(str, Enum):
    UP_TO_DATE = "up_to_date"
    UPDATE_AVAILABLE = "update_available"
    INDETERMINATE = "indeterminate"


@dataclass(frozen=True)
class VersionPair:
    """Result of one retrieval round; ``None`` marks a failed query."""

    current: Optional[str]
    remote: Optional[str]
    current_error: Optional[str] = None
    remote_error: Optional[str] = None

    @property
    def decision(self) -> Decision:
        return decide(self.current, self.remote)

    def require(self) -> Tuple[str, str]:
        """Return both versions or raise :class:`RetrievalFailure`."""
        if self.current is None or self.remote is None:
            raise RetrievalFailure("; ".join(self.failures()) or "version unavailable")
        return self.current, self.remote

    def failures(self) -> list:
        out = []
        if self.current is None:
            out.append(f"local version: {self.current_error or 'unavailable'}")
        if self.remote is None:
            out.append(f"remote version: {self.remote_error or 'unavailable'}")
        return out


def decide(current: Optional[str], remote: Optional[str]) -> Decision:
    """Return the update decision for two retrieval outcomes.

    Either side ``None`` → ``INDETERMINATE``; equal strings → ``UP_TO_DATE``;
    anything else → ``UPDATE_AVAILABLE``.
    """
    if current is None or remote is None:
        return Decision.INDETERMINATE
    # Equality only, deliberately (see module docstring)
    if current == remote:
        return Decision.UP_TO_DATE
    return Decision.UPDATE_AVAILABLE


__all__ = ["Decision", "VersionPair", "decide"]
