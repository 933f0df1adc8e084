"""Persisted check state (last-check timestamps) and its store.

The state file is a small JSON record shared with other heartbeat checks::

    {"lastChecks": {"update": 1700000000000, "email": 1699999000000}}

:class:`CheckState` holds the parsed record, :class:`StateStore` owns the
file at an injected path, and :class:`CheckLock` is an advisory lock file
that keeps two overlapping silent checks from racing on the same record.

Design notes:
 - ``read``/``write`` raise (``StateLoadFailure``/``StatePersistFailure``);
   ``load``/``save`` return explicit ``(value, error)`` results and never
   raise. A load failure degrades to an empty state ("never checked").
 - Keys the updater does not own (other ``lastChecks`` entries, other
   top-level keys) are preserved on save.
"""

from __future__ import annotations

import json
import math
import os
import secrets
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Tuple

from .defaults import LOCK_STALE_AFTER_S
from .errors import StateLoadFailure, StatePersistFailure
from .io_safe import atomic_write

_LAST_CHECKS = "lastChecks"


def _as_millis(value: Any) -> Optional[int]:
    # bool is an int subclass; a stray ``true`` is not a timestamp
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    # json accepts NaN, Infinity and out-of-range literals like 1e400
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return None


@dataclass
class CheckState:
    """Mapping of check name to last-check time in epoch milliseconds.

    ``extra`` carries the other top-level keys of the file untouched, and
    ``unparsed`` the ``lastChecks`` entries whose values are not timestamps
    (another task's format), so saving writes them back as they were.
    """

    last_checks: Dict[str, int] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)
    unparsed: Dict[str, Any] = field(default_factory=dict)

    def last_check(self, key: str) -> int:
        """Return the last-check timestamp for ``key``; ``0`` when absent."""
        return self.last_checks.get(key, 0)

    def record(self, key: str, now_ms: int) -> None:
        """Store ``now_ms`` for ``key`` without ever moving it backwards."""
        self.unparsed.pop(key, None)
        self.last_checks[key] = max(self.last_check(key), int(now_ms))

    def forget(self, key: str) -> bool:
        dropped = self.unparsed.pop(key, None) is not None
        return self.last_checks.pop(key, None) is not None or dropped

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        checks: Dict[str, Any] = dict(self.unparsed)
        checks.update(self.last_checks)
        data[_LAST_CHECKS] = checks
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "CheckState":
        """Build a state from decoded JSON.

        Raises ``ValueError`` when ``data`` is not an object. Entries of
        ``lastChecks`` that are not finite numbers read as never checked but
        are kept in ``unparsed``.
        """
        if not isinstance(data, dict):
            raise ValueError("state root is not an object")
        raw = data.get(_LAST_CHECKS)
        checks: Dict[str, int] = {}
        unparsed: Dict[str, Any] = {}
        if isinstance(raw, dict):
            for key, value in raw.items():
                millis = _as_millis(value)
                if millis is None:
                    unparsed[str(key)] = value
                else:
                    checks[str(key)] = millis
        extra = {k: v for k, v in data.items() if k != _LAST_CHECKS}
        return cls(last_checks=checks, extra=extra, unparsed=unparsed)


class StateStore:
    """Load and save :class:`CheckState` at a fixed path."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def lock_path(self) -> Path:
        return self.path.with_name(self.path.name + ".lock")

    def read(self) -> CheckState:
        """Read the state file.

        A missing file is an empty state, not a failure. Unreadable or
        malformed content raises :class:`StateLoadFailure`.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return CheckState()
        except (OSError, UnicodeDecodeError) as e:
            raise StateLoadFailure(f"could not read {self.path}: {e}") from e
        try:
            return CheckState.from_dict(json.loads(text))
        except (ValueError, RecursionError) as e:
            raise StateLoadFailure(f"invalid state in {self.path}: {e}") from e

    def load(self) -> Tuple[CheckState, Optional[str]]:
        """Return ``(state, error)``; on failure the state is empty."""
        try:
            return self.read(), None
        except StateLoadFailure as e:
            return CheckState(), str(e)

    def write(self, state: CheckState) -> None:
        """Persist ``state``, preserving keys written by other checks.

        The file is re-read right before writing so entries that changed
        since ``state`` was loaded are kept. Raises
        :class:`StatePersistFailure` when the write fails.
        """
        try:
            current = self.read().to_dict()
        except StateLoadFailure:
            current = {}
        merged = dict(current)
        merged.update(state.extra)
        checks = dict(current.get(_LAST_CHECKS) or {})
        checks.update(state.last_checks)
        merged[_LAST_CHECKS] = checks
        try:
            atomic_write(self.path, json.dumps(merged, indent=2) + "\n")
        except OSError as e:
            raise StatePersistFailure(f"could not write {self.path}: {e}") from e

    def save(self, state: CheckState) -> Optional[str]:
        """Persist ``state``; return an error string instead of raising."""
        try:
            self.write(state)
        except StatePersistFailure as e:
            return str(e)
        return None

    def forget(self, key: str) -> bool:
        """Remove ``key`` from the file. Returns True when it was present.

        Raises :class:`StateLoadFailure` or :class:`StatePersistFailure`.
        """
        state = self.read()
        if not state.forget(key):
            return False
        data = state.to_dict()
        try:
            atomic_write(self.path, json.dumps(data, indent=2) + "\n")
        except OSError as e:
            raise StatePersistFailure(f"could not write {self.path}: {e}") from e
        return True

    def lock(self, stale_after: float = LOCK_STALE_AFTER_S) -> "CheckLock":
        return CheckLock(self.lock_path, stale_after=stale_after)


class CheckLock:
    """Advisory lock file created with ``O_CREAT | O_EXCL``.

    A lock older than ``stale_after`` seconds is assumed to belong to a run
    that died (or was restarted by the update) and is reclaimed once. The
    file records its owner; the lock file is only removed while it still
    holds the contents that were judged stale, or this lock's own record on
    release.
    """

    def __init__(
        self,
        path: Path,
        *,
        stale_after: float = LOCK_STALE_AFTER_S,
        clock: Callable[[], float] = time.time,
    ):
        self.path = Path(path)
        self.stale_after = stale_after
        self._clock = clock
        self._held = False
        self._owner: Optional[str] = None

    @property
    def held(self) -> bool:
        return self._held

    def acquire(self) -> bool:
        """Try once to take the lock; return False when another run holds it."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        for attempt in range(2):
            try:
                fd = os.open(str(self.path), os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
            except FileExistsError:
                if attempt == 0:
                    stale = self._stale_owner()
                    if stale is not None:
                        self._remove_if_owned(stale)
                        continue
                return False
            owner = json.dumps(
                {
                    "pid": os.getpid(),
                    "created_at": self._clock(),
                    "token": secrets.token_hex(8),
                }
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(owner)
            self._owner = owner
            self._held = True
            return True
        return False

    def release(self) -> None:
        if not self._held:
            return
        self._held = False
        if self._owner is not None:
            self._remove_if_owned(self._owner)
        self._owner = None

    def _read_owner(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None

    def _stale_owner(self) -> Optional[str]:
        """Return the contents of a stale lock file, or None when it is fresh."""
        try:
            mtime = self.path.stat().st_mtime
        except FileNotFoundError:
            # Released in the meantime; retry the create
            return ""
        if self._clock() - mtime <= self.stale_after:
            return None
        owner = self._read_owner()
        return "" if owner is None else owner

    def _remove_if_owned(self, owner: str) -> None:
        if self._read_owner() != owner:
            return
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    def __enter__(self) -> bool:
        return self.acquire()

    def __exit__(self, *exc) -> None:
        self.release()


__all__ = ["CheckState", "StateStore", "CheckLock"]
