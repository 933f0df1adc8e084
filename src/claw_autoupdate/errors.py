"""Failure categories raised by the fallible internals.

The silent checker lets these propagate up to ``run_silent`` where they are
discarded; the interactive checker turns them into exit code 1.
"""

from __future__ import annotations


class UpdaterError(Exception):
    """Base class for update-check failures."""


class RetrievalFailure(UpdaterError):
    """The local or remote version query failed."""


class StateLoadFailure(UpdaterError):
    """The persisted check state could not be read or decoded."""


class StatePersistFailure(UpdaterError):
    """The persisted check state could not be written."""


class TriggerFailure(UpdaterError):
    """The update command failed to start or reported an error."""


__all__ = [
    "UpdaterError",
    "RetrievalFailure",
    "StateLoadFailure",
    "StatePersistFailure",
    "TriggerFailure",
]
