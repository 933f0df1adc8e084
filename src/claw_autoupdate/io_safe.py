"""Safe I/O helpers (atomic writes and the well-known state path).

The state file is rewritten on every eligible silent check, possibly by a
process that is about to be torn down by the update it triggers, so writes
go through a temp file in the same directory followed by ``os.replace``.
"""

from __future__ import annotations
import os
import tempfile
from pathlib import Path
from typing import Mapping, Optional

from .defaults import DEFAULT_STATE_RELPATH, ENV_STATE_FILE, ENV_WORKSPACE


def workspace_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Return the workspace root (``$OPENCLAW_WORKSPACE`` or the cwd)."""
    env = os.environ if environ is None else environ
    root = env.get(ENV_WORKSPACE)
    return Path(root).expanduser() if root else Path.cwd()


def default_state_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Resolve the state file path from the environment.

    ``$OPENCLAW_UPDATE_STATE_FILE`` wins; otherwise the heartbeat file under
    the workspace's ``memory/`` directory is used.
    """
    env = os.environ if environ is None else environ
    explicit = env.get(ENV_STATE_FILE)
    if explicit:
        return Path(explicit).expanduser()
    return workspace_dir(env) / DEFAULT_STATE_RELPATH


def atomic_write(path: Path, text: str) -> None:
    """Atomically write UTF-8 text to ``path`` with fsync.

    Creates parent directories as needed. Propagates write errors after
    cleaning up the temporary file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmppath = tempfile.mkstemp(
        prefix=path.name + ".", suffix=".tmp", dir=str(path.parent)
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
            f.flush()
            try:
                os.fsync(f.fileno())
            except OSError:  # pragma: no cover
                pass
        os.replace(tmppath, path)
    except BaseException:
        try:
            os.remove(tmppath)
        except OSError:  # pragma: no cover
            pass
        raise


__all__ = ["workspace_dir", "default_state_path", "atomic_write"]
