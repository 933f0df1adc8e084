"""Logging configuration helpers (human + JSON + file).

The update checkers log diagnostics (why a version query failed, whether a
run was throttled, what was persisted) through the root logger:
 - Plain human-readable logs to stderr
 - Optional JSON lines to stdout for collection by the host heartbeat
 - Optional file logs

The default level is ``WARNING`` and the silent checker only logs at
``DEBUG``, so a background run stays invisible unless ``--verbose`` or
``--log-level debug`` is given.
"""

from __future__ import annotations
import json
import logging
import sys
from typing import Optional

_JSON_FIELDS = (
    "event",
    "key",
    "path",
    "current",
    "remote",
    "version",
    "decision",
    "outcome",
    "returncode",
    "error",
    "error_type",
    "duration_ms",
)


class JSONFormatter(logging.Formatter):
    """Minimal JSON formatter for structured log collection.

    Emits ``level`` and ``message`` plus any of the structured fields that
    were attached with ``extra=...``.
    """

    def format(self, record):
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
        }
        for k in _JSON_FIELDS:
            if hasattr(record, k):
                payload[k] = getattr(record, k)
        return json.dumps(payload, default=str)


def configure_logging(
    verbose: bool,
    log_file: Optional[str] = None,
    log_json: bool = False,
    log_level: Optional[str] = None,
) -> None:
    """Configure the root logger according to CLI flags.

    Parameters
    - ``verbose``: When ``True``, sets level to ``DEBUG`` (unless ``log_level``
      overrides). Otherwise defaults to ``WARNING``.
    - ``log_file``: Optional path to tee logs to a file (plain text format).
    - ``log_json``: When ``True``, also emit JSON lines to stdout.
    - ``log_level``: Optional explicit level name (debug, info, warning, error).

    Handlers added by a previous call are removed and closed first, so
    repeated configuration (common in tests) never duplicates output.
    """

    if log_level:
        level = {
            "debug": logging.DEBUG,
            "info": logging.INFO,
            "warning": logging.WARNING,
            "error": logging.ERROR,
        }.get(log_level.lower(), logging.WARNING)
    else:
        level = logging.DEBUG if verbose else logging.WARNING

    logger = logging.getLogger()
    logger.setLevel(level)

    for h in list(logger.handlers):
        if getattr(h, "_added_by_configure_logging", False):
            logger.removeHandler(h)
            h.close()

    fmt = "%(levelname)s: %(message)s"
    stream = logging.StreamHandler()
    stream.setFormatter(logging.Formatter(fmt))
    setattr(stream, "_added_by_configure_logging", True)
    logger.addHandler(stream)

    if log_json:
        json_handler = logging.StreamHandler(sys.stdout)
        json_handler.setFormatter(JSONFormatter())
        setattr(json_handler, "_added_by_configure_logging", True)
        logger.addHandler(json_handler)

    if log_file:
        fh = logging.FileHandler(log_file)
        fh.setFormatter(logging.Formatter("%(asctime)s " + fmt))
        setattr(fh, "_added_by_configure_logging", True)
        logger.addHandler(fh)

    for handler in logger.handlers:
        handler.setLevel(level)


def log_event(event: str, level: int = logging.INFO, **fields) -> None:
    """Emit a structured event log at the given level.

    Common ``fields`` include ``key``, ``path``, ``current``, ``remote``,
    ``decision``, ``outcome`` and ``error``. The function never raises.
    """
    try:
        logging.getLogger().log(level, event, extra={"event": event, **fields})
    except Exception:
        # Never let logging break a check
        pass


__all__ = ["configure_logging", "log_event", "JSONFormatter"]
