"""
Logging setup shared by the `skills-viewer` CLI and the dashboard server.

Records go to stderr either as pipe-separated text lines or, with
`LOG_JSON=true`, as one JSON object per line. Fields passed through
`extra=` (table, section, db_host, ...) become top-level keys of the JSON
object, so a log collector can filter on them.

    from skills_viewer.utils.logging import configure_logging, get_logger

    configure_logging(level="DEBUG", json_logs=True)
    log = get_logger(__name__)
    log.warning("Dashboard upstream call failed", extra={"section": "users"})
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any, Dict, Mapping, Optional

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "taskName"}

# httpx logs every dashboard request at INFO; pool reconnect chatter is only
# interesting when it escalates.
LIBRARY_LEVELS: Mapping[str, str] = {
    "httpx": "WARNING",
    "httpcore": "WARNING",
    "psycopg.pool": "WARNING",
}


def _json_formatter(record: logging.LogRecord) -> str:
    """One log record as a single-line JSON document."""
    payload: Dict[str, Any] = {
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    for key, value in vars(record).items():
        if key in _RESERVED_ATTRS or key == "extra":
            continue
        payload[key] = value
    # `extra={"extra": {...}}` is flattened too
    nested = getattr(record, "extra", None)
    if isinstance(nested, dict):
        payload.update(nested)
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info
    return json.dumps(payload, default=str, ensure_ascii=False)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
) -> None:
    """
    Install the root handler for the CLI or the server process.

    Parameters
    ----------
    level : str
        Root level name, e.g. "DEBUG" or "WARNING".
    json_logs : bool
        Emit JSON lines instead of the text format.
    """
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "text": {
                    "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
                "json": {"()": JsonFormatter},
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "formatter": "json" if json_logs else "text",
                    "level": level,
                }
            },
            "loggers": {name: {"level": lib_level} for name, lib_level in LIBRARY_LEVELS.items()},
            "root": {"handlers": ["stderr"], "level": level},
        }
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["JsonFormatter", "LIBRARY_LEVELS", "configure_logging", "get_logger"]
