"""Structured logging helpers."""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Mapping, Optional, TextIO

from .config import ClientConfig


_RESERVED_ATTRS = {
    "name",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "msg",
    "args",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "funcName",
    "levelname",
}


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        base: Dict[str, Any] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key.startswith("_") or key in _RESERVED_ATTRS:
                continue
            base[key] = value
        return json.dumps(base, ensure_ascii=False, default=str)


_REDACT_KEYS = {"authorization", "api_key", "secret", "passphrase"}


def redact_mapping(values: Mapping[str, Any], extra_keys: Iterable[str] = ()) -> Dict[str, Any]:
    """Return a shallow copy of `values` with sensitive keys redacted."""

    redacted: Dict[str, Any] = {}
    redact_keys = {key.lower() for key in _REDACT_KEYS} | {key.lower() for key in extra_keys}
    for key, value in values.items():
        if key.lower() in redact_keys:
            redacted[key] = "***REDACTED***"
        else:
            redacted[key] = value
    return redacted


def configure_logging(config: ClientConfig, stream: Optional[TextIO] = None) -> None:
    """Configure the `ots` logger tree on stderr."""

    level = "DEBUG" if config.debug else config.log_level
    if config.log_format == "json":
        formatter: Dict[str, Any] = {"()": f"{__name__}.JsonFormatter"}
    else:
        formatter = {
            "format": "%(levelname)s: %(name)s: %(message)s",
        }

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": formatter,
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "level": level,
                    "stream": stream if stream is not None else "ext://sys.stderr",
                }
            },
            "loggers": {
                "ots": {
                    "level": level,
                    "handlers": ["console"],
                    "propagate": False,
                },
            },
        }
    )


def get_logger(name: str) -> logging.Logger:
    """Return a namespaced logger for the requested subsystem."""

    return logging.getLogger(name)
