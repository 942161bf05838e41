"""Opt-in log output for the library.

The package only installs a ``NullHandler`` on its own logger. Hosts that
already configure logging get ``jsonenvelope.*`` records through propagation;
scripts without their own setup can call :func:`setup_logging`.
"""
from __future__ import annotations

import logging
from logging.config import dictConfig
from pathlib import Path
from typing import Any

from jsonenvelope.core.config import settings
from jsonenvelope.core.request_context import current_request_id

LIBRARY_LOGGER = "jsonenvelope"

LINE_FORMAT = (
    "{\"ts\":%(asctime)s, \"lvl\":%(levelname)s, "
    "\"logger\":%(name)s, \"msg\":%(message)s, "
    "\"req_id\":%(request_id)s}"
)


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id() or "-"
        return True


def _handler_configs() -> dict[str, dict[str, Any]]:
    base = {"formatter": "line", "filters": ["reqid"]}
    handlers: dict[str, dict[str, Any]] = {"stream": {"class": "logging.StreamHandler", **base}}
    if not settings.LOG_TO_FILE:
        return handlers

    Path(settings.LOG_FILE_PATH).parent.mkdir(parents=True, exist_ok=True)
    file_base = {
        **base,
        "filename": settings.LOG_FILE_PATH,
        "backupCount": settings.LOG_BACKUP_COUNT,
        "encoding": "utf-8",
    }
    if settings.LOG_ROTATION_POLICY == "time":
        handlers["file"] = {
            "class": "logging.handlers.TimedRotatingFileHandler",
            "when": settings.LOG_ROTATION_WHEN,
            "interval": settings.LOG_ROTATION_INTERVAL,
            **file_base,
        }
    else:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "maxBytes": settings.LOG_MAX_BYTES,
            **file_base,
        }
    return handlers


def setup_logging(
    level: str | None = None,
    logger_name: str = LIBRARY_LOGGER,
    propagate: bool = False,
) -> logging.Logger:
    """Attach request-tagged line handlers to ``logger_name`` and return it.

    Only that logger is touched; the root logger and any other loggers keep
    their configuration. ``level`` defaults to ``settings.LOG_LEVEL``.
    """
    handlers = _handler_configs()
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"reqid": {"()": RequestIdFilter}},
            "formatters": {"line": {"format": LINE_FORMAT}},
            "handlers": handlers,
            "loggers": {
                logger_name: {
                    "level": (level or settings.LOG_LEVEL).upper(),
                    "handlers": list(handlers),
                    "propagate": propagate,
                }
            },
        }
    )
    logger = logging.getLogger(logger_name)
    logger.debug("logging configured", extra={"handlers": list(handlers)})
    return logger
