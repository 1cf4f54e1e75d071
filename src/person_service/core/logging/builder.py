# src/person_service/core/logging/builder.py
"""
Logging builder: assemble a dictConfig mapping from Settings and apply it.

    setup_logging(settings)

Active handlers:

| LOG_TO_STDOUT | LOG_DIR set | Handlers                               |
| ------------- | ----------- | -------------------------------------- |
| true          | any         | console + error_console                |
| false         | no          | console + error_console                |
| false         | yes         | console + file (app.log) + error_file  |

Loggers configured besides root: uvicorn.error, uvicorn.access and
sqlalchemy.engine (DEBUG only when ENABLE_SQL_LOGGING, since SQL logs may carry
user data).
"""

from __future__ import annotations

import logging
import logging.config
from pathlib import Path

from person_service.config.settings import Settings
from person_service.utils.logging import get_project_name

from .filters import RedactFilter, RequestIdFilter
from .formatters import ColorFormatter, JsonFormatter
from .handlers import (
    get_console_handler,
    get_error_console_handler,
    get_error_file_handler,
    get_file_handler,
)

DEFAULT_SERVICE_NAME = "person-service"


def _file_logging_enabled(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping for the given settings.

    Formatters: "standard" (ColorFormatter in text mode) and "json".
    Filters: "request_id", "redact".
    """
    formatters = {
        "standard": {
            "()": ColorFormatter if settings.LOG_FORMAT == "text" else logging.Formatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(default=DEFAULT_SERVICE_NAME),
        },
    }

    filters = {
        "request_id": {"()": RequestIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}
    if _file_logging_enabled(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            "uvicorn.error": {
                "level": settings.LOG_LEVEL,
                "handlers": list(handlers.keys()),
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging(settings: Settings) -> None:
    """
    Apply the logging configuration.

    Creates LOG_DIR first when file logging is enabled, then installs the
    dictConfig and a RequestIdFilter on the root logger as a safety net for
    handlers added later by third parties.
    """
    if _file_logging_enabled(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(make_dict_config(settings))
    logging.getLogger().addFilter(RequestIdFilter())
