"""Logging for the storefront.

Stdlib handlers write to stdout, ``logs/storefront.log`` and
``logs/storefront_error.log``; structlog sits on top and renders JSON in
production and staging, rich console output elsewhere.

The level follows the environment (``ENV``, ``ENVIRONMENT`` or ``PROTEAN_ENV``)
unless ``LOG_LEVEL`` is set.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

LEVELS = {"production": "INFO", "staging": "INFO", "development": "DEBUG", "test": "WARNING"}

# Third-party loggers held at WARNING so request logs stay readable
QUIET_LOGGERS = ("protean", "urllib3", "asyncio", "multipart")

_ROTATE_AT = 10 * 1024 * 1024
_BACKUPS = 5


def environment() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def log_level(env: str | None = None) -> str:
    env = env or environment()
    return os.getenv("LOG_LEVEL", LEVELS.get(env, "INFO")).upper()


def _rotating_file(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(path, maxBytes=_ROTATE_AT, backupCount=_BACKUPS, encoding="utf-8")
    handler.setLevel(level)
    return handler


def build_handlers(log_dir: Path | str, level: str) -> list[logging.Handler]:
    """Console, full log file and error-only log file, in that order."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    return [
        console,
        _rotating_file(log_dir / "storefront.log", level),
        _rotating_file(log_dir / "storefront_error.log", logging.ERROR),
    ]


def setup_stdlib_logging(log_dir: Path | str = "logs") -> None:
    level = log_level()
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = build_handlers(log_dir, level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def renderers(env: str | None = None) -> list:
    """Final processors: machine-readable JSON where logs are shipped, rich tracebacks elsewhere."""
    if (env or environment()) in ("production", "staging"):
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    traceback = structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=5)
    return [structlog.dev.ConsoleRenderer(colors=True, exception_formatter=traceback)]


def setup_structlog() -> None:
    callsite = structlog.processors.CallsiteParameterAdder(
        parameters=[
            structlog.processors.CallsiteParameter.MODULE,
            structlog.processors.CallsiteParameter.LINENO,
        ]
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            callsite,
            *renderers(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(log_dir: Path | str = "logs") -> None:
    setup_stdlib_logging(log_dir)
    setup_structlog()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind values (request id, method, path) into every log line of the current request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
