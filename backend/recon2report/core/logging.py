"""
Structured logging configuration for Recon2Report.

All log records include the fields ``action`` and ``target`` so that every
log line is machine-parseable while remaining human-readable.

Usage::

    from recon2report.core.logging import configure_logging, get_logger

    configure_logging()                # call once at startup
    logger = get_logger(__name__)
    logger.info("corpus loaded", extra={"action": "load_corpus", "target": "rules/"})
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

from recon2report.config import get_settings

# ── Constants ────────────────────────────────────────────────────────────────

_LOG_FORMAT: str = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "action=%(action)s | target=%(target)s | %(message)s"
)
_DATE_FORMAT: str = "%Y-%m-%dT%H:%M:%S%z"
_ROOT_LOGGER_NAME: str = "recon2report"


# ── Custom Formatter ─────────────────────────────────────────────────────────

class StructuredFormatter(logging.Formatter):
    """Formatter that injects default values for structured fields.

    If a log record is missing the ``action`` or ``target`` attribute, this
    formatter supplies a dash (``-``) so that the format string never raises a
    ``KeyError``.
    """

    _DEFAULTS: dict[str, str] = {
        "action": "-",
        "target": "-",
    }

    def format(self, record: logging.LogRecord) -> str:
        for key, default in self._DEFAULTS.items():
            if not hasattr(record, key):
                setattr(record, key, default)
        return super().format(record)


# ── Public API ───────────────────────────────────────────────────────────────

def configure_logging(
    level: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Initialise the application-wide logging configuration.

    Safe to call more than once (the API factory and the CLI both call it);
    the handler is only attached the first time.

    Args:
        level: Override the log level.  When ``None``, ``settings.LOG_LEVEL``
            is used if set, otherwise ``DEBUG`` when ``settings.DEBUG`` is
            truthy and ``INFO`` otherwise.
        stream: Where log lines are written.  Defaults to ``sys.stdout``;
            the CLI passes ``sys.stderr`` so its reports stay clean.
    """
    settings = get_settings()

    if level is None:
        level = settings.LOG_LEVEL or ("DEBUG" if settings.DEBUG else "INFO")
    level = level.upper()

    root_logger: logging.Logger = logging.getLogger(_ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    # Avoid adding duplicate handlers on repeated calls (e.g. in tests).
    if not root_logger.handlers:
        handler = logging.StreamHandler(stream or sys.stdout)
        handler.setFormatter(StructuredFormatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
        root_logger.addHandler(handler)
    for handler in root_logger.handlers:
        handler.setLevel(level)
        if stream is not None and isinstance(handler, logging.StreamHandler):
            handler.setStream(stream)

    # Silence noisy third-party loggers.
    for noisy_logger in ("uvicorn.access",):
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    root_logger.debug(
        "Logging configured at %s level",
        level,
        extra={"action": "logging_init", "target": settings.APP_NAME},
    )


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the ``recon2report`` namespace.

    Module names that already start with ``recon2report.`` are used as-is so
    that ``get_logger(__name__)`` does not double the prefix.

    Args:
        name: Typically ``__name__`` of the calling module.

    Returns:
        A :class:`logging.Logger` instance.
    """
    if name == _ROOT_LOGGER_NAME or name.startswith(f"{_ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")
