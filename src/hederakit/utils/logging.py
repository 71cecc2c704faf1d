"""
Structured logging for hederakit.

Thin layer over the standard library ``logging`` module. Every module
obtains its logger through ``get_logger(__name__)`` and passes structured
fields via ``extra={...}``; the default formatter appends those fields
to the message as ``key=value`` pairs.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, Any, Dict, Optional, Union

ROOT_LOGGER_NAME = "hederakit"

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_SILENT_LEVEL = logging.CRITICAL + 1


def _drop_record(record: logging.LogRecord) -> bool:
    return False

# Attributes every LogRecord carries; anything else came from ``extra``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord(
        name="", level=0, pathname="", lineno=0, msg="", args=(), exc_info=None
    ).__dict__
) | {"message", "asctime"}


class ExtraFieldsFormatter(logging.Formatter):
    """Formatter that renders ``extra`` fields after the message."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        fields = _extract_extra(record)
        if not fields:
            return base
        rendered = " ".join(f"{key}={value}" for key, value in fields.items())
        return f"{base} | {rendered}"


def _extract_extra(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RESERVED_ATTRS and not key.startswith("_")
    }


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger in the hederakit namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger whose name starts with ``hederakit``.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    level: Union[int, str, None] = None,
    fmt: str = DEFAULT_FORMAT,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Attach a stream handler to the package root logger.

    The level defaults to ``HEDERAKIT_LOG_LEVEL`` (or INFO). Setting
    ``DISABLE_LOGS=true`` in the environment silences the package.
    Calling this twice replaces the previous handler.

    Args:
        level: Logging level name or number.
        fmt: Format string for the handler.
        stream: Output stream (stderr by default).

    Returns:
        The configured package root logger.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)

    for handler in list(root.handlers):
        if getattr(handler, "_hederakit_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(ExtraFieldsFormatter(fmt))
    handler._hederakit_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)

    if level is None:
        level = os.environ.get("HEDERAKIT_LOG_LEVEL", "INFO")
    set_level(level)

    if os.environ.get("DISABLE_LOGS", "").lower() == "true":
        disable_logging()
    else:
        _enable(root)

    return root


def set_level(level: Union[int, str]) -> None:
    """Set the level of the package root logger."""
    if isinstance(level, str):
        level = level.upper()
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)


def disable_logging() -> None:
    """
    Silence every hederakit logger.

    Child loggers inherit the raised level; records from children with
    their own level stop at the package handlers and do not propagate
    past the package root.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(_SILENT_LEVEL)
    root.propagate = False
    for handler in root.handlers:
        handler.addFilter(_drop_record)


def _enable(root: logging.Logger) -> None:
    root.disabled = False
    root.propagate = True
    for handler in root.handlers:
        handler.removeFilter(_drop_record)


def enable_debug() -> None:
    """Shortcut for ``set_level("DEBUG")`` with logging re-enabled."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    _enable(root)
    root.setLevel(logging.DEBUG)


class LogContext:
    """
    Temporarily change the package log level.

    Example:
        ```python
        with LogContext("DEBUG"):
            await mirror.get_topic_messages("0.0.1234")
        ```
    """

    def __init__(self, level: Union[int, str]) -> None:
        self._level = level.upper() if isinstance(level, str) else level
        self._previous: Optional[int] = None

    def __enter__(self) -> "LogContext":
        root = logging.getLogger(ROOT_LOGGER_NAME)
        self._previous = root.level
        root.setLevel(self._level)
        return self

    def __exit__(self, *exc: object) -> None:
        if self._previous is not None:
            logging.getLogger(ROOT_LOGGER_NAME).setLevel(self._previous)
