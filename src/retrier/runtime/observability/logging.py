"""Logging setup for the ``retrier`` logger hierarchy.

The engine logs through standard ``logging`` loggers (``retrier.retry``) and
attaches attempt metadata as ``extra`` fields. ``configure_logging`` installs a
handler that renders those fields either as ``key=value`` text or as JSON
lines.

Example:
    >>> from retrier.runtime.observability import configure_logging
    >>> configure_logging(format="json", level="DEBUG")
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, TextIO

import orjson

if TYPE_CHECKING:
    from retrier.foundation.config import RetrierSettings

ROOT_LOGGER = "retrier"

# Attributes every LogRecord carries; anything else came in through ``extra``
_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _extras(record: logging.LogRecord) -> dict[str, object]:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED and not k.startswith("_")}


class TextFormatter(logging.Formatter):
    """Human-readable output. Format: timestamp [level] logger: message key=value ..."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=UTC).strftime("%H:%M:%S.%f")[:-3]
        parts = [ts, f"[{record.levelname.lower()}]", f"{record.name}:", record.getMessage()]
        parts += [f"{k}={v}" for k, v in sorted(_extras(record).items())]
        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JsonFormatter(logging.Formatter):
    """JSON Lines output for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(data, default=str, option=orjson.OPT_NON_STR_KEYS).decode()


def configure_logging(
    format: str = "text",  # noqa: A002 - shadows builtin but matches stdlib
    level: str = "INFO",
    *,
    output: TextIO | None = None,
) -> logging.Handler:
    """Attach a single handler to the ``retrier`` logger.

    Calling it again replaces the previously installed handler.

    Args:
        format: "text" (human) or "json" (machine)
        level: Minimum level name - DEBUG, INFO, WARNING, ERROR, CRITICAL
        output: Stream to write to (default: stderr)

    Returns:
        The installed handler
    """
    formatters: dict[str, type[logging.Formatter]] = {"text": TextFormatter, "json": JsonFormatter}
    if format not in formatters:
        raise ValueError(f"Unknown format: {format}. Use 'text' or 'json'")

    logger = logging.getLogger(ROOT_LOGGER)
    for existing in [h for h in logger.handlers if getattr(h, "_retrier_handler", False)]:
        logger.removeHandler(existing)

    handler = logging.StreamHandler(output or sys.stderr)
    handler.setFormatter(formatters[format]())
    handler._retrier_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler


def configure_from_settings(settings: RetrierSettings | None = None, *, output: TextIO | None = None) -> logging.Handler:
    """Configure logging from RETRIER_LOG_* settings. RETRIER_DEBUG forces DEBUG."""
    if settings is None:
        from retrier.foundation.config import get_settings
        settings = get_settings()
    level = "DEBUG" if settings.debug else settings.logging.level
    return configure_logging(settings.logging.format, level, output=output)
