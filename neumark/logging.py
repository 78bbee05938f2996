"""
Logging for the neumark hierarchy.

Curve modules log at DEBUG with a structured ``context`` extra describing
the work an evaluation took:

    logger.debug("cumulative evaluated", extra={"context": {"x": x, "pairs": 3}})

The JSON formatter emits the context as an object (amounts stay exact
integers); the text formatter appends it as sorted ``key=value`` pairs.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from typing import Any, Mapping, Optional

ROOT_LOGGER = "neumark"

_TEXT_FORMAT = "%(levelname)s %(name)s: %(message)s"
_FILE_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_FILE_MAX_BYTES = 10 * 1024 * 1024
_FILE_BACKUPS = 3


@dataclass(frozen=True)
class LoggingOptions:
    level: str = "INFO"
    format: str = "text"  # text | json
    file: Optional[str] = None


def _record_context(record: logging.LogRecord) -> Optional[Mapping[str, Any]]:
    context = getattr(record, "context", None)
    if isinstance(context, Mapping) and context:
        return context
    return None


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = _record_context(record)
        if context is not None:
            payload["context"] = dict(context)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        # Non-JSON context values (Decimal, Path) render as strings.
        return json.dumps(payload, default=str)


class ContextTextFormatter(logging.Formatter):
    """Plain text lines with the context extra appended as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _record_context(record)
        if context is None:
            return line
        pairs = " ".join(f"{key}={context[key]}" for key in sorted(context))
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def _normalize_format(fmt: str) -> str:
    lowered = fmt.strip().lower()
    if lowered in {"text", "json"}:
        return lowered
    raise ValueError(f"Invalid log format: {fmt}")


def _formatter(fmt: str, text_format: str) -> logging.Formatter:
    if fmt == "json":
        return JSONFormatter()
    return ContextTextFormatter(text_format)


def load_logging_options_from_env(defaults: Optional[LoggingOptions] = None) -> LoggingOptions:
    """Load logging options from environment, falling back to `defaults`.

    Env vars:
        - NEUMARK_LOG_LEVEL
        - NEUMARK_LOG_FORMAT
        - NEUMARK_LOG_FILE
    """
    base = defaults or LoggingOptions()
    return LoggingOptions(
        level=os.getenv("NEUMARK_LOG_LEVEL", base.level),
        format=os.getenv("NEUMARK_LOG_FORMAT", base.format),
        file=os.getenv("NEUMARK_LOG_FILE", base.file),
    )


def configure_logging(options: LoggingOptions) -> None:
    """Configure the "neumark" logger hierarchy.

    Preconditions:
        - options.format in {"text", "json"}

    Postconditions:
        - Logs emit to stderr (and an optional rotating file)
        - Repeated calls replace handlers instead of stacking them
    """
    fmt = _normalize_format(options.format)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, options.level.strip().upper(), logging.INFO))
    logger.handlers.clear()
    logger.propagate = False

    stream = logging.StreamHandler(sys.stderr)
    stream.setFormatter(_formatter(fmt, _TEXT_FORMAT))
    logger.addHandler(stream)

    if options.file:
        rotating = RotatingFileHandler(
            options.file,
            maxBytes=_FILE_MAX_BYTES,
            backupCount=_FILE_BACKUPS,
        )
        rotating.setFormatter(_formatter(fmt, _FILE_TEXT_FORMAT))
        logger.addHandler(rotating)
