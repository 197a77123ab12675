"""
Structured logging (OpenTelemetry-shaped).

All spiece modules log through one ``spiece`` logger. Records carry a
``scope`` attribute ("ffi", "processor", ...) plus any ``extra`` fields.

Usage::

    from ._logging import scoped_logger

    logger = scoped_logger("processor")
    logger.debug("Model loaded", extra={"vocab_size": 1000})

Environment::

    SPIECE_LOG_LEVEL=trace|debug|info|warn|error|fatal|off (default: warn)
    SPIECE_LOG_FORMAT=json|human (default: human if tty, json if piped)
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import MutableMapping
from datetime import datetime, timezone
from typing import Any

from ._version import __version__

__all__ = ["logger", "setup_logging", "scoped_logger"]

# =============================================================================
# Level Mapping
# =============================================================================

_LEVEL_TO_SEVERITY = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "FATAL",
}

_NAME_TO_LEVEL = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
    "off": logging.CRITICAL + 10,
    "none": logging.CRITICAL + 10,
}

# Levels that include code location
_CODE_LOCATION_LEVELS = {logging.DEBUG, logging.ERROR, logging.CRITICAL}

_STANDARD_FIELDS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "scope",
        "message",
    }
)


def _record_scope(record: logging.LogRecord) -> str:
    scope = getattr(record, "scope", None)
    if scope:
        return scope
    return record.name.split(".")[-1] if record.name else "spiece"


def _strip_path_prefix(filepath: str) -> str:
    """Strip everything up to the package directory."""
    marker = "spiece" + os.sep
    if marker in filepath:
        return filepath[filepath.index(marker) + len(marker) :]
    return filepath


# =============================================================================
# Formatters
# =============================================================================


class JsonFormatter(logging.Formatter):
    """OpenTelemetry-compliant JSON formatter."""

    def format(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        # Python timestamps carry microseconds; pad to nanoseconds (RFC3339)
        timestamp = dt.strftime("%Y-%m-%dT%H:%M:%S") + f".{dt.microsecond * 1000:09d}Z"

        attributes: dict[str, Any] = {"scope": _record_scope(record)}
        for key, value in record.__dict__.items():
            if key not in _STANDARD_FIELDS and not key.startswith("_"):
                attributes[key] = value

        if record.levelno in _CODE_LOCATION_LEVELS:
            attributes["code.filepath"] = _strip_path_prefix(record.pathname)
            attributes["code.lineno"] = record.lineno

        if record.exc_info:
            attributes["exception.message"] = self.formatException(record.exc_info)

        log_record = {
            "timestamp": timestamp,
            "severityText": _LEVEL_TO_SEVERITY.get(record.levelno, "INFO"),
            "body": record.getMessage(),
            "attributes": attributes,
            "resource": {
                "service.name": "spiece",
                "service.version": __version__,
            },
        }
        return json.dumps(log_record, separators=(",", ":"), default=repr)


class HumanFormatter(logging.Formatter):
    """Human-readable formatter for terminal output."""

    _RESET = "\x1b[0m"
    _DIM = "\x1b[2m"
    _RED = "\x1b[31m"
    _YELLOW = "\x1b[33m"
    _CYAN = "\x1b[36m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self._use_colors = use_colors

    def _level_color(self, levelno: int) -> str:
        if not self._use_colors:
            return ""
        if levelno <= logging.DEBUG:
            return self._DIM
        if levelno >= logging.ERROR:
            return self._RED
        if levelno >= logging.WARNING:
            return self._YELLOW
        return ""

    def format(self, record: logging.LogRecord) -> str:
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        severity = _LEVEL_TO_SEVERITY.get(record.levelno, "INFO")
        level_color = self._level_color(record.levelno)

        parts = [dt.strftime("%H:%M:%S"), " "]
        if level_color:
            parts.append(level_color)
        parts.append(f"{severity:<5} ")
        if level_color:
            parts.append(self._RESET)

        if self._use_colors:
            parts.append(self._CYAN)
        parts.append(f"[{_record_scope(record)}] ")
        if self._use_colors:
            parts.append(self._RESET)

        parts.append(record.getMessage())

        if record.levelno in _CODE_LOCATION_LEVELS:
            if self._use_colors:
                parts.append(self._DIM)
            parts.append(f" [{_strip_path_prefix(record.pathname)}:{record.lineno}]")
            if self._use_colors:
                parts.append(self._RESET)

        return "".join(parts)


# =============================================================================
# Logger Setup
# =============================================================================


def _get_log_level() -> int:
    level_name = os.environ.get("SPIECE_LOG_LEVEL", "warn")
    return _NAME_TO_LEVEL.get(level_name.lower(), logging.WARNING)


def _get_log_format() -> str:
    fmt = os.environ.get("SPIECE_LOG_FORMAT")
    if fmt:
        return fmt.lower()
    return "human" if sys.stderr.isatty() else "json"


def _create_handler(fmt: str | None = None) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    if (fmt or _get_log_format()) == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(HumanFormatter(use_colors=sys.stderr.isatty()))
    return handler


logger = logging.getLogger("spiece")


def _setup_default_handler() -> None:
    """Configure default logging from the environment."""
    # Leave user-configured logging alone
    if logger.handlers:
        return
    logger.addHandler(_create_handler())
    logger.setLevel(_get_log_level())


def setup_logging(level: str | int = "INFO", format: str | None = None) -> None:
    """
    Configure spiece logging.

    Replaces any handlers previously attached to the ``spiece`` logger.

    Parameters
    ----------
    level : str or int, default "INFO"
        Level name ("debug", "info", "warn", "error", "fatal", "off") or a
        ``logging`` constant.
    format : str, optional
        "json" or "human". Defaults to ``SPIECE_LOG_FORMAT`` or TTY detection.

    Examples
    --------
        >>> import spiece
        >>> spiece.setup_logging("debug", format="human")
    """
    if isinstance(level, str):
        level = _NAME_TO_LEVEL.get(level.lower(), logging.INFO)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    logger.addHandler(_create_handler(format.lower() if format else None))
    logger.setLevel(level)


class _ScopedLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that merges call-site extra with a fixed scope."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        extra: dict[str, Any] = dict(self.extra) if self.extra else {}
        if "extra" in kwargs:
            extra.update(kwargs["extra"])
        kwargs["extra"] = extra
        return msg, kwargs


def scoped_logger(scope: str) -> logging.LoggerAdapter:
    """Create a logger adapter that tags every record with ``scope``."""
    return _ScopedLoggerAdapter(logger, {"scope": scope})


_setup_default_handler()
