# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/lsptransport-python/LICENSE
# ==============================================================================

"""Logging utilities for lsptransport.

Everything goes to ``stderr``.  When the stdio transport is selected, stdout *is*
the protocol channel, so a single stray log line there would corrupt the stream.

Records that carry a ``duration_ms`` attribute (connect/accept timings) get a
``[12.35 ms]`` suffix in plain and colored output and a ``duration_ms`` field in
JSON output.
"""

from __future__ import annotations

from collections.abc import Callable
import json
import logging
import os
import sys
from typing import Any, ClassVar, Final


RESET: Final[str] = "\033[0m"
DEBUG_COLOR: Final[str] = "\033[36m"
INFO_COLOR: Final[str] = "\033[32m"
WARNING_COLOR: Final[str] = "\033[33m"
ERROR_COLOR: Final[str] = "\033[1;31m"
CRITICAL_COLOR: Final[str] = "\033[1;35m"
LOGGER_COLOR: Final[str] = "\033[94m"
DURATION_COLOR: Final[str] = "\033[90m"

DEFAULT_LOGGER_NAME: Final[str] = "lsptransport"
ENV_LOG_LEVEL: Final[str] = "LSPTRANSPORT_LOG_LEVEL"
ENV_LOG_JSON: Final[str] = "LSPTRANSPORT_LOG_JSON"
ENV_NO_COLOR: Final[str] = "NO_COLOR"
DEFAULT_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT: Final[str] = "%Y-%m-%d %H:%M:%S"

JsonSerializer = Callable[[dict[str, Any]], str]

_JSON_FIELDS: tuple[str, ...] = ("duration_ms",)


def _duration_suffix(record: logging.LogRecord) -> str | None:
    duration = getattr(record, "duration_ms", None)
    if duration is None:
        return None
    return f"[{float(duration):.2f} ms]"


class PlainFormatter(logging.Formatter):
    """Standard formatter that appends the ``duration_ms`` suffix."""

    def format(self, record: logging.LogRecord) -> str:
        result = super().format(record)
        suffix = _duration_suffix(record)
        return f"{result} {suffix}" if suffix else result


class ColoredFormatter(PlainFormatter):
    """Formatter that adds ANSI colors to level and logger names."""

    LEVEL_COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": DEBUG_COLOR,
        "INFO": INFO_COLOR,
        "WARNING": WARNING_COLOR,
        "ERROR": ERROR_COLOR,
        "CRITICAL": CRITICAL_COLOR,
    }

    def format(self, record: logging.LogRecord) -> str:
        orig_levelname = record.levelname
        orig_name = record.name
        record.levelname = f"{self.LEVEL_COLORS.get(orig_levelname, '')}{orig_levelname}{RESET}"
        record.name = f"{LOGGER_COLOR}{orig_name}{RESET}"
        try:
            result = logging.Formatter.format(self, record)
        finally:
            record.levelname = orig_levelname
            record.name = orig_name

        suffix = _duration_suffix(record)
        return f"{result} {DURATION_COLOR}{suffix}{RESET}" if suffix else result


class StructuredJSONFormatter(logging.Formatter):
    """Serialize log records into single-line JSON."""

    def __init__(self, serializer: JsonSerializer | None = None, *, datefmt: str | None = None) -> None:
        super().__init__(datefmt=datefmt)
        self._serializer = serializer or _default_json_serializer

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "thread": record.threadName,
        }
        for key in _JSON_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return self._serializer(payload)


class TransportLogHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """stderr handler installed by :func:`setup_logger`."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)


def _default_json_serializer(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, default=str)


def _has_transport_handler(root: logging.Logger) -> bool:
    return any(isinstance(handler, TransportLogHandler) for handler in root.handlers)


def _read_bool_env(key: str) -> bool:
    value = os.getenv(key)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.getenv(ENV_LOG_LEVEL) or logging.INFO
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logger(
    *,
    level: int | str | None = None,
    use_json: bool | None = None,
    use_color: bool | None = None,
    json_serializer: JsonSerializer | None = None,
    fmt: str | None = None,
    datefmt: str | None = DEFAULT_DATEFMT,
    force: bool = False,
) -> None:
    """Configure the root logger with a stderr handler.

    Args:
        level: Override the log level. Falls back to ``LSPTRANSPORT_LOG_LEVEL``
            then ``logging.INFO``.
        use_json: Emit JSON lines. Defaults to ``LSPTRANSPORT_LOG_JSON``.
        use_color: Colorize output. Defaults to on unless ``NO_COLOR`` is set,
            JSON is enabled, or stderr is not a terminal.
        json_serializer: Callable converting the payload dict into a string.
        fmt: Format string for plain-text logging.
        datefmt: Date format for timestamps.
        force: Replace a previously installed handler.
    """
    root = logging.getLogger()

    if _has_transport_handler(root) and not force:
        return

    if force:
        for handler in list(root.handlers):
            if isinstance(handler, TransportLogHandler):
                root.removeHandler(handler)
                handler.close()

    resolved_level = _resolve_level(level)
    root.setLevel(resolved_level)

    resolved_use_json = use_json if use_json is not None else _read_bool_env(ENV_LOG_JSON)
    if use_color is not None:
        resolved_use_color = use_color
    elif os.getenv(ENV_NO_COLOR) or resolved_use_json:
        resolved_use_color = False
    else:
        resolved_use_color = sys.stderr.isatty()

    handler = TransportLogHandler()
    handler.setLevel(resolved_level)

    formatter: logging.Formatter
    if resolved_use_json:
        formatter = StructuredJSONFormatter(json_serializer, datefmt=datefmt)
    elif resolved_use_color:
        formatter = ColoredFormatter(fmt or DEFAULT_FORMAT, datefmt=datefmt)
    else:
        formatter = PlainFormatter(fmt or DEFAULT_FORMAT, datefmt=datefmt)

    handler.setFormatter(formatter)
    root.addHandler(handler)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a named logger, installing the default handler on first use."""
    root = logging.getLogger()
    if not _has_transport_handler(root):
        setup_logger()
    return logging.getLogger(name or DEFAULT_LOGGER_NAME)


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "ColoredFormatter",
    "PlainFormatter",
    "StructuredJSONFormatter",
    "TransportLogHandler",
    "get_logger",
    "setup_logger",
]
