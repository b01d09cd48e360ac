"""Logging wrapper for client diagnostics.

A sink is whatever the caller hands to :class:`RestClient`: a
``logging.Logger`` (or anything with a stdlib style ``log`` method), an object
exposing ``trace``/``debug``/``info``/``warn``/``error`` methods, or a plain
``str`` callback that receives the fully formatted line. The kind of sink is
resolved once, when the :class:`BoundLogger` is built.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Literal

LogLevel = Literal["trace", "debug", "info", "warn", "error"]
LogCallback = Callable[[str], None]
Emitter = Callable[[LogLevel, str, tuple], None]

TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")

_STDLIB_LEVELS: dict[LogLevel, int] = {
    "trace": TRACE_LEVEL,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

LOG_LEVEL_PRIORITY: dict[LogLevel, int] = {
    "trace": 0,
    "debug": 1,
    "info": 2,
    "warn": 3,
    "error": 4,
}


def _stdlib_emitter(sink: Any) -> Emitter:
    def emit(level: LogLevel, msg: str, args: tuple) -> None:
        sink.log(_STDLIB_LEVELS[level], msg, *args)

    return emit


def _method_emitter(sink: Any) -> Emitter:
    def emit(level: LogLevel, msg: str, args: tuple) -> None:
        method = getattr(sink, level, None)
        if method is not None:
            method(msg, *args)

    return emit


def _callback_emitter(sink: LogCallback) -> Emitter:
    def emit(level: LogLevel, msg: str, args: tuple) -> None:
        sink(msg % args if args else msg)

    return emit


def _resolve_emitter(sink: Any) -> Emitter:
    if hasattr(sink, "log"):
        return _stdlib_emitter(sink)
    if any(hasattr(sink, name) for name in _STDLIB_LEVELS):
        return _method_emitter(sink)
    if callable(sink):
        return _callback_emitter(sink)
    raise TypeError(f"Unsupported log sink: {sink!r}")


class BoundLogger:
    """Level-filtered front for one log sink."""

    def __init__(
        self,
        logger: Any | None = None,
        *,
        level: LogLevel = "info",
    ) -> None:
        self._logger = logger or _default_logger()
        self._level = level
        self._emit = _resolve_emitter(self._logger)

    @property
    def level(self) -> LogLevel:
        return self._level

    def trace(self, msg: str, *args: Any) -> None:
        self._log("trace", msg, args)

    def debug(self, msg: str, *args: Any) -> None:
        self._log("debug", msg, args)

    def info(self, msg: str, *args: Any) -> None:
        self._log("info", msg, args)

    def warn(self, msg: str, *args: Any) -> None:
        self._log("warn", msg, args)

    def error(self, msg: str, *args: Any) -> None:
        self._log("error", msg, args)

    def child(self, name: str) -> "BoundLogger":
        """Stdlib loggers get a named child; other sinks are shared as is."""
        if isinstance(self._logger, logging.Logger):
            return BoundLogger(self._logger.getChild(name), level=self._level)
        return BoundLogger(self._logger, level=self._level)

    def _log(self, level: LogLevel, msg: str, args: tuple) -> None:
        if LOG_LEVEL_PRIORITY[level] < LOG_LEVEL_PRIORITY[self._level]:
            return
        try:
            self._emit(level, msg, args)
        except Exception:
            # A broken sink must not turn a request result into an exception
            pass


def _default_logger() -> logging.Logger:
    logger = logging.getLogger("restcore")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    return logger


def create_logger(*, logger: Any | None = None, level: LogLevel = "info") -> BoundLogger:
    if isinstance(logger, BoundLogger):
        return logger
    return BoundLogger(logger, level=level)


__all__ = ["BoundLogger", "LogCallback", "LogLevel", "create_logger"]
