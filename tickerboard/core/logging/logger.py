"""Structured logging utilities with fetch-cycle propagation."""

from __future__ import annotations

import json
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from typing import IO, Any, Iterator
from uuid import uuid4

from loguru import logger

from tickerboard.core.logging.config import LogConfig

_CYCLE_ID_VAR: ContextVar[str | None] = ContextVar("tickerboard_cycle_id", default=None)
_CONTEXT_VAR: ContextVar[dict[str, Any]] = ContextVar("tickerboard_log_context", default={})

TEXT_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "{extra[logger_name]} | cycle={extra[cycle_id]} | {message}"
)


def _patch_record(record: dict[str, Any]) -> None:
    extra = record["extra"]
    extra.setdefault("cycle_id", _CYCLE_ID_VAR.get() or "-")
    extra.setdefault("logger_name", record.get("name") or "tickerboard")
    for key, value in _CONTEXT_VAR.get({}).items():
        extra.setdefault(key, value)
    extra.setdefault("provider", None)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def _format_payload(record: dict[str, Any]) -> dict[str, Any]:
    extra = record.get("extra", {})
    context = {k: v for k, v in extra.items() if k not in {"cycle_id", "provider", "logger_name"}}
    payload: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "logger": extra.get("logger_name"),
        "message": record.get("message"),
        "cycle_id": extra.get("cycle_id"),
        "provider": extra.get("provider"),
    }
    if context:
        payload["context"] = context
    exception = record.get("exception")
    if exception:
        payload["exception"] = str(exception)
    return payload


class _StreamJsonSink:
    """Sink writing JSON lines to a text stream."""

    def __init__(self, stream: IO[str]) -> None:
        self._stream = stream

    def __call__(self, message: Any) -> None:
        self._stream.write(json.dumps(_format_payload(message.record), default=_json_default))
        self._stream.write("\n")
        self._stream.flush()


class _FileJsonSink:
    """Sink appending JSON lines to a file path."""

    def __init__(self, path: str) -> None:
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        self._path = path

    def __call__(self, message: Any) -> None:
        with open(self._path, "a", encoding="utf-8") as file:
            file.write(json.dumps(_format_payload(message.record), default=_json_default))
            file.write("\n")


def _configure_from_config(config: LogConfig) -> None:
    handlers: list[dict[str, Any]] = []
    level = config.level.upper()
    if config.console_output:
        stream = config.console_stream or sys.stderr
        if config.serialize:
            handlers.append({"sink": _StreamJsonSink(stream), "level": level})
        else:
            handlers.append(
                {"sink": stream, "level": level, "format": TEXT_FORMAT, "colorize": config.colorize}
            )
    if config.file_output and config.file_path:
        handlers.append({"sink": _FileJsonSink(config.file_path), "level": level})

    configure_kwargs: dict[str, Any] = {"handlers": handlers, "patcher": _patch_record}
    if config.extra:
        configure_kwargs["extra"] = config.extra
    logger.configure(**configure_kwargs)


def configure_logging(level: str = "INFO", **kwargs: Any) -> LogConfig:
    """Configure process-wide logging with the provided level and options."""

    config = LogConfig(level=level, **kwargs)
    _configure_from_config(config)
    return config


def get_logger(name: str | None = None) -> Any:
    """Return the global logger bound to ``name``."""

    return logger.bind(logger_name=name or "tickerboard")


@contextmanager
def log_context(*, cycle_id: str | None = None, **extra: Any) -> Iterator[str]:
    """Attach a fetch-cycle id and extra metadata to every nested log record."""

    previous_context = _CONTEXT_VAR.get({})
    context_token = _CONTEXT_VAR.set({**previous_context, **extra})

    active_cycle = cycle_id or uuid4().hex[:12]
    cycle_token = _CYCLE_ID_VAR.set(active_cycle)

    try:
        yield active_cycle
    finally:
        _CYCLE_ID_VAR.reset(cycle_token)
        _CONTEXT_VAR.reset(context_token)


def current_cycle_id() -> str | None:
    """Return the active fetch-cycle id, if any."""

    return _CYCLE_ID_VAR.get()


__all__ = [
    "configure_logging",
    "current_cycle_id",
    "get_logger",
    "log_context",
    "logger",
]
