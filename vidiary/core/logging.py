"""
Structured logging for the catalog.

Every record can carry an operation (store_insert, catalog_add, ...), an event
name and a context dict. `video_id` is lifted out of the context so log lines
for one entry can be grepped and filtered without parsing the context.
"""

import functools
import inspect
import json
import logging
import logging.handlers
import time
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

_operation: ContextVar[Optional[str]] = ContextVar('operation', default=None)

LOG_FILE = "vidiary.log"
JSON_LOG_FILE = "vidiary.log.json"


def _split_context(record: logging.LogRecord) -> Tuple[Optional[str], Dict[str, Any]]:
    context = dict(getattr(record, 'context', None) or {})
    video_id = context.pop('video_id', None)
    return video_id, context


class StructuredJSONFormatter(logging.Formatter):
    """One JSON object per line, keyed for the catalog's log queries."""

    def format(self, record: logging.LogRecord) -> str:
        video_id, context = _split_context(record)
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "function": getattr(record, 'origin', record.funcName),
            "operation": _operation.get(),
            "event": getattr(record, 'event', None),
            "video_id": video_id,
            "message": record.getMessage(),
        }
        payload = {key: value for key, value in payload.items() if value is not None}
        if context:
            payload["context"] = context
        if record.exc_info and record.exc_info[0]:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(payload, ensure_ascii=False, default=str)


class HumanReadableFormatter(logging.Formatter):
    """`time LEVEL [logger] operation/event video=<id> - message`, then context keys."""

    def format(self, record: logging.LogRecord) -> str:
        video_id, context = _split_context(record)
        stamp = datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")

        tags = "/".join(t for t in (_operation.get(), getattr(record, 'event', None)) if t)
        head = f"{stamp} {record.levelname:8s} [{record.name}]"
        if tags:
            head += f" {tags}"
        if video_id:
            head += f" video={video_id}"

        lines = [f"{head} - {record.getMessage()}"]
        lines.extend(f"  {key}: {value}" for key, value in context.items())
        if record.exc_info:
            lines.append(self.formatException(record.exc_info))
        return "\n".join(lines)


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.handlers.TimedRotatingFileHandler(
        filename=str(path), when='midnight', backupCount=30, encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(log_level: str = "INFO", log_dir: Optional[Path] = None, console: bool = False) -> None:
    """
    Route all logging to vidiary.log.json (structured) and vidiary.log (text).

    Args:
        log_level: Logging level name
        log_dir: Directory for the log files, defaults to ./logs
        console: Also write the text format to stderr
    """
    log_dir = Path(log_dir) if log_dir is not None else Path.cwd() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    level = getattr(logging, log_level.upper())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(_rotating_handler(log_dir / JSON_LOG_FILE, level, StructuredJSONFormatter()))
    root.addHandler(_rotating_handler(log_dir / LOG_FILE, level, HumanReadableFormatter()))
    if console:
        stream = logging.StreamHandler()
        stream.setLevel(level)
        stream.setFormatter(HumanReadableFormatter())
        root.addHandler(stream)

    log_event(
        level="INFO",
        logger=__name__,
        function="setup_logging",
        operation="logging_setup",
        event="logging_initialized",
        message=f"Logging to {log_dir} at {log_level}",
    )


def log_event(
    level: str,
    logger: str,
    function: str,
    operation: Optional[str] = None,
    event: Optional[str] = None,
    message: str = "",
    context: Optional[Dict[str, Any]] = None,
    exc_info: Optional[BaseException] = None
) -> None:
    """
    Log a structured event.

    Args:
        level: Log level name
        logger: Logger name (usually the module path)
        function: Function the event belongs to
        operation: Operation name, set for the duration of this record only
        event: Event type, e.g. entry_added
        message: Human-readable message
        context: Extra data; a `video_id` key is promoted to its own field
        exc_info: Exception to attach
    """
    log = getattr(logging.getLogger(logger), level.lower(), logging.getLogger(logger).info)
    extra = {'event': event, 'context': context or {}, 'origin': function}

    token = _operation.set(operation) if operation else None
    try:
        log(message, extra=extra, exc_info=exc_info)
    finally:
        if token is not None:
            _operation.reset(token)


def log_operation_error(
    logger: str,
    function: str,
    operation: str,
    error: BaseException,
    message: str = "",
    context: Optional[Dict[str, Any]] = None
) -> None:
    """Log a failed operation with the error's type and message in the context."""
    context = dict(context or {})
    context["error_type"] = type(error).__name__
    context["error_message"] = str(error)
    log_event(
        level="ERROR",
        logger=logger,
        function=function,
        operation=operation,
        event="operation_error",
        message=message or f"{operation} failed: {error}",
        context=context,
        exc_info=error,
    )


def _video_id(args: tuple, kwargs: Dict[str, Any]) -> Optional[str]:
    # Store calls take either an id string or a record carrying one
    for arg in (kwargs.get('id'), *args):
        if isinstance(arg, str):
            return arg
        if isinstance(getattr(arg, 'id', None), str):
            return arg.id
    return None


def operation_logger(operation_name: str):
    """
    Log start (DEBUG), completion (INFO) and failure (ERROR) of a call.

    Works on plain and coroutine functions. The video id of the call, if it
    has one, goes into the context of every record.

    Usage:
        @operation_logger("store_insert")
        async def insert(self, record): ...
    """
    def decorator(func):
        logger_name = func.__module__
        function_name = func.__name__

        def _log(level, event, context, message="", error=None):
            if error is not None:
                log_operation_error(logger_name, function_name, operation_name, error, context=context)
                return
            log_event(level, logger_name, function_name, operation_name, event, message, context)

        def _begin(args, kwargs):
            video_id = _video_id(args, kwargs)
            context = {"video_id": video_id} if video_id else {}
            _log("DEBUG", "operation_start", context, f"Starting {operation_name}")
            return context, time.monotonic()

        def _end(context, started, error=None):
            context = dict(context, duration_seconds=round(time.monotonic() - started, 4))
            _log("INFO", "operation_complete", context, f"Completed {operation_name}", error)

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                context, started = _begin(args, kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _end(context, started, e)
                    raise
                _end(context, started)
                return result

            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            context, started = _begin(args, kwargs)
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _end(context, started, e)
                raise
            _end(context, started)
            return result

        return wrapper
    return decorator
