"""
Application Logger

All application loggers live under the ``formbuilder`` namespace and share
its handlers. Output is either a human-readable line or one JSON object per
record; context bound through LoggerAdapter appears as extra JSON keys.
"""

import os
import sys
import json
import time
import logging
import inspect
import datetime
import functools
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

APP_LOGGER_NAME = "formbuilder"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

F = TypeVar('F', bound=Callable[..., Any])

__all__ = [
    'APP_LOGGER_NAME',
    'JsonFormatter',
    'LoggerAdapter',
    'app_logger',
    'configure_logger',
    'get_logger',
    'log_execution_time',
]


class JsonFormatter(logging.Formatter):
    """
    Render each record as a single JSON object.

    Keys: time (UTC, ISO 8601), level, logger, message, location, plus an
    ``exception`` block when exc_info is set and any bound context.
    """

    def __init__(self, *, indent: Optional[int] = None):
        super().__init__()
        self.indent = indent

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.datetime.fromtimestamp(record.created, tz=datetime.timezone.utc)
        payload: Dict[str, Any] = {
            "time": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.lineno}",
        }

        context = getattr(record, "context", None)
        if isinstance(context, dict):
            payload.update(context)

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(payload, indent=self.indent, default=str)


def _file_handler(path: str, logger: logging.Logger) -> Optional[logging.Handler]:
    directory = os.path.dirname(path)
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
        return logging.FileHandler(path)
    except OSError as e:
        logger.warning(f"Logging to console only; cannot open {path}: {e}")
        return None


def configure_logger(
    name: str = APP_LOGGER_NAME,
    level: Union[str, int] = logging.INFO,
    use_json: bool = False,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    (Re)configure a logger: set its level and replace its handlers.

    Args:
        name: Logger name
        level: Level name or number
        use_json: Emit JSON lines instead of the text format
        log_file: Also write to this file when given

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper() if isinstance(level, str) else level)

    formatter: logging.Formatter = (
        JsonFormatter() if use_json else logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    )

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    logger.handlers = []
    if log_file:
        handler = _file_handler(log_file, logger)
        if handler is not None:
            handlers.append(handler)

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger for a component, placed under the application namespace."""
    if name == APP_LOGGER_NAME or name.startswith(APP_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


class LoggerAdapter(logging.LoggerAdapter):
    """
    Adapter that binds key/value context (form id, request id) to every
    record it emits. The context is stored on ``record.context``.
    """

    def __init__(self, logger: logging.Logger, context: Optional[Dict[str, Any]] = None):
        super().__init__(logger, dict(context or {}))

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        extra = dict(kwargs.get("extra") or {})
        extra["context"] = {**self.extra, **extra.get("context", {})}
        return msg, {**kwargs, "extra": extra}

    def with_context(self, **context) -> 'LoggerAdapter':
        """Return a new adapter carrying this adapter's context plus ``context``."""
        return LoggerAdapter(self.logger, {**self.extra, **context})


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes")


def _bootstrap_app_logger() -> logging.Logger:
    # Import-time defaults from the environment; create_app() reconfigures from Settings
    logger = logging.getLogger(APP_LOGGER_NAME)
    if logger.handlers:
        return logger
    return configure_logger(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        use_json=_env_flag("LOG_JSON"),
        log_file=os.environ.get("LOG_FILE") or None,
    )


app_logger = _bootstrap_app_logger()


def log_execution_time(logger: Optional[logging.Logger] = None) -> Callable[[F], F]:
    """
    Decorator that logs how long a call took, at DEBUG on success and at
    ERROR when it raises. Handles plain and coroutine functions.
    """
    def report(func: Callable, started: float, error: Optional[Exception]) -> None:
        target = logger or app_logger
        elapsed = time.perf_counter() - started
        if error is None:
            target.debug(f"{func.__name__} executed in {elapsed:.3f} seconds")
        else:
            target.error(f"{func.__name__} failed after {elapsed:.3f} seconds: {error}")

    def decorator(func: F) -> F:
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                started = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    report(func, started, e)
                    raise
                report(func, started, None)
                return result
            return async_wrapper  # type: ignore[return-value]

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                report(func, started, e)
                raise
            report(func, started, None)
            return result
        return wrapper  # type: ignore[return-value]

    return decorator
