"""Structured JSON logging for the Quality Inspection service.

Every record is written as one JSON object per line. Records logged while a
request is being served carry that request's correlation ID, which the HTTP
middleware sets and clears around each call.
"""

import json
import logging
import logging.handlers
import os
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Optional


DEFAULT_SERVICE_NAME = "quality-inspection-service"
NO_CORRELATION_ID = "unknown"

# Libraries whose INFO output would drown the service's own entries
QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.dialects",
    "sqlalchemy.pool",
    "sqlalchemy.orm",
    "uvicorn.access",
    "fastapi",
    "httpx",
)

correlation_id_context: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else was passed through ``extra``
_STANDARD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "correlation_id", "taskName"}


class CorrelationIDFilter(logging.Filter):
    """Stamp each record with the correlation ID of the current request."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_context.get() or NO_CORRELATION_ID
        return True


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def __init__(self, service_name: str = DEFAULT_SERVICE_NAME):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", NO_CORRELATION_ID),
        }
        entry.update(self._location(record))

        if record.exc_info:
            entry["exception"] = self._exception(record)

        extra = {key: value for key, value in vars(record).items() if key not in _STANDARD_ATTRIBUTES}
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, default=str, ensure_ascii=False)

    @staticmethod
    def _location(record: logging.LogRecord) -> Dict[str, Any]:
        location: Dict[str, Any] = {}
        if record.module:
            location["module"] = record.module
        if record.funcName and record.funcName != "<module>":
            location["function"] = record.funcName
        if record.lineno:
            location["line"] = record.lineno
        return location

    def _exception(self, record: logging.LogRecord) -> Dict[str, Any]:
        exc_type, exc_value, _ = record.exc_info
        return {
            "type": exc_type.__name__ if exc_type else None,
            "message": str(exc_value) if exc_value else None,
            "traceback": self.formatException(record.exc_info),
        }


class LoggingConfig:
    """Root logger setup: JSON to stdout and to size-rotated files.

    With file output enabled, ``<service>.log`` receives every record at the
    configured level and ``<service>-errors.log`` only ERROR and above.
    """

    def __init__(
        self,
        log_level: str = "INFO",
        service_name: str = DEFAULT_SERVICE_NAME,
        log_dir: Optional[str] = None,
        max_file_size: int = 10 * 1024 * 1024,
        backup_count: int = 5,
        enable_console: bool = True,
        enable_file: bool = True
    ):
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {log_level}")

        self.log_level = level
        self.service_name = service_name
        self.max_file_size = max_file_size
        self.backup_count = backup_count
        self.enable_console = enable_console
        self.enable_file = enable_file
        # <project root>/logs unless a directory is given
        self.log_dir = Path(log_dir) if log_dir else Path(__file__).resolve().parents[3] / "logs"

    def setup_logging(self) -> None:
        """Replace the root logger's handlers with the configured ones."""
        root_logger = logging.getLogger()
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
        root_logger.setLevel(self.log_level)

        for handler in self._handlers():
            handler.addFilter(CorrelationIDFilter())
            handler.setFormatter(JSONFormatter(service_name=self.service_name))
            root_logger.addHandler(handler)

        quiet_loggers(QUIET_LOGGERS)

    def _handlers(self) -> Iterable[logging.Handler]:
        if self.enable_console:
            console = logging.StreamHandler(sys.stdout)
            console.setLevel(self.log_level)
            yield console

        if self.enable_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            yield self._rotating_file(f"{self.service_name}.log", self.log_level)
            yield self._rotating_file(f"{self.service_name}-errors.log", logging.ERROR)

    def _rotating_file(self, filename: str, level: int) -> logging.Handler:
        handler = logging.handlers.RotatingFileHandler(
            filename=self.log_dir / filename,
            maxBytes=self.max_file_size,
            backupCount=self.backup_count,
            encoding="utf-8"
        )
        handler.setLevel(level)
        return handler


def quiet_loggers(names: Iterable[str], level: int = logging.WARNING) -> None:
    for name in names:
        logging.getLogger(name).setLevel(level)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str) -> None:
    correlation_id_context.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    return correlation_id_context.get()


def clear_correlation_id() -> None:
    correlation_id_context.set(None)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _env_flag(name: str, default: bool = True) -> bool:
    return os.getenv(name, str(default)).strip().lower() in ("1", "true", "yes")


def setup_logging_from_env(log_level: Optional[str] = None) -> LoggingConfig:
    """Configure logging from ``LOG_*`` environment variables.

    An explicit ``log_level`` wins over ``LOG_LEVEL``.
    """
    config = LoggingConfig(
        log_level=log_level or os.getenv("LOG_LEVEL", "INFO"),
        service_name=os.getenv("SERVICE_NAME", DEFAULT_SERVICE_NAME),
        log_dir=os.getenv("LOG_DIR"),
        max_file_size=int(os.getenv("LOG_MAX_FILE_SIZE", str(10 * 1024 * 1024))),
        backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
        enable_console=_env_flag("LOG_ENABLE_CONSOLE"),
        enable_file=_env_flag("LOG_ENABLE_FILE")
    )
    config.setup_logging()
    return config


def log_with_extra(logger: logging.Logger, level: int, message: str, **extra) -> None:
    """Log ``message`` with ``extra`` as structured fields."""
    logger.log(level, message, extra=extra)


def log_request(logger: logging.Logger, method: str, path: str, **extra) -> None:
    log_with_extra(logger, logging.INFO, f"HTTP Request: {method} {path}",
                   request_method=method, request_path=path, **extra)


def response_log_level(status_code: int) -> int:
    """ERROR for 5xx, WARNING for 4xx, INFO otherwise."""
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


def log_response(logger: logging.Logger, method: str, path: str, status_code: int, duration_ms: float, **extra) -> None:
    log_with_extra(
        logger,
        response_log_level(status_code),
        f"HTTP Response: {method} {path} -> {status_code} ({duration_ms:.2f}ms)",
        request_method=method,
        request_path=path,
        response_status=status_code,
        response_duration_ms=round(duration_ms, 2),
        **extra
    )


def log_database_operation(logger: logging.Logger, operation: str, table: str, **extra) -> None:
    log_with_extra(logger, logging.DEBUG, f"Database {operation}: {table}",
                   db_operation=operation, db_table=table, **extra)


def log_inspection_event(logger: logging.Logger, event: str, inspection_id: Optional[str], **extra) -> None:
    """Log a change to an inspection form; unsaved inspections are reported as ``new``."""
    log_with_extra(logger, logging.DEBUG, f"Inspection {event}",
                   inspection_event=event, inspection_id=inspection_id or "new", **extra)


def log_business_rule_violation(logger: logging.Logger, rule: str, details: str, **extra) -> None:
    log_with_extra(logger, logging.WARNING, f"Business rule violation: {rule} - {details}",
                   business_rule=rule, violation_details=details, **extra)
