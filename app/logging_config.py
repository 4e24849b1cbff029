import logging
import logging.config
import sys
import time
import uuid
from typing import Optional

import structlog

# Loggers that are too chatty at the application level
QUIET_LOGGERS = {
    "sqlalchemy.engine": "WARNING",
    "werkzeug": "INFO",
}


def _shared_processors():
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def _formatter(renderer):
    return {
        "()": structlog.stdlib.ProcessorFormatter,
        "foreign_pre_chain": _shared_processors(),
        "processors": [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    }


def configure_logging(log_level: str = "INFO", log_file: Optional[str] = None, json_console: bool = False):
    """
    Configure structured logging for the application.

    structlog loggers and plain ``logging`` loggers (the scheduling engine)
    go through the same formatter, so every line carries the timestamp,
    level and any bound operation context.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path (JSON lines, rotated at 10MB).
        json_console: Render console output as JSON instead of key=value text.
    """
    structlog.configure(
        processors=[structlog.stdlib.filter_by_level]
        + _shared_processors()
        + [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    console_renderer = (
        structlog.processors.JSONRenderer()
        if json_console
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "level": log_level,
            "formatter": "console",
            "stream": sys.stdout,
        }
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": log_level,
            "formatter": "json",
            "filename": log_file,
            "maxBytes": 10485760,
            "backupCount": 5,
        }

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": _formatter(console_renderer),
            "json": _formatter(structlog.processors.JSONRenderer()),
        },
        "handlers": handlers,
        "root": {
            "level": log_level,
            "handlers": list(handlers),
        },
        "loggers": {name: {"level": level} for name, level in QUIET_LOGGERS.items()},
    })

    logger = structlog.get_logger("app")
    logger.info("Logging configured", level=log_level, file=log_file, json_console=json_console)
    return logger


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


class OperationContext:
    """
    Context manager for multi-step scheduling operations.

    Binds ``operation_id`` and ``operation_type`` into the logging context
    for the duration of the block, so every log line emitted inside (service
    or engine) can be correlated. Exceptions are logged and re-raised.
    """

    def __init__(self, operation_type: str, operation_id: Optional[str] = None, **context):
        self.operation_type = operation_type
        self.operation_id = operation_id or uuid.uuid4().hex[:8]
        self.context = context
        self.logger = get_logger("app.scheduling")
        self._started = None
        self._bound = None

    def __enter__(self):
        self._bound = structlog.contextvars.bind_contextvars(
            operation_type=self.operation_type,
            operation_id=self.operation_id,
        )
        self._started = time.perf_counter()
        self.logger.info("Operation started", **self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = round(time.perf_counter() - self._started, 4)
        try:
            if exc_type is None:
                self.logger.info("Operation completed", duration_seconds=duration, status="success")
            else:
                self.logger.warning(
                    "Operation failed",
                    duration_seconds=duration,
                    status="error",
                    error_type=exc_type.__name__,
                    error_message=str(exc_val),
                )
        finally:
            structlog.contextvars.reset_contextvars(**self._bound)
        return False
