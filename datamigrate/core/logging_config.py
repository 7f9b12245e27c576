"""Logging configuration with correlation IDs for migration runs.

Each migration run gets a run ID which is attached to every log record emitted
while the run is active, so the steps of one run can be followed through the
log even when several runs are interleaved in the same file.
"""
import json
import logging
import logging.handlers
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

# Context variable for correlation IDs
correlation_id: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

_STANDARD_RECORD_FIELDS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName', 'taskName',
    'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'correlation_id', 'message', 'asctime'
}


class CorrelationIDFilter(logging.Filter):
    """Filter to add correlation IDs to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id.get() or 'no-correlation-id'
        return True


class StructuredFormatter(logging.Formatter):
    """Structured JSON formatter for machine-read logs."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'correlation_id': getattr(record, 'correlation_id', 'no-correlation-id'),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info)
            }

        extra_fields = {
            key: value for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_FIELDS
        }
        if extra_fields:
            log_entry['extra'] = extra_fields

        return json.dumps(log_entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Human-readable formatter for development and console output."""

    def __init__(self, include_correlation_id: bool = True):
        self.include_correlation_id = include_correlation_id
        format_string = (
            '%(asctime)s - %(name)s - %(levelname)s'
            + (' - %(correlation_id)s' if include_correlation_id else '')
            + ' - %(message)s'
        )
        super().__init__(format_string)


class LoggingManager:
    """Installs the datamigrate handlers on the package logger."""

    def __init__(self, logger_name: str = 'datamigrate'):
        self.logger_name = logger_name
        self._configured = False
        self._handlers: Dict[str, logging.Handler] = {}

    @property
    def is_configured(self) -> bool:
        return self._configured

    def configure(
        self,
        log_level: str = 'INFO',
        log_file: Optional[Union[str, Path]] = None,
        enable_console_logging: bool = True,
        structured_logging: bool = False,
        max_file_size: int = 10 * 1024 * 1024,  # 10MB
        backup_count: int = 5,
        stream=None
    ) -> logging.Logger:
        """Configure logging for the package.

        Args:
            log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Optional file to log to, rotated at ``max_file_size``
            enable_console_logging: Enable logging to ``stream`` (stdout by default)
            structured_logging: Use structured JSON logging
            max_file_size: Maximum size of the log file before rotation
            backup_count: Number of rotated files to keep
            stream: Stream for the console handler

        Returns:
            logging.Logger: The configured package logger
        """
        logger = logging.getLogger(self.logger_name)
        if self._configured:
            return logger

        level = getattr(logging, log_level.upper())
        logger.setLevel(level)
        correlation_filter = CorrelationIDFilter()

        if structured_logging:
            formatter = StructuredFormatter()
        else:
            formatter = HumanReadableFormatter(include_correlation_id=True)

        if enable_console_logging:
            console_handler = logging.StreamHandler(stream or sys.stdout)
            console_handler.setLevel(level)
            console_handler.setFormatter(formatter)
            console_handler.addFilter(correlation_filter)
            logger.addHandler(console_handler)
            self._handlers['console'] = console_handler

        if log_file:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=max_file_size,
                backupCount=backup_count,
                encoding='utf-8'
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            file_handler.addFilter(correlation_filter)
            logger.addHandler(file_handler)
            self._handlers['file'] = file_handler

        self._configured = True
        logger.debug(f"Logging configured at level {log_level.upper()}")
        return logger

    def shutdown(self) -> None:
        """Remove and close the handlers installed by ``configure``."""
        logger = logging.getLogger(self.logger_name)
        for handler in self._handlers.values():
            logger.removeHandler(handler)
            handler.close()
        self._handlers.clear()
        logger.setLevel(logging.NOTSET)
        self._configured = False


_logging_manager = LoggingManager()


def configure_logging(settings=None, log_file: Optional[Union[str, Path]] = None, **kwargs) -> logging.Logger:
    """Configure package logging, taking level and format from ``settings`` when given."""
    if settings is not None:
        kwargs.setdefault('log_level', settings.log_level)
        kwargs.setdefault('structured_logging', settings.structured_logging)
    return _logging_manager.configure(log_file=log_file, **kwargs)


def get_logging_manager() -> LoggingManager:
    return _logging_manager


@contextmanager
def correlation_context(corr_id: str) -> Iterator[str]:
    """Attach ``corr_id`` to every record logged inside the block."""
    token = correlation_id.set(corr_id)
    try:
        yield corr_id
    finally:
        correlation_id.reset(token)


__all__ = [
    'CorrelationIDFilter', 'StructuredFormatter', 'HumanReadableFormatter',
    'LoggingManager', 'configure_logging', 'get_logging_manager',
    'correlation_context', 'correlation_id'
]
