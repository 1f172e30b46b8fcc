"""
Logging Configuration for the end-to-end suite.

Provides structured logging with:
- JSON formatting for CI log aggregation
- Human-readable formatting for local runs
- The running test's name attached to every line
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

# Name of the test currently executing, set by the pytest plugin
test_name_var: ContextVar[Optional[str]] = ContextVar('test_name', default=None)


class JsonFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Outputs logs as JSON objects for easy parsing by log aggregators.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        test_name = test_name_var.get()
        if test_name:
            log_data["test"] = test_name

        # Add extra fields from the record
        if hasattr(record, 'extra_data'):
            log_data.update(record.extra_data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ReadableFormatter(logging.Formatter):
    """
    Human-readable log formatter for local runs.
    """

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m',
    }

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for human readability."""
        if self.use_color:
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            reset = self.COLORS['RESET']
        else:
            color = reset = ''

        timestamp = datetime.now().strftime('%H:%M:%S.%f')[:-3]
        level = f"{color}{record.levelname:8s}{reset}"

        message = f"{timestamp} {level} [{record.name}] {record.getMessage()}"

        test_name = test_name_var.get()
        if test_name:
            message += f" ({test_name})"

        if hasattr(record, 'extra_data') and record.extra_data:
            extras = ' | '.join(f"{k}={v}" for k, v in record.extra_data.items())
            message += f" | {extras}"

        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)

        return message


class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter that includes bound context in all log messages.
    """

    def process(self, msg: str, kwargs: Dict) -> tuple:
        """Merge bound context into extra_data."""
        extra = kwargs.get('extra', {})

        if 'extra_data' not in extra:
            extra['extra_data'] = {}
        extra['extra_data'].update(self.extra)

        kwargs['extra'] = extra
        return msg, kwargs


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Optional[Path] = None
) -> None:
    """
    Configure suite logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON formatted logs
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    root_logger.handlers.clear()

    if json_output:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = ReadableFormatter(use_color=sys.stdout.isatty())

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(JsonFormatter())  # Always JSON for files
        root_logger.addHandler(file_handler)

    # Selenium and its HTTP client are chatty at DEBUG
    logging.getLogger("selenium").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name: str, **extra: Any) -> ContextLogger:
    """
    Get a context-aware logger.

    Args:
        name: Logger name (typically __name__)
        **extra: Additional context to include in all logs

    Returns:
        ContextLogger instance
    """
    base_logger = logging.getLogger(name)
    return ContextLogger(base_logger, extra)
