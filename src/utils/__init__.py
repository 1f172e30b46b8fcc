"""
Utilities Module

Common utility functions for the end-to-end suite.
"""

from utils.logging_config import (
    ContextLogger,
    JsonFormatter,
    ReadableFormatter,
    configure_logging,
    get_logger,
    test_name_var,
)

__all__ = [
    # Logging
    "ContextLogger",
    "JsonFormatter",
    "ReadableFormatter",
    "configure_logging",
    "get_logger",
    "test_name_var",
]
