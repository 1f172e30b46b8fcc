"""Fail-quiet executors.

``execute_with_fallback`` substitutes a default for any failure.
``execute_with_circuit_breaker`` does the same but also consults and feeds
a CircuitBreaker, skipping the operation while the circuit is open.

Callers only learn whether they got the real value or the fallback; any
assertion on the value still decides whether a test passes.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, TypeVar

from .circuit_breaker import CircuitBreaker
from .errors import OperationCancelled

logger = logging.getLogger(__name__)

T = TypeVar("T")


def execute_with_fallback(operation: Callable[[], T], fallback_value: T) -> T:
    """Run ``operation`` once, returning ``fallback_value`` on failure.

    Args:
        operation: Zero-argument callable.
        fallback_value: Returned when the operation raises.

    Returns:
        The operation's result or ``fallback_value``.
    """
    try:
        return operation()
    except OperationCancelled:
        raise
    except Exception as e:
        logger.info(f"Operation failed, using fallback value: {e}")
        return fallback_value


def execute_with_circuit_breaker(
    operation: Callable[[], T],
    breaker: CircuitBreaker,
    fallback_value: T,
) -> T:
    """Run ``operation`` behind ``breaker``.

    Args:
        operation: Zero-argument callable.
        breaker: Breaker guarding the operation's dependency.
        fallback_value: Returned when the circuit is open or the call fails.

    Returns:
        The operation's result or ``fallback_value``.
    """
    if breaker.is_open():
        logger.info(
            f"Circuit '{breaker.name}' is open, skipping operation and using fallback"
        )
        return fallback_value

    try:
        result = operation()
    except OperationCancelled:
        raise
    except Exception as e:
        logger.info(
            f"Operation failed, recording failure in circuit '{breaker.name}': {e}"
        )
        breaker.record_failure()
        return fallback_value

    breaker.record_success()
    return result


def guarded(
    breaker: CircuitBreaker,
    fallback_value: Any,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator form of ``execute_with_circuit_breaker``.

    Usage:
        @guarded(registry.get("notifications"), fallback_value=[])
        def read_notifications():
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            return execute_with_circuit_breaker(
                lambda: func(*args, **kwargs), breaker, fallback_value
            )

        return wrapper
    return decorator
