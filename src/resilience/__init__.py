"""Resilience patterns for unreliable browser interactions.

Provides fixed-interval retry, polling waits, fallback execution and a
circuit breaker for guarding driven operations in end-to-end tests.
"""

from .cancellation import CancellationToken

from .circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerRegistry,
    CircuitState,
    create_circuit_breaker,
)

from .errors import (
    NonRetryableError,
    OperationCancelled,
    ResilienceError,
    RetriesExhausted,
    WaitTimeout,
)

from .fallback import (
    execute_with_circuit_breaker,
    execute_with_fallback,
    guarded,
)

from .outcome import (
    TRANSIENT_KINDS,
    DrivenOperationError,
    FailureKind,
    Outcome,
    classify_failure,
)

from .polling import (
    PollCondition,
    Snapshotter,
    wait_for,
)

from .retry import (
    RetryPolicy,
    execute_with_retry,
    sync_retry,
)

__all__ = [
    # Outcomes
    "DrivenOperationError",
    "FailureKind",
    "Outcome",
    "TRANSIENT_KINDS",
    "classify_failure",
    # Errors
    "NonRetryableError",
    "OperationCancelled",
    "ResilienceError",
    "RetriesExhausted",
    "WaitTimeout",
    # Cancellation
    "CancellationToken",
    # Retry
    "RetryPolicy",
    "execute_with_retry",
    "sync_retry",
    # Polling
    "PollCondition",
    "Snapshotter",
    "wait_for",
    # Fallback
    "execute_with_circuit_breaker",
    "execute_with_fallback",
    "guarded",
    # Circuit Breaker
    "CircuitBreaker",
    "CircuitBreakerRegistry",
    "CircuitState",
    "create_circuit_breaker",
]
