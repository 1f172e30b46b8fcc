"""Errors raised by the fail-loud resilience helpers."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .outcome import FailureKind


class ResilienceError(Exception):
    """Base class for resilience failures."""


class OperationCancelled(ResilienceError):
    """Raised when a cancellation token is set during a blocking wait."""


class NonRetryableError(ResilienceError):
    """Raised when a failure kind is outside the configured retry set."""

    def __init__(
        self,
        message: str,
        kind: Optional["FailureKind"] = None,
        last_exception: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.last_exception = last_exception


class RetriesExhausted(ResilienceError):
    """Raised when all retry attempts have been exhausted."""

    def __init__(
        self,
        message: str,
        attempts: int,
        last_exception: Optional[BaseException] = None,
        kind: Optional["FailureKind"] = None,
    ):
        super().__init__(message)
        self.attempts = attempts
        self.last_exception = last_exception
        self.kind = kind


class WaitTimeout(ResilienceError):
    """Raised when a polling wait reaches its deadline.

    Attributes:
        timeout: The deadline in seconds.
        last_exception: Last ignored failure seen while polling, if any.
        snapshot: Reference to the diagnostic snapshot, if one was captured.
    """

    def __init__(
        self,
        message: str,
        timeout: float,
        last_exception: Optional[BaseException] = None,
        snapshot: Optional[str] = None,
    ):
        super().__init__(message)
        self.timeout = timeout
        self.last_exception = last_exception
        self.snapshot = snapshot
