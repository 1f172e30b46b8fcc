"""Failure kinds and tagged outcomes for driven operations.

A driven operation is any zero-argument callable that either returns a
value or raises. The retry and polling loops never match on exception
types directly; they capture each call into an ``Outcome`` tagged with a
``FailureKind`` and branch on that tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Optional, TypeVar

from .errors import OperationCancelled

T = TypeVar("T")


class FailureKind(Enum):
    """Classification of a failed driven operation."""
    NOT_FOUND = "not_found"                # Target not currently locatable
    STALE = "stale"                        # Reference invalidated by a page change
    NOT_INTERACTABLE = "not_interactable"  # Located but cannot take the action
    TIMEOUT = "timeout"
    OTHER = "other"


TRANSIENT_KINDS = frozenset({FailureKind.NOT_FOUND, FailureKind.STALE})

FailureClassifier = Callable[[BaseException], FailureKind]


class DrivenOperationError(Exception):
    """Failure raised by a driven operation with an explicit kind."""

    def __init__(self, kind: FailureKind, message: str = ""):
        super().__init__(message or kind.value)
        self.kind = kind


def classify_failure(exception: BaseException) -> FailureKind:
    """Default classifier.

    Args:
        exception: The exception raised by the operation.

    Returns:
        The kind carried by the exception, ``TIMEOUT`` for ``TimeoutError``,
        otherwise ``OTHER``.
    """
    kind = getattr(exception, "kind", None)
    if isinstance(kind, FailureKind):
        return kind
    if isinstance(exception, TimeoutError):
        return FailureKind.TIMEOUT
    return FailureKind.OTHER


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of a single invocation: a value or a classified failure."""
    value: Optional[T] = None
    error: Optional[Exception] = None
    kind: Optional[FailureKind] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception, kind: FailureKind) -> "Outcome[Any]":
        return cls(error=error, kind=kind)

    @classmethod
    def capture(
        cls,
        operation: Callable[[], T],
        classifier: FailureClassifier = classify_failure,
    ) -> "Outcome[T]":
        """Invoke ``operation`` once and tag the result.

        Cancellation is not a failure of the operation and is re-raised.
        """
        try:
            return cls.success(operation())
        except OperationCancelled:
            raise
        except Exception as e:
            return cls.failure(e, classifier(e))

    def describe(self) -> str:
        """Short summary used in log lines."""
        if self.ok:
            return "ok"
        return f"{self.kind.value}: {type(self.error).__name__}: {self.error}"
