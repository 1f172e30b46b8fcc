"""Fixed-interval retry.

Retries a driven operation a bounded number of times with a fixed delay
between attempts. Only failures whose kind is in the policy's retry set
are retried; anything else is propagated immediately.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import wraps
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    FrozenSet,
    Iterable,
    Optional,
    TypeVar,
)

from .cancellation import CancellationToken
from .errors import NonRetryableError, RetriesExhausted
from .outcome import (
    TRANSIENT_KINDS,
    FailureClassifier,
    FailureKind,
    Outcome,
    classify_failure,
)

if TYPE_CHECKING:
    from config.settings import ResilienceSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_INTERVAL = 1.0


@dataclass(frozen=True)
class RetryPolicy:
    """Configuration for retry behavior.

    Attributes:
        max_attempts: Maximum number of attempts (including the first).
        interval: Fixed delay between attempts in seconds.
        retryable_kinds: Failure kinds that trigger a retry. An empty set
            retries nothing.
    """
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    interval: float = DEFAULT_RETRY_INTERVAL
    retryable_kinds: FrozenSet[FailureKind] = field(default=TRANSIENT_KINDS)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.interval < 0:
            raise ValueError(f"interval must be >= 0, got {self.interval}")
        object.__setattr__(self, "retryable_kinds", frozenset(self.retryable_kinds))

    def should_retry(self, kind: Optional[FailureKind]) -> bool:
        return kind in self.retryable_kinds

    @classmethod
    def from_settings(
        cls,
        settings: "ResilienceSettings",
        retryable_kinds: Iterable[FailureKind] = TRANSIENT_KINDS,
    ) -> "RetryPolicy":
        return cls(
            max_attempts=settings.retry_max_attempts,
            interval=settings.retry_interval,
            retryable_kinds=frozenset(retryable_kinds),
        )


def _resolve_policy(
    policy: Optional[RetryPolicy],
    max_attempts: Optional[int],
    interval: Optional[float],
    retryable_kinds: Optional[Iterable[FailureKind]],
) -> RetryPolicy:
    base = policy or RetryPolicy()
    return RetryPolicy(
        max_attempts=base.max_attempts if max_attempts is None else max_attempts,
        interval=base.interval if interval is None else interval,
        retryable_kinds=(
            base.retryable_kinds if retryable_kinds is None else frozenset(retryable_kinds)
        ),
    )


def execute_with_retry(
    operation: Callable[[], T],
    max_attempts: Optional[int] = None,
    interval: Optional[float] = None,
    retryable_kinds: Optional[Iterable[FailureKind]] = None,
    *,
    policy: Optional[RetryPolicy] = None,
    classifier: FailureClassifier = classify_failure,
    cancel_token: Optional[CancellationToken] = None,
    on_retry: Optional[Callable[[int, Exception, float], None]] = None,
) -> T:
    """Run ``operation`` with fixed-interval retries.

    Usage:
        element = execute_with_retry(
            lambda: driver.find_element(By.ID, "compose"),
            max_attempts=5,
            interval=0.5,
            retryable_kinds={FailureKind.NOT_FOUND, FailureKind.STALE},
            classifier=classify_webdriver_exception,
        )

    Args:
        operation: Zero-argument callable to invoke.
        max_attempts: Overrides the policy's attempt budget.
        interval: Overrides the policy's delay in seconds.
        retryable_kinds: Overrides the policy's retry set.
        policy: Base RetryPolicy (defaults: 3 attempts, 1s, transient kinds).
        classifier: Maps an exception to a FailureKind.
        cancel_token: Token checked before each attempt and during sleeps.
        on_retry: Callback ``(attempt, exception, delay)`` before each sleep.

    Returns:
        The first successful result.

    Raises:
        NonRetryableError: The failure kind is not in the retry set.
        RetriesExhausted: Every attempt failed with a retryable kind.
        OperationCancelled: The token was cancelled.
    """
    retry_policy = _resolve_policy(policy, max_attempts, interval, retryable_kinds)
    token = cancel_token or CancellationToken()
    name = getattr(operation, "__name__", "operation")
    last: Optional[Outcome[Any]] = None

    for attempt in range(1, retry_policy.max_attempts + 1):
        token.raise_if_cancelled()
        outcome = Outcome.capture(operation, classifier)
        if outcome.ok:
            return outcome.value

        last = outcome
        if not retry_policy.should_retry(outcome.kind):
            logger.debug(f"Non-retryable failure in {name}: {outcome.describe()}")
            raise NonRetryableError(
                f"Non-retryable failure ({outcome.kind.value}) in {name}",
                kind=outcome.kind,
                last_exception=outcome.error,
            ) from outcome.error

        logger.info(
            f"Retry {attempt}/{retry_policy.max_attempts} for {name}: {outcome.describe()}",
            extra={"extra_data": {
                "attempt": attempt,
                "max_attempts": retry_policy.max_attempts,
                "failure_kind": outcome.kind.value,
                "error": str(outcome.error),
            }},
        )

        if attempt < retry_policy.max_attempts:
            if on_retry:
                on_retry(attempt, outcome.error, retry_policy.interval)
            token.sleep(retry_policy.interval)

    logger.warning(
        f"Retry exhausted for {name} after {retry_policy.max_attempts} attempts: "
        f"{last.describe()}"
    )
    raise RetriesExhausted(
        f"Operation failed after {retry_policy.max_attempts} attempts",
        attempts=retry_policy.max_attempts,
        last_exception=last.error,
        kind=last.kind,
    ) from last.error


def sync_retry(
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    interval: float = DEFAULT_RETRY_INTERVAL,
    retryable_kinds: Iterable[FailureKind] = TRANSIENT_KINDS,
    classifier: FailureClassifier = classify_failure,
    on_retry: Optional[Callable[[int, Exception, float], None]] = None,
    policy: Optional[RetryPolicy] = None,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator form of ``execute_with_retry``.

    Usage:
        @sync_retry(max_attempts=3, interval=0.5)
        def open_compose_box():
            ...

    Args:
        Same as execute_with_retry; ``policy`` overrides the others.

    Returns:
        Decorated function with retry logic.
    """
    retry_policy = policy or RetryPolicy(
        max_attempts=max_attempts,
        interval=interval,
        retryable_kinds=frozenset(retryable_kinds),
    )

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            @wraps(func)
            def call() -> T:
                return func(*args, **kwargs)

            return execute_with_retry(
                call,
                policy=retry_policy,
                classifier=classifier,
                on_retry=on_retry,
            )

        return wrapper
    return decorator
