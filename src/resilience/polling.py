"""Polling waiter.

Re-evaluates a predicate at a fixed interval until it yields a truthy
result or a deadline passes. Transient "not yet available" failures are
swallowed while polling; on timeout a diagnostic snapshot is taken before
``WaitTimeout`` is raised.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Callable,
    FrozenSet,
    Iterable,
    Optional,
    TypeVar,
)

from .cancellation import CancellationToken
from .errors import NonRetryableError, WaitTimeout
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

DEFAULT_TIMEOUT = 10.0
DEFAULT_POLL_INTERVAL = 0.5
MIN_POLL_INTERVAL = 0.001

# Takes a label, returns a reference to the captured artifact (or None)
Snapshotter = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class PollCondition:
    """Timing for a bounded wait.

    Attributes:
        timeout: Deadline in seconds.
        poll_interval: Seconds between evaluations (at least 1ms).
        ignored_kinds: Failure kinds treated as "not yet" while polling.
    """
    timeout: float = DEFAULT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    ignored_kinds: FrozenSet[FailureKind] = field(default=TRANSIENT_KINDS)

    def __post_init__(self) -> None:
        if self.timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout}")
        if self.poll_interval < MIN_POLL_INTERVAL:
            raise ValueError(
                f"poll_interval must be >= {MIN_POLL_INTERVAL}s, got {self.poll_interval}"
            )
        if self.poll_interval > self.timeout:
            logger.warning(
                f"poll_interval {self.poll_interval}s exceeds timeout {self.timeout}s"
            )
        object.__setattr__(self, "ignored_kinds", frozenset(self.ignored_kinds))

    @classmethod
    def from_settings(cls, settings: "ResilienceSettings") -> "PollCondition":
        return cls(timeout=settings.wait_timeout, poll_interval=settings.poll_interval)


def _take_snapshot(snapshot: Optional[Snapshotter], label: str) -> Optional[str]:
    if snapshot is None:
        return None
    try:
        return snapshot(label)
    except Exception as e:
        logger.warning(f"Failed to capture snapshot '{label}': {e}")
        return None


def wait_for(
    predicate: Callable[[], T],
    timeout: Optional[float] = None,
    poll_interval: Optional[float] = None,
    *,
    condition: Optional[PollCondition] = None,
    ignored_kinds: Optional[Iterable[FailureKind]] = None,
    classifier: FailureClassifier = classify_failure,
    snapshot: Optional[Snapshotter] = None,
    snapshot_label: str = "wait_timeout",
    message: Optional[str] = None,
    cancel_token: Optional[CancellationToken] = None,
    clock: Callable[[], float] = time.monotonic,
) -> T:
    """Poll ``predicate`` until it returns a truthy value.

    Args:
        predicate: Zero-argument callable evaluated once per tick.
        timeout: Overrides the condition's deadline in seconds.
        poll_interval: Overrides the condition's interval in seconds.
        condition: Base PollCondition (defaults: 10s, 500ms, transient kinds).
        ignored_kinds: Overrides the kinds swallowed while polling.
        classifier: Maps an exception to a FailureKind.
        snapshot: Called with ``snapshot_label`` on timeout.
        snapshot_label: Label for the diagnostic snapshot.
        message: Extra context for the timeout error.
        cancel_token: Token checked each tick and during sleeps.
        clock: Monotonic time source in seconds.

    Returns:
        The first truthy result of ``predicate``.

    Raises:
        WaitTimeout: The deadline passed without a truthy result.
        NonRetryableError: The predicate failed with a kind not ignored.
        OperationCancelled: The token was cancelled.
    """
    base = condition or PollCondition()
    poll = PollCondition(
        timeout=base.timeout if timeout is None else timeout,
        poll_interval=base.poll_interval if poll_interval is None else poll_interval,
        ignored_kinds=base.ignored_kinds if ignored_kinds is None else frozenset(ignored_kinds),
    )
    token = cancel_token or CancellationToken()
    start = clock()
    deadline = start + poll.timeout
    last_error: Optional[Exception] = None
    ticks = 0

    while True:
        token.raise_if_cancelled()
        ticks += 1
        outcome = Outcome.capture(predicate, classifier)

        if outcome.ok:
            if outcome.value:
                return outcome.value
        elif outcome.kind in poll.ignored_kinds:
            last_error = outcome.error
        else:
            raise NonRetryableError(
                f"Wait aborted by {outcome.kind.value} failure: {outcome.error}",
                kind=outcome.kind,
                last_exception=outcome.error,
            ) from outcome.error

        now = clock()
        if now >= deadline:
            break
        token.sleep(poll.poll_interval)

    elapsed = clock() - start
    snapshot_ref = _take_snapshot(snapshot, snapshot_label)
    detail = f": {message}" if message else ""
    logger.warning(
        f"Timed out after {elapsed:.2f}s waiting for condition{detail}",
        extra={"extra_data": {
            "timeout": poll.timeout,
            "poll_interval": poll.poll_interval,
            "ticks": ticks,
            "snapshot": snapshot_ref,
        }},
    )
    raise WaitTimeout(
        f"Timed out after {poll.timeout}s waiting for condition{detail}",
        timeout=poll.timeout,
        last_exception=last_error,
        snapshot=snapshot_ref,
    ) from last_error
