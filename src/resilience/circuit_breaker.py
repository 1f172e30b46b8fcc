"""Circuit Breaker pattern for unreliable browser interactions.

Tracks consecutive failures of a protected dependency. Once the failure
threshold is reached the circuit opens and callers skip the dependency
until more than ``reset_timeout`` has passed since the last failure. The circuit has
two states:
- CLOSED: Normal operation, calls pass through
- OPEN: Dependency is failing, calls are skipped

There is no probing half-open state: the first ``is_open()`` query after
the timeout resets the failure count and reports CLOSED.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from threading import Lock
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

if TYPE_CHECKING:
    from config.settings import ResilienceSettings

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_THRESHOLD = 3
DEFAULT_RESET_TIMEOUT = 5.0


class CircuitState(Enum):
    """Circuit breaker states."""
    CLOSED = "closed"  # Normal operation
    OPEN = "open"      # Failing, skip calls


class CircuitBreaker:
    """Failure counter with a time-based cool-down.

    Usage:
        breaker = CircuitBreaker(failure_threshold=3, reset_timeout=5.0)

        if not breaker.is_open():
            try:
                result = read_trending_tags()
                breaker.record_success()
            except Exception:
                breaker.record_failure()

    State transitions:
        CLOSED -> OPEN: failure_threshold failures recorded
        OPEN -> CLOSED: more than reset_timeout elapsed (on the next is_open query)
        any -> CLOSED: record_success or reset

    A breaker guards one dependency and is owned by whoever constructed it.
    Its counters are protected by a lock, so sharing one instance between
    threads is safe.
    """

    def __init__(
        self,
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
        reset_timeout: float = DEFAULT_RESET_TIMEOUT,
        *,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize circuit breaker.

        Args:
            failure_threshold: Failures before the circuit opens.
            reset_timeout: Seconds after the last failure before it closes.
            name: Identifier used in logs and stats.
            clock: Time source in seconds.
        """
        if failure_threshold < 1:
            raise ValueError(f"failure_threshold must be >= 1, got {failure_threshold}")
        if reset_timeout < 0:
            raise ValueError(f"reset_timeout must be >= 0, got {reset_timeout}")

        self.name = name
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self._clock = clock

        self._failure_count = 0
        self._last_failure_time: Optional[float] = None
        self._lock = Lock()

    @property
    def failure_count(self) -> int:
        """Get current failure count."""
        return self._failure_count

    @property
    def last_failure_time(self) -> Optional[float]:
        return self._last_failure_time

    @property
    def state(self) -> CircuitState:
        """Get current circuit state (may trigger the lazy reset)."""
        return CircuitState.OPEN if self.is_open() else CircuitState.CLOSED

    def is_open(self) -> bool:
        """Check whether calls should be skipped.

        The circuit stays open while at most ``reset_timeout`` has elapsed
        since the last failure. Once more time has passed, the failure
        count is reset and False is returned.
        """
        with self._lock:
            return self._is_open_locked()

    def _is_open_locked(self) -> bool:
        if self._failure_count < self.failure_threshold:
            return False

        elapsed = self._clock() - (self._last_failure_time or 0.0)
        if elapsed > self.reset_timeout:
            logger.info(
                f"Circuit breaker '{self.name}' timeout elapsed after "
                f"{elapsed:.2f}s, resetting to CLOSED"
            )
            self._failure_count = 0
            return False
        return True

    def record_success(self) -> None:
        """Record a successful operation."""
        with self._lock:
            self._failure_count = 0

    def record_failure(self) -> None:
        """Record a failed operation."""
        with self._lock:
            self._failure_count += 1
            self._last_failure_time = self._clock()
            if self._failure_count == self.failure_threshold:
                logger.warning(
                    f"Circuit breaker '{self.name}' OPENED after "
                    f"{self._failure_count} failures"
                )

    def reset(self) -> None:
        """Reset circuit breaker to closed state."""
        with self._lock:
            self._failure_count = 0
            self._last_failure_time = None
        logger.info(f"Circuit breaker '{self.name}' reset")

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            is_open = self._is_open_locked()
            failure_count = self._failure_count
        return {
            "state": (CircuitState.OPEN if is_open else CircuitState.CLOSED).value,
            "failure_count": failure_count,
            "failure_threshold": self.failure_threshold,
            "reset_timeout": self.reset_timeout,
            "is_open": is_open,
        }


def create_circuit_breaker(
    failure_threshold: int,
    reset_timeout_ms: int,
    name: str = "default",
) -> CircuitBreaker:
    """Create a circuit breaker with the reset timeout in milliseconds."""
    return CircuitBreaker(
        failure_threshold=failure_threshold,
        reset_timeout=reset_timeout_ms / 1000.0,
        name=name,
    )


class CircuitBreakerRegistry:
    """Named circuit breakers, one per protected dependency.

    The registry is constructed explicitly and handed to whoever needs it;
    there is no module-level instance.

    Usage:
        registry = CircuitBreakerRegistry.from_settings(settings.resilience)

        breaker = registry.get("explore_trending")
        stats = registry.get_all_stats()
    """

    def __init__(
        self,
        failure_threshold: int = DEFAULT_FAILURE_THRESHOLD,
        reset_timeout: float = DEFAULT_RESET_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._breakers: Dict[str, CircuitBreaker] = {}
        self._failure_threshold = failure_threshold
        self._reset_timeout = reset_timeout
        self._clock = clock
        self._lock = Lock()

    @classmethod
    def from_settings(cls, settings: "ResilienceSettings") -> "CircuitBreakerRegistry":
        return cls(
            failure_threshold=settings.circuit_failure_threshold,
            reset_timeout=settings.circuit_reset_timeout,
        )

    def get(
        self,
        name: str,
        failure_threshold: Optional[int] = None,
        reset_timeout: Optional[float] = None,
    ) -> CircuitBreaker:
        """Get or create a circuit breaker.

        Args:
            name: Circuit breaker name.
            failure_threshold: Used only when the breaker is created.
            reset_timeout: Used only when the breaker is created.

        Returns:
            CircuitBreaker instance.
        """
        with self._lock:
            if name not in self._breakers:
                self._breakers[name] = CircuitBreaker(
                    failure_threshold=(
                        self._failure_threshold if failure_threshold is None else failure_threshold
                    ),
                    reset_timeout=(
                        self._reset_timeout if reset_timeout is None else reset_timeout
                    ),
                    name=name,
                    clock=self._clock,
                )
            return self._breakers[name]

    def remove(self, name: str) -> None:
        with self._lock:
            self._breakers.pop(name, None)

    def reset_all(self) -> None:
        """Reset all circuit breakers."""
        with self._lock:
            breakers = list(self._breakers.values())
        for breaker in breakers:
            breaker.reset()

    def get_all_stats(self) -> Dict[str, Dict[str, Any]]:
        """Get statistics for all circuit breakers.

        Returns:
            Dict mapping names to stats.
        """
        with self._lock:
            breakers = dict(self._breakers)
        return {name: breaker.stats() for name, breaker in breakers.items()}
