"""Pytest configuration and fixtures for test suite."""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from resilience.cancellation import CancellationToken  # noqa: E402


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingToken(CancellationToken):
    """Cancellation token whose sleeps advance a FakeClock instead of blocking."""

    def __init__(self, clock: FakeClock):
        super().__init__()
        self.clock = clock
        self.sleeps = []

    def sleep(self, seconds: float) -> None:
        self.raise_if_cancelled()
        self.sleeps.append(seconds)
        self.clock.advance(seconds)


@pytest.fixture
def clock():
    """Provide a fake clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def token(clock):
    """Provide a token that records sleeps on the fake clock."""
    return RecordingToken(clock)


@pytest.fixture
def mock_driver():
    """Provide a mock WebDriver for testing."""
    driver = MagicMock()
    driver.current_url = "https://mastodon.social/home"
    driver.title = "Home - Mastodon"
    driver.save_screenshot.return_value = True
    return driver


@pytest.fixture
def fast_settings():
    """Resilience settings with short timings."""
    from config.settings import ResilienceSettings
    return ResilienceSettings(
        retry_max_attempts=3,
        retry_interval=0.01,
        wait_timeout=0.2,
        poll_interval=0.01,
        circuit_failure_threshold=3,
        circuit_reset_timeout=5.0,
    )
