"""Custom exceptions for browser-driven tests."""

from typing import Optional, Tuple

from resilience.errors import ResilienceError


class BrowserTestError(ResilienceError):
    """Base exception for browser interaction failures."""


class ElementNotFoundError(BrowserTestError):
    """Element was not found on the page after retries."""

    def __init__(self, message: str, locator: Optional[Tuple[str, str]] = None):
        super().__init__(message)
        self.locator = locator


class ElementNotInteractableAfterWaitError(BrowserTestError):
    """Element could not take the action, even with a scripted fallback."""

    def __init__(self, message: str, locator: Optional[Tuple[str, str]] = None):
        super().__init__(message)
        self.locator = locator


class PageLoadTimeoutError(BrowserTestError):
    """Page failed to reach document.readyState == 'complete'."""

    pass


class BrowserSetupError(BrowserTestError):
    """Browser initialization failed."""

    pass
