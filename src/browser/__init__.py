"""Selenium bindings for the resilience layer."""

from .diagnostics import ScreenshotManager, log_exception, sanitize_label
from .elements import ElementActions
from .exceptions import (
    BrowserSetupError,
    BrowserTestError,
    ElementNotFoundError,
    ElementNotInteractableAfterWaitError,
    PageLoadTimeoutError,
)
from .factory import create_driver
from .failures import Locator, classify_webdriver_exception, describe_locator
from .mastodon import MastodonWaits
from .synchronization import Synchronizer

__all__ = [
    "ElementActions",
    "MastodonWaits",
    "Synchronizer",
    "ScreenshotManager",
    "create_driver",
    "log_exception",
    "sanitize_label",
    "Locator",
    "classify_webdriver_exception",
    "describe_locator",
    "BrowserTestError",
    "BrowserSetupError",
    "ElementNotFoundError",
    "ElementNotInteractableAfterWaitError",
    "PageLoadTimeoutError",
]
