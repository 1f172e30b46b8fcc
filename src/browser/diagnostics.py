"""Failure diagnostics: screenshots and exception reports.

``ScreenshotManager`` is a resilience ``Snapshotter``: polling waits call
it with a label when they time out. Capturing is best-effort and never
raises.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver

logger = logging.getLogger(__name__)

DEFAULT_SCREENSHOT_DIR = "test-screenshots"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def sanitize_label(label: str) -> str:
    """Replace every non-alphanumeric character with an underscore."""
    return re.sub(r"[^a-zA-Z0-9]", "_", label)


class ScreenshotManager:
    """Save PNG screenshots named ``<label>_<timestamp>.png``.

    Usage:
        screenshots = ScreenshotManager(driver, settings.browser.screenshot_dir)
        path = screenshots("login_failed")
    """

    def __init__(
        self,
        driver: Optional[WebDriver],
        directory: Union[str, Path] = DEFAULT_SCREENSHOT_DIR,
    ):
        self.driver = driver
        self.directory = Path(directory)

    def __call__(self, label: str) -> Optional[str]:
        return self.take(label)

    def take(self, label: str) -> Optional[str]:
        """Capture the current browser window.

        Args:
            label: Base name for the file.

        Returns:
            Path to the saved screenshot, or None if capture failed.
        """
        if self.driver is None:
            logger.warning("Cannot take screenshot: no active driver")
            return None

        timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)
        destination = self.directory / f"{sanitize_label(label)}_{timestamp}.png"

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            saved = self.driver.save_screenshot(str(destination))
        except (OSError, WebDriverException) as e:
            logger.warning(f"Failed to take screenshot '{label}': {e}")
            return None

        if not saved:
            logger.warning(f"Failed to save screenshot to {destination}")
            return None

        logger.info(f"Screenshot saved to: {destination}")
        return str(destination)


def log_exception(driver: Optional[WebDriver], exception: BaseException, context: str) -> None:
    """Log an exception with the browser's current URL and title."""
    details = {
        "context": context,
        "exception_type": type(exception).__name__,
        "exception_message": str(exception),
    }

    if driver is not None:
        try:
            details["current_url"] = driver.current_url
            details["page_title"] = driver.title
        except WebDriverException as e:
            details["page_state_error"] = str(e)

    logger.error(
        f"{context}: {type(exception).__name__}: {exception}",
        exc_info=(type(exception), exception, exception.__traceback__),
        extra={"extra_data": details},
    )
