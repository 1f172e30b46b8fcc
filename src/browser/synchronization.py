"""Synchronization helpers for WebDriver.

Explicit waits are built on ``resilience.wait_for`` with Selenium's
``expected_conditions`` as predicates, so every wait shares the same
polling, transient-failure and timeout semantics.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC

from config.settings import ResilienceSettings
from resilience import CancellationToken, PollCondition, WaitTimeout, wait_for

from .diagnostics import ScreenshotManager
from .exceptions import PageLoadTimeoutError
from .failures import Locator, classify_webdriver_exception, describe_locator

logger = logging.getLogger(__name__)

T = TypeVar("T")

READY_STATE_SCRIPT = "return document.readyState"


def page_is_loaded(driver: WebDriver) -> bool:
    return driver.execute_script(READY_STATE_SCRIPT) == "complete"


class Synchronizer:
    """Explicit and implicit waits for one driver.

    Usage:
        sync = Synchronizer(driver, settings.resilience)
        sync.wait_for_page_load(30)
        compose = sync.wait_for_element_clickable((By.CSS_SELECTOR, "textarea"), 10)
    """

    def __init__(
        self,
        driver: WebDriver,
        settings: Optional[ResilienceSettings] = None,
        screenshots: Optional[ScreenshotManager] = None,
        cancel_token: Optional[CancellationToken] = None,
    ):
        self.driver = driver
        self.poll_condition = PollCondition.from_settings(settings or ResilienceSettings())
        self.screenshots = screenshots
        self.cancel_token = cancel_token or CancellationToken()

    def set_implicit_wait(self, seconds: float) -> None:
        self.driver.implicitly_wait(seconds)

    def reset_implicit_wait(self) -> None:
        self.driver.implicitly_wait(0)

    def until(
        self,
        condition: Callable[[WebDriver], T],
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        label: str = "wait_timeout",
    ) -> T:
        """Poll ``condition(driver)`` until it returns a truthy value.

        Raises:
            WaitTimeout: Condition not met within ``timeout`` seconds.
        """
        return wait_for(
            lambda: condition(self.driver),
            timeout=timeout,
            poll_interval=poll_interval,
            condition=self.poll_condition,
            classifier=classify_webdriver_exception,
            snapshot=self.screenshots,
            snapshot_label=label,
            cancel_token=self.cancel_token,
        )

    def wait_for_element_visible(self, locator: Locator, timeout: Optional[float] = None) -> WebElement:
        return self.until(
            EC.visibility_of_element_located(locator),
            timeout,
            label=f"visible_timeout_{describe_locator(locator)}",
        )

    def wait_for_element_clickable(self, locator: Locator, timeout: Optional[float] = None) -> WebElement:
        return self.until(
            EC.element_to_be_clickable(locator),
            timeout,
            label=f"clickable_timeout_{describe_locator(locator)}",
        )

    def wait_for_element_present(self, locator: Locator, timeout: Optional[float] = None) -> WebElement:
        return self.until(
            EC.presence_of_element_located(locator),
            timeout,
            label=f"present_timeout_{describe_locator(locator)}",
        )

    def wait_for_element_invisible(self, locator: Locator, timeout: Optional[float] = None) -> bool:
        self.until(
            EC.invisibility_of_element_located(locator),
            timeout,
            label=f"invisible_timeout_{describe_locator(locator)}",
        )
        return True

    def wait_for_text_present(self, locator: Locator, text: str, timeout: Optional[float] = None) -> bool:
        return self.until(
            EC.text_to_be_present_in_element(locator, text),
            timeout,
            label=f"text_timeout_{describe_locator(locator)}",
        )

    def wait_for_url_contains(self, text: str, timeout: Optional[float] = None) -> bool:
        return self.until(EC.url_contains(text), timeout, label=f"url_timeout_{text}")

    def wait_for_page_load(self, timeout: Optional[float] = None) -> bool:
        """Wait for ``document.readyState`` to be ``complete``.

        Raises:
            PageLoadTimeoutError: The page did not finish loading in time.
        """
        try:
            return self.until(page_is_loaded, timeout, label="page_load_timeout")
        except WaitTimeout as e:
            raise PageLoadTimeoutError(f"Page did not finish loading: {e}") from e

    def fluent_wait(
        self,
        function: Callable[[WebDriver], T],
        timeout: float,
        poll_interval: float,
    ) -> T:
        """Poll a custom function, ignoring not-found and stale failures."""
        return self.until(function, timeout, poll_interval, label="fluent_wait_timeout")

    def safe_sleep(self, seconds: float) -> None:
        """Hard pause that still honours cancellation."""
        self.cancel_token.sleep(seconds)
