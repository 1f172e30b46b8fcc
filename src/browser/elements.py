"""Element interactions with retry, fallback and wait handling.

Every helper here is a thin binding of a resilience primitive to a
WebDriver call:

- find/click: fixed-interval retry on transient lookup failures
- text/attribute reads: single best-effort call with a fallback value
- waits: polling with a screenshot on timeout
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, TypeVar

from selenium.common.exceptions import (
    ElementClickInterceptedException,
    InvalidElementStateException,
    WebDriverException,
)
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC

from config.settings import ResilienceSettings
from resilience import (
    CancellationToken,
    CircuitBreaker,
    DrivenOperationError,
    FailureKind,
    PollCondition,
    RetriesExhausted,
    RetryPolicy,
    TRANSIENT_KINDS,
    execute_with_circuit_breaker,
    execute_with_fallback,
    execute_with_retry,
    wait_for,
)

from .diagnostics import ScreenshotManager
from .exceptions import ElementNotFoundError, ElementNotInteractableAfterWaitError
from .failures import Locator, classify_webdriver_exception, describe_locator

logger = logging.getLogger(__name__)

T = TypeVar("T")

CLICK_RETRYABLE_KINDS = TRANSIENT_KINDS | {FailureKind.NOT_INTERACTABLE}
JS_CLICK_SCRIPT = "arguments[0].click();"


class ElementActions:
    """Resilient element operations bound to one driver.

    Usage:
        actions = ElementActions(driver, settings.resilience, screenshots)

        actions.click_with_retry((By.CSS_SELECTOR, ".button.button--block"))
        name = actions.get_text_with_fallback((By.CSS_SELECTOR, ".display-name"), "")
    """

    def __init__(
        self,
        driver: WebDriver,
        settings: Optional[ResilienceSettings] = None,
        screenshots: Optional[ScreenshotManager] = None,
        cancel_token: Optional[CancellationToken] = None,
    ):
        """Initialize element actions.

        Args:
            driver: Active WebDriver.
            settings: Retry and polling timing (environment defaults if None).
            screenshots: Snapshot taker used on failure paths.
            cancel_token: Token shared by every blocking wait.
        """
        resilience = settings or ResilienceSettings()
        self.driver = driver
        self.retry_policy = RetryPolicy.from_settings(resilience)
        self.poll_condition = PollCondition.from_settings(resilience)
        self.screenshots = screenshots or ScreenshotManager(driver)
        self.cancel_token = cancel_token or CancellationToken()

    def execute_with_retry(
        self,
        operation: Callable[[], T],
        max_attempts: Optional[int] = None,
        interval: Optional[float] = None,
        retryable_kinds: Optional[Iterable[FailureKind]] = None,
    ) -> T:
        """Retry an arbitrary driver operation using WebDriver classification."""
        return execute_with_retry(
            operation,
            max_attempts=max_attempts,
            interval=interval,
            retryable_kinds=retryable_kinds,
            policy=self.retry_policy,
            classifier=classify_webdriver_exception,
            cancel_token=self.cancel_token,
        )

    def find_element_with_retry(
        self,
        locator: Locator,
        max_attempts: Optional[int] = None,
        interval: Optional[float] = None,
    ) -> WebElement:
        """Find an element, retrying on not-found and stale failures.

        Args:
            locator: ``(By.<strategy>, value)`` pair.
            max_attempts: Overrides the configured attempt budget.
            interval: Overrides the configured delay in seconds.

        Returns:
            WebElement if found.

        Raises:
            ElementNotFoundError: Element not found after all attempts.
        """
        try:
            return self.execute_with_retry(
                lambda: self.driver.find_element(*locator),
                max_attempts=max_attempts,
                interval=interval,
            )
        except RetriesExhausted as e:
            self.screenshots(f"element_not_found_{describe_locator(locator)}")
            raise ElementNotFoundError(
                f"Element not found after {e.attempts} attempts: {describe_locator(locator)}",
                locator=locator,
            ) from e

    def _click_once(self, locator: Locator) -> None:
        element = self.driver.find_element(*locator)
        try:
            element.click()
            logger.info(f"Successfully clicked element: {describe_locator(locator)}")
            return
        except (InvalidElementStateException, ElementClickInterceptedException) as e:
            logger.info(f"Attempting JavaScript click after {type(e).__name__}: {e.msg}")

        try:
            self.driver.execute_script(JS_CLICK_SCRIPT, self.driver.find_element(*locator))
        except WebDriverException as js_error:
            raise DrivenOperationError(
                FailureKind.NOT_INTERACTABLE,
                f"JavaScript click failed on {describe_locator(locator)}: {js_error.msg}",
            ) from js_error
        logger.info(f"Successfully clicked element using JavaScript: {describe_locator(locator)}")

    def click_with_retry(
        self,
        locator: Locator,
        max_attempts: Optional[int] = None,
        interval: Optional[float] = None,
    ) -> None:
        """Click an element, falling back to a JavaScript click.

        A native click that is refused (not interactable, intercepted) is
        followed by a scripted click in the same attempt; only when both
        fail does the attempt count as failed.

        Raises:
            ElementNotInteractableAfterWaitError: Every attempt failed.
        """
        try:
            self.execute_with_retry(
                lambda: self._click_once(locator),
                max_attempts=max_attempts,
                interval=interval,
                retryable_kinds=CLICK_RETRYABLE_KINDS,
            )
        except RetriesExhausted as e:
            self.screenshots(f"click_failed_{describe_locator(locator)}")
            raise ElementNotInteractableAfterWaitError(
                f"Failed to click element after {e.attempts} attempts: {describe_locator(locator)}",
                locator=locator,
            ) from e

    def get_text_with_fallback(self, locator: Locator, fallback_text: str) -> str:
        return execute_with_fallback(
            lambda: self.driver.find_element(*locator).text,
            fallback_text,
        )

    def get_attribute_with_fallback(
        self,
        locator: Locator,
        attribute: str,
        fallback_value: Optional[str],
    ) -> Optional[str]:
        """Read an attribute; a missing element or attribute yields the fallback."""
        def read() -> Optional[str]:
            value = self.driver.find_element(*locator).get_attribute(attribute)
            return value if value is not None else fallback_value

        return execute_with_fallback(read, fallback_value)

    def wait_for(
        self,
        condition: Callable[[WebDriver], T],
        screenshot_name: str,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> T:
        """Poll a driver condition (e.g. an ``expected_conditions`` factory result).

        Raises:
            WaitTimeout: Condition not met in time; a screenshot is taken first.
        """
        return wait_for(
            lambda: condition(self.driver),
            timeout=timeout,
            poll_interval=poll_interval,
            condition=self.poll_condition,
            classifier=classify_webdriver_exception,
            snapshot=self.screenshots,
            snapshot_label=screenshot_name,
            cancel_token=self.cancel_token,
        )

    def wait_for_element(
        self,
        locator: Locator,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> WebElement:
        """Wait for an element to be present in the DOM."""
        return self.wait_for(
            EC.presence_of_element_located(locator),
            f"wait_timeout_{describe_locator(locator)}",
            timeout=timeout,
            poll_interval=poll_interval,
        )

    def wait_for_element_to_be_clickable(
        self,
        locator: Locator,
        timeout: Optional[float] = None,
    ) -> WebElement:
        """Wait for an element to be visible and enabled."""
        return self.wait_for(
            EC.element_to_be_clickable(locator),
            f"wait_clickable_timeout_{describe_locator(locator)}",
            timeout=timeout,
        )

    def execute_with_circuit_breaker(
        self,
        operation: Callable[[], T],
        breaker: CircuitBreaker,
        fallback_value: Any,
    ) -> T:
        return execute_with_circuit_breaker(operation, breaker, fallback_value)
