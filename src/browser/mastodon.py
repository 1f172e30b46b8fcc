"""Mastodon-specific waits.

Each wait answers "did the UI reach this state in time?" with a boolean
instead of raising, so tests can assert on the result directly.
"""

from __future__ import annotations

import logging
from typing import Callable

from selenium.common.exceptions import WebDriverException
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.support import expected_conditions as EC

from resilience import OperationCancelled, ResilienceError

from .synchronization import Synchronizer

logger = logging.getLogger(__name__)

TIMELINE = (By.XPATH, "//div[contains(@class, 'item-list')]")
SUCCESS_NOTIFICATION = (By.XPATH, "//div[contains(@class, 'notification-success')]")
STATUS = (By.XPATH, "//div[contains(@class, 'status')]")
LOGIN_ERROR = (By.XPATH, "//div[contains(@class, 'error')]")
NOTIFICATION = (By.XPATH, "//div[contains(@class, 'notification')]")
SEARCH_RESULTS = (By.XPATH, "//div[contains(@class, 'search-results')]")
MODAL = (By.XPATH, "//div[contains(@class, 'modal')]")
CONVERSATIONS = (By.XPATH, "//div[contains(@class, 'conversations-list')]")
MEDIA_GALLERY = (By.XPATH, "//div[contains(@class, 'media-gallery')]")

HOME_PATH = "/home"


class MastodonWaits:
    """Boolean waits for common Mastodon UI states.

    Usage:
        waits = MastodonWaits(Synchronizer(driver, settings.resilience))
        assert waits.wait_for_timeline_load(15), "Home timeline never rendered"
    """

    def __init__(self, synchronizer: Synchronizer):
        self.sync = synchronizer

    @property
    def driver(self) -> WebDriver:
        return self.sync.driver

    def _reached(self, description: str, wait: Callable[[], object]) -> bool:
        try:
            wait()
            return True
        except OperationCancelled:
            raise
        except ResilienceError as e:
            logger.info(f"Mastodon wait for {description} failed: {e}")
            return False

    def wait_for_timeline_load(self, seconds: float) -> bool:
        return self._reached(
            "timeline",
            lambda: self.sync.wait_for_element_visible(TIMELINE, seconds),
        )

    def wait_for_post_published(self, seconds: float) -> bool:
        """Wait for the success toast or at least one status in the timeline."""
        return self._reached(
            "published post",
            lambda: self.sync.until(
                EC.any_of(
                    EC.visibility_of_element_located(SUCCESS_NOTIFICATION),
                    lambda driver: len(driver.find_elements(*STATUS)) > 0,
                ),
                seconds,
                label="post_published_timeout",
            ),
        )

    def wait_for_login_complete(self, seconds: float) -> bool:
        """Wait for the home page or a login error; True only for the home page."""
        def settled(driver: WebDriver) -> bool:
            return HOME_PATH in driver.current_url or len(driver.find_elements(*LOGIN_ERROR)) > 0

        if not self._reached(
            "login",
            lambda: self.sync.until(settled, seconds, label="login_timeout"),
        ):
            return False

        try:
            return HOME_PATH in self.driver.current_url
        except WebDriverException as e:
            logger.info(f"Mastodon wait for login failed reading the URL: {e.msg}")
            return False

    def wait_for_notification(self, seconds: float) -> bool:
        return self._reached(
            "notification",
            lambda: self.sync.wait_for_element_visible(NOTIFICATION, seconds),
        )

    def wait_for_search_results(self, seconds: float) -> bool:
        return self._reached(
            "search results",
            lambda: self.sync.wait_for_element_visible(SEARCH_RESULTS, seconds),
        )

    def wait_for_modal_dialog(self, seconds: float) -> bool:
        return self._reached(
            "modal dialog",
            lambda: self.sync.wait_for_element_visible(MODAL, seconds),
        )

    def wait_for_modal_dialog_to_disappear(self, seconds: float) -> bool:
        return self._reached(
            "modal dialog to close",
            lambda: self.sync.wait_for_element_invisible(MODAL, seconds),
        )

    def wait_for_messages_page_load(self, seconds: float) -> bool:
        return self._reached(
            "conversations list",
            lambda: self.sync.wait_for_element_visible(CONVERSATIONS, seconds),
        )

    def wait_for_image_upload_complete(self, seconds: float) -> bool:
        return self._reached(
            "media gallery",
            lambda: self.sync.wait_for_element_visible(MEDIA_GALLERY, seconds),
        )
