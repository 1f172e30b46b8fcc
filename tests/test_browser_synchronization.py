"""Tests for Synchronizer and Mastodon-specific waits."""

from unittest.mock import MagicMock, PropertyMock

import pytest
from selenium.common.exceptions import NoSuchElementException, WebDriverException
from selenium.webdriver.common.by import By

from browser.exceptions import PageLoadTimeoutError
from browser.mastodon import HOME_PATH, MODAL, STATUS, TIMELINE, MastodonWaits
from browser.synchronization import READY_STATE_SCRIPT, Synchronizer, page_is_loaded
from resilience import CancellationToken, NonRetryableError, OperationCancelled, WaitTimeout

SHORT = 0.05


def visible_element(text=""):
    element = MagicMock()
    element.is_displayed.return_value = True
    element.is_enabled.return_value = True
    element.text = text
    return element


@pytest.fixture
def sync(mock_driver, fast_settings):
    return Synchronizer(mock_driver, fast_settings)


@pytest.fixture
def waits(sync):
    return MastodonWaits(sync)


class TestSynchronizer:
    """Tests for Synchronizer waits."""

    def test_implicit_wait(self, sync, mock_driver):
        """set and reset map onto implicitly_wait."""
        sync.set_implicit_wait(5)
        sync.reset_implicit_wait()
        assert [c.args for c in mock_driver.implicitly_wait.call_args_list] == [(5,), (0,)]

    def test_until_passes_driver(self, sync, mock_driver):
        """Conditions receive the driver."""
        condition = MagicMock(return_value="ok")
        assert sync.until(condition) == "ok"
        condition.assert_called_once_with(mock_driver)

    def test_wait_for_element_visible(self, sync, mock_driver):
        """Polls through not-found until the element shows."""
        element = visible_element()
        mock_driver.find_element.side_effect = [NoSuchElementException("not yet"), element]

        assert sync.wait_for_element_visible(TIMELINE) is element

    def test_wait_for_element_present_timeout(self, sync, mock_driver):
        """Raises WaitTimeout when the element never appears."""
        mock_driver.find_element.side_effect = NoSuchElementException("missing")
        with pytest.raises(WaitTimeout):
            sync.wait_for_element_present(TIMELINE, SHORT)

    def test_wait_for_element_clickable(self, sync, mock_driver):
        """Returns the element once visible and enabled."""
        element = visible_element()
        mock_driver.find_element.return_value = element
        assert sync.wait_for_element_clickable((By.TAG_NAME, "textarea")) is element

    def test_wait_for_element_invisible(self, sync, mock_driver):
        """A missing element counts as invisible."""
        mock_driver.find_element.side_effect = NoSuchElementException("gone")
        assert sync.wait_for_element_invisible(MODAL) is True

    def test_wait_for_text_present(self, sync, mock_driver):
        """Matches a substring of the element text."""
        mock_driver.find_element.return_value = visible_element("Hello from the fediverse")
        assert sync.wait_for_text_present(STATUS, "fediverse") is True

    def test_wait_for_url_contains(self, sync, mock_driver):
        """Checks the current URL."""
        assert sync.wait_for_url_contains(HOME_PATH) is True

    def test_wait_for_page_load(self, sync, mock_driver):
        """Polls document.readyState until complete."""
        mock_driver.execute_script.side_effect = ["loading", "interactive", "complete"]

        assert sync.wait_for_page_load() is True
        mock_driver.execute_script.assert_called_with(READY_STATE_SCRIPT)

    def test_wait_for_page_load_timeout(self, sync, mock_driver):
        """A page stuck loading raises PageLoadTimeoutError."""
        mock_driver.execute_script.return_value = "loading"

        with pytest.raises(PageLoadTimeoutError) as exc_info:
            sync.wait_for_page_load(SHORT)

        assert isinstance(exc_info.value.__cause__, WaitTimeout)

    def test_page_is_loaded(self, mock_driver):
        """Only 'complete' counts as loaded."""
        mock_driver.execute_script.return_value = "interactive"
        assert page_is_loaded(mock_driver) is False

    def test_fluent_wait(self, sync):
        """Custom functions are polled with the given interval."""
        function = MagicMock(side_effect=[NoSuchElementException("x"), False, "done"])
        assert sync.fluent_wait(function, timeout=1, poll_interval=0.01) == "done"
        assert function.call_count == 3

    def test_fluent_wait_aborts_on_dead_session(self, sync):
        """Non-transient driver failures abort the wait."""
        function = MagicMock(side_effect=WebDriverException("session deleted"))
        with pytest.raises(NonRetryableError):
            sync.fluent_wait(function, timeout=1, poll_interval=0.01)

    def test_screenshot_on_timeout(self, mock_driver, fast_settings):
        """The snapshotter receives the wait's label."""
        screenshots = MagicMock(return_value="shot.png")
        sync = Synchronizer(mock_driver, fast_settings, screenshots)

        with pytest.raises(WaitTimeout) as exc_info:
            sync.wait_for_url_contains("/explore", SHORT)

        screenshots.assert_called_once_with("url_timeout_/explore")
        assert exc_info.value.snapshot == "shot.png"

    def test_safe_sleep_honours_cancellation(self, mock_driver, fast_settings):
        """A cancelled token interrupts safe_sleep."""
        token = CancellationToken()
        token.cancel()
        sync = Synchronizer(mock_driver, fast_settings, cancel_token=token)

        with pytest.raises(OperationCancelled):
            sync.safe_sleep(10)


class TestMastodonWaits:
    """Tests for Mastodon boolean waits."""

    def test_timeline_loaded(self, waits, mock_driver):
        """Visible timeline returns True."""
        mock_driver.find_element.return_value = visible_element()
        assert waits.wait_for_timeline_load(SHORT) is True

    def test_timeline_timeout_returns_false(self, waits, mock_driver):
        """Timeouts become False instead of raising."""
        mock_driver.find_element.side_effect = NoSuchElementException("missing")
        assert waits.wait_for_timeline_load(SHORT) is False

    def test_post_published_via_status(self, waits, mock_driver):
        """A status in the timeline counts as published."""
        mock_driver.find_element.side_effect = NoSuchElementException("no toast")
        mock_driver.find_elements.return_value = [MagicMock()]
        assert waits.wait_for_post_published(SHORT) is True

    def test_post_published_via_notification(self, waits, mock_driver):
        """The success toast counts as published."""
        mock_driver.find_element.return_value = visible_element()
        mock_driver.find_elements.return_value = []
        assert waits.wait_for_post_published(SHORT) is True

    def test_post_not_published(self, waits, mock_driver):
        """Neither signal means False."""
        mock_driver.find_element.side_effect = NoSuchElementException("no toast")
        mock_driver.find_elements.return_value = []
        assert waits.wait_for_post_published(SHORT) is False

    def test_login_complete(self, waits, mock_driver):
        """Landing on /home is a successful login."""
        assert waits.wait_for_login_complete(SHORT) is True

    def test_login_error(self, waits, mock_driver):
        """A login error settles the wait but returns False."""
        mock_driver.current_url = "https://mastodon.social/auth/sign_in"
        mock_driver.find_elements.return_value = [MagicMock()]
        assert waits.wait_for_login_complete(SHORT) is False

    def test_login_session_lost_after_settling(self, fast_settings):
        """A driver failure on the final URL check is False, not an error."""
        driver = MagicMock()
        type(driver).current_url = PropertyMock(side_effect=[
            "https://mastodon.social/home",
            WebDriverException("session deleted"),
        ])
        waits = MastodonWaits(Synchronizer(driver, fast_settings))

        assert waits.wait_for_login_complete(SHORT) is False

    def test_login_never_settles(self, waits, mock_driver):
        """Neither home nor error within the time limit is False."""
        mock_driver.current_url = "https://mastodon.social/auth/sign_in"
        mock_driver.find_elements.return_value = []
        assert waits.wait_for_login_complete(SHORT) is False

    @pytest.mark.parametrize("method", [
        "wait_for_notification",
        "wait_for_search_results",
        "wait_for_modal_dialog",
        "wait_for_messages_page_load",
        "wait_for_image_upload_complete",
    ])
    def test_visibility_waits(self, waits, mock_driver, method):
        """Visibility-based waits report True when shown and False when absent."""
        mock_driver.find_element.return_value = visible_element()
        assert getattr(waits, method)(SHORT) is True

        mock_driver.find_element.side_effect = NoSuchElementException("missing")
        assert getattr(waits, method)(SHORT) is False

    def test_modal_disappears(self, waits, mock_driver):
        """A removed modal is gone."""
        mock_driver.find_element.side_effect = NoSuchElementException("closed")
        assert waits.wait_for_modal_dialog_to_disappear(SHORT) is True

    def test_modal_stays_open(self, waits, mock_driver):
        """A modal still visible is False."""
        mock_driver.find_element.return_value = visible_element()
        assert waits.wait_for_modal_dialog_to_disappear(SHORT) is False

    def test_cancellation_is_not_converted(self, mock_driver, fast_settings):
        """Cancellation escapes the boolean conversion."""
        token = CancellationToken()
        token.cancel()
        waits = MastodonWaits(Synchronizer(mock_driver, fast_settings, cancel_token=token))

        with pytest.raises(OperationCancelled):
            waits.wait_for_timeline_load(SHORT)
