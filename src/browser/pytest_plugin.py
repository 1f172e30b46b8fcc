"""pytest plugin for browser-driven tests.

Installing the package registers this module through the ``pytest11``
entry point, so pytest loads it automatically. It only runs inside pytest,
which comes with the ``test`` extra.

Provides ``suite_settings``, ``mastodon_account`` and ``driver`` fixtures,
tags log lines with the running test, and saves a screenshot when a test
using ``driver`` fails in its call phase.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional

import pytest
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver

from config.settings import MastodonSettings, Settings, get_settings
from utils.logging_config import ContextLogger, configure_logging, get_logger, test_name_var

from .diagnostics import ScreenshotManager
from .factory import create_driver

logger = logging.getLogger(__name__)


def pytest_configure(config: pytest.Config) -> None:
    settings = get_settings()
    # CI runs feed a log aggregator
    configure_logging(level=settings.log_level, json_output=settings.log_json or settings.is_ci)


def require_credentials(settings: Settings) -> MastodonSettings:
    """Return the test account, skipping the test when none is configured."""
    if not settings.mastodon.has_credentials:
        pytest.skip("MASTODON_EMAIL and MASTODON_PASSWORD are not set")
    return settings.mastodon


def quit_driver(web_driver: WebDriver, log: ContextLogger) -> None:
    """Close the browser; a session that is already gone is only logged."""
    try:
        web_driver.quit()
    except WebDriverException as e:
        log.warning(f"Browser did not quit cleanly: {e.msg}")
        return
    log.info("Browser session closed")


@pytest.fixture(scope="session")
def suite_settings() -> Settings:
    return get_settings()


@pytest.fixture
def mastodon_account(suite_settings: Settings) -> MastodonSettings:
    return require_credentials(suite_settings)


@pytest.fixture
def driver(suite_settings: Settings, request: pytest.FixtureRequest) -> Iterator[WebDriver]:
    log = get_logger(__name__, browser=suite_settings.browser.name, test=request.node.nodeid)
    web_driver = create_driver(suite_settings.browser)
    log.info("Browser session started")
    try:
        yield web_driver
    finally:
        quit_driver(web_driver, log)


@pytest.fixture(autouse=True)
def _tag_logs_with_test_name(request: pytest.FixtureRequest) -> Iterator[None]:
    token = test_name_var.set(request.node.nodeid)
    yield
    test_name_var.reset(token)


def capture_failure_screenshot(item: Any, report: Any, directory: str) -> Optional[str]:
    """Save a screenshot for a failed test call that used the ``driver`` fixture.

    Returns:
        The screenshot path, or None when nothing was captured.
    """
    if report.when != "call" or not report.failed:
        return None

    web_driver = getattr(item, "funcargs", {}).get("driver")
    if web_driver is None:
        return None

    path = ScreenshotManager(web_driver, directory).take(item.name)
    if path:
        report.user_properties.append(("screenshot", path))
        logger.info(f"Captured failure screenshot for {item.nodeid}: {path}")
    return path


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo) -> Iterator[None]:
    outcome = yield
    report = outcome.get_result()
    capture_failure_screenshot(item, report, get_settings().browser.screenshot_dir)
