"""WebDriver construction from BrowserSettings."""

import logging

from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.remote.webdriver import WebDriver

from config.settings import BrowserSettings

from .exceptions import BrowserSetupError

logger = logging.getLogger(__name__)


def _build_chrome(settings: BrowserSettings) -> WebDriver:
    options = webdriver.ChromeOptions()
    if settings.headless:
        options.add_argument("--headless=new")
    options.add_argument(f"--window-size={settings.window_width},{settings.window_height}")
    options.add_argument("--disable-notifications")
    return webdriver.Chrome(options=options)


def _build_firefox(settings: BrowserSettings) -> WebDriver:
    options = webdriver.FirefoxOptions()
    if settings.headless:
        options.add_argument("-headless")
    driver = webdriver.Firefox(options=options)
    driver.set_window_size(settings.window_width, settings.window_height)
    return driver


def create_driver(settings: BrowserSettings) -> WebDriver:
    """
    Launch a browser configured from settings.

    Args:
        settings: Browser choice, window size and timeouts.

    Returns:
        Ready WebDriver with implicit wait and page-load timeout applied.

    Raises:
        BrowserSetupError: The browser could not be started.
    """
    builder = _build_chrome if settings.name == "chrome" else _build_firefox
    try:
        driver = builder(settings)
        driver.implicitly_wait(settings.implicit_wait)
        driver.set_page_load_timeout(settings.page_load_timeout)
    except WebDriverException as e:
        raise BrowserSetupError(f"Failed to start {settings.name}: {e.msg}") from e

    logger.info(
        f"Started {settings.name} (headless={settings.headless})",
        extra={"extra_data": {
            "window": f"{settings.window_width}x{settings.window_height}",
            "implicit_wait": settings.implicit_wait,
        }},
    )
    return driver
