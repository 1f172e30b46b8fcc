"""Map Selenium exceptions onto resilience failure kinds."""

from typing import Tuple

from selenium.common.exceptions import (
    ElementClickInterceptedException,
    InvalidElementStateException,
    NoSuchElementException,
    NoSuchFrameException,
    NoSuchWindowException,
    StaleElementReferenceException,
    TimeoutException,
)

from resilience.outcome import FailureKind, classify_failure

Locator = Tuple[str, str]

_KIND_BY_EXCEPTION = (
    (NoSuchElementException, FailureKind.NOT_FOUND),
    (NoSuchFrameException, FailureKind.NOT_FOUND),
    (NoSuchWindowException, FailureKind.NOT_FOUND),
    (StaleElementReferenceException, FailureKind.STALE),
    # ElementNotInteractableException and ElementNotVisibleException derive from this
    (InvalidElementStateException, FailureKind.NOT_INTERACTABLE),
    (ElementClickInterceptedException, FailureKind.NOT_INTERACTABLE),
    (TimeoutException, FailureKind.TIMEOUT),
)


def classify_webdriver_exception(exception: BaseException) -> FailureKind:
    """Classify a WebDriver failure.

    Args:
        exception: Exception raised by a driver call.

    Returns:
        The matching FailureKind; non-Selenium exceptions go through the
        default classifier.
    """
    for exception_type, kind in _KIND_BY_EXCEPTION:
        if isinstance(exception, exception_type):
            return kind
    return classify_failure(exception)


def describe_locator(locator: Locator) -> str:
    by, value = locator
    return f"{by}={value}"
