"""Blocking waits on the live document state of the viewer page."""

from __future__ import annotations

from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from canvasgrab.errors import WaitTimeoutError
from canvasgrab.session import ViewerSession

#: Default budget for each readiness wait, in seconds.
DEFAULT_TIMEOUT = 30.0

_NON_EMPTY_TEXT_JS = """(selector) => {
    const el = document.querySelector(selector);
    return el != null && el.innerText.length > 0;
}"""


def wait_for_presence(
    session: ViewerSession, selector: str, *, timeout: float = DEFAULT_TIMEOUT,
) -> None:
    """Block until an element matching *selector* exists."""
    try:
        session.wait_for_selector(selector, timeout=timeout)
    except PlaywrightTimeoutError as exc:
        raise WaitTimeoutError(
            f"{selector!r} did not appear within {timeout:g}s"
        ) from exc


def wait_for_absence(
    session: ViewerSession, selector: str, *, timeout: float = DEFAULT_TIMEOUT,
) -> None:
    """Block until no visible element matches *selector*."""
    try:
        session.wait_for_selector(selector, hidden=True, timeout=timeout)
    except PlaywrightTimeoutError as exc:
        raise WaitTimeoutError(
            f"{selector!r} was still present after {timeout:g}s"
        ) from exc


def wait_for_non_empty_text(
    session: ViewerSession, selector: str, *, timeout: float = DEFAULT_TIMEOUT,
) -> None:
    """Block until *selector* exists and its rendered text is non-empty."""
    try:
        session.wait_for_function(_NON_EMPTY_TEXT_JS, selector, timeout=timeout)
    except PlaywrightTimeoutError as exc:
        raise WaitTimeoutError(
            f"{selector!r} had no text after {timeout:g}s"
        ) from exc
