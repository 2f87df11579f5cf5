"""Bot-detection evasion, applied once before the first navigation."""

from __future__ import annotations

from playwright_stealth import Stealth

from canvasgrab.session import ViewerSession


def apply_to(session: ViewerSession) -> None:
    """Patch the page's automation-detection surface (``navigator.webdriver`` etc.)."""
    Stealth(
        navigator_webdriver=True,
        chrome_runtime=True,
        navigator_plugins=True,
        navigator_permissions=True,
        webgl_vendor=True,
    ).apply_stealth_sync(session.page)
