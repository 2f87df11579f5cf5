"""Narrow wrapper around a Playwright page.

Every pipeline component receives one :class:`ViewerSession` explicitly.
Each method blocks until the browser confirms the effect, which keeps the
capture steps strictly sequential.
"""

from __future__ import annotations

from typing import Any

from playwright.sync_api import Page


class ViewerSession:
    """The single automation session shared by every capture step."""

    def __init__(self, page: Page, *, scale: float = 1) -> None:
        self.page = page
        # Device scale factor is fixed when the browser context is created.
        self.scale = scale

    def navigate(self, url: str) -> None:
        print(f"[canvasgrab] Opening {url}")
        self.page.goto(url, wait_until="load")

    def reload(self) -> None:
        self.page.reload(wait_until="load")

    def set_cookie(
        self, name: str, value: str, domain: str, *, secure: bool = True,
    ) -> None:
        self.page.context.add_cookies(
            [
                {
                    "name": name,
                    "value": value,
                    "domain": domain,
                    "path": "/",
                    "secure": secure,
                }
            ]
        )

    def evaluate(self, script: str, arg: Any = None) -> Any:
        return self.page.evaluate(script, arg)

    def set_viewport(self, width: int, height: int, scale: float) -> None:
        if scale != self.scale:
            raise ValueError(
                f"Viewport scale {scale} differs from the session's "
                f"device scale factor {self.scale}"
            )
        self.page.set_viewport_size({"width": width, "height": height})

    def wait_for_selector(
        self, selector: str, *, hidden: bool = False, timeout: float,
    ) -> None:
        """Wait until *selector* is attached, or gone/hidden if *hidden*.

        *timeout* is in seconds.
        """
        self.page.wait_for_selector(
            selector,
            state="hidden" if hidden else "attached",
            timeout=timeout * 1000,
        )

    def wait_for_function(
        self, script: str, arg: Any = None, *, timeout: float,
    ) -> None:
        self.page.wait_for_function(script, arg=arg, timeout=timeout * 1000)

    def inner_text(self, selector: str) -> str:
        return self.page.inner_text(selector)

    def screenshot(self, path: str) -> None:
        self.page.screenshot(path=path, full_page=True)

    def sleep(self, seconds: float) -> None:
        self.page.wait_for_timeout(seconds * 1000)
