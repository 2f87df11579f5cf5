"""Browser lifecycle helpers.

Provides functions for locating the system Chrome binary and opening a
Playwright page with a fixed device scale factor.  Providers wrap the page
in a :class:`~canvasgrab.session.ViewerSession`.
"""

from __future__ import annotations

import os
import platform
import shutil
import time
from contextlib import contextmanager
from typing import Iterator

from playwright.sync_api import Page, sync_playwright


def elapsed(start: float) -> str:
    """Format elapsed time since *start* as a human-readable string."""
    secs = time.time() - start
    if secs < 60:
        return f"{secs:.1f}s"
    mins = int(secs // 60)
    remainder = secs % 60
    return f"{mins}m {remainder:.1f}s"


def find_chrome() -> str | None:
    """Locate the system Chrome binary."""
    system = platform.system()
    if system == "Darwin":
        path = "/Applications/Google Chrome.app/Contents/MacOS/Google Chrome"
        if os.path.exists(path):
            return path
    elif system == "Linux":
        for name in ("google-chrome", "google-chrome-stable", "chromium-browser"):
            path = shutil.which(name)
            if path:
                return path
    elif system == "Windows":
        for base in (
            os.environ.get("PROGRAMFILES", ""),
            os.environ.get("PROGRAMFILES(X86)", ""),
            os.environ.get("LOCALAPPDATA", ""),
        ):
            path = os.path.join(base, "Google", "Chrome", "Application", "chrome.exe")
            if os.path.exists(path):
                return path
    return None


@contextmanager
def open_page(
    *,
    headless: bool = True,
    executable_path: str | None = None,
    scale: float = 1,
    timeout: float = 60.0,
) -> Iterator[Page]:
    """Launch Chromium and yield a fresh page; the browser closes on exit.

    *executable_path* selects a system Chrome instead of Playwright's bundled
    Chromium.  *timeout* (seconds) becomes the page's default timeout.
    """
    t_step = time.time()
    label = executable_path or "bundled Chromium"
    print(f"[canvasgrab] Launching {label} …")
    with sync_playwright() as pw:
        browser = pw.chromium.launch(
            headless=headless, executable_path=executable_path,
        )
        try:
            context = browser.new_context(device_scale_factor=scale)
            page = context.new_page()
            page.set_default_timeout(timeout * 1000)
            print(f"[canvasgrab] Browser launched ({elapsed(t_step)})")
            yield page
        finally:
            browser.close()
