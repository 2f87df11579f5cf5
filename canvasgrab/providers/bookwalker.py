"""BookWalker provider – captures pages from the bookwalker.jp canvas viewer.

The viewer (NFBR) draws every page into a ``<canvas>`` inside
``#wideScreen<N>`` and only rasterizes at the resolution implied by the
viewport.  The run prepares the viewer so each page index maps to exactly one
canvas with stable dimensions, reads the page count from the slider counter,
and hands each index to :func:`~canvasgrab.capture.capture_page`.

Viewer preconditions:

- the ``cookie_optin=1`` cookie must be set or the reader stays behind the
  consent banner;
- the settings blob in ``localStorage`` must disable double-page spreads and
  page animations.  Settings are read once at load time, hence the reload.

A full-page ``final.png`` screenshot is always written at the end of the run,
including after a failure.
"""

from __future__ import annotations

import json
import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from canvasgrab.capture import CaptureOptions, capture_page
from canvasgrab.chrome import elapsed, open_page
from canvasgrab.counter import resolve_total_pages
from canvasgrab.errors import ViewerConfigError
from canvasgrab.providers.base import BaseProvider
from canvasgrab.session import ViewerSession
from canvasgrab.stealth import apply_to
from canvasgrab.viewport import VIEWPORT_SCALE, set_wide_viewport

_BOOKWALKER_PATTERN = re.compile(r"https?://([\w-]+\.)*bookwalker\.jp/")

DEFAULT_URL = "https://bookwalker.jp/de4f4369e5-f291-4137-b631-cfc9532c2f2d/?sample=1"

COOKIE_NAME = "cookie_optin"
COOKIE_VALUE = "1"
COOKIE_DOMAIN = ".bookwalker.jp"

SETTINGS_KEY = "/NFBR_Settings/NFBR.SettingData"
VIEWER_SETTINGS = {
    "viewerTapRange": 50,
    "viewerPageTransitionAxis": "vertical",
    "viewerAnimationPatternForFixed": "seamless",
    "viewerAnimationPattern": "off",
    "viewerSpreadDouble": False,
}

SCREENSHOT_NAME = "final.png"

_SET_STORAGE_JS = """([key, value]) => {
    localStorage.setItem(key, value);
}"""

_GET_STORAGE_JS = """(key) => localStorage.getItem(key)"""


@dataclass
class RunResult:
    """Outcome of one capture run."""

    images: list[Path] = field(default_factory=list)
    screenshot: Path | None = None
    failure: Exception | None = None
    total_pages: int = 0

    @property
    def ok(self) -> bool:
        return self.failure is None


class BookwalkerProvider(BaseProvider):
    """Capture documents from BookWalker viewer URLs."""

    def __init__(self, evasion: Callable[[ViewerSession], None] = apply_to) -> None:
        self._evasion = evasion

    @staticmethod
    def can_handle(url: str) -> bool:
        return bool(_BOOKWALKER_PATTERN.match(url))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def fetch(
        self,
        url: str,
        options: CaptureOptions,
        *,
        headless: bool = True,
        chrome: str | None = None,
    ) -> RunResult:
        Path(options.output_dir).mkdir(parents=True, exist_ok=True)
        with open_page(
            headless=headless, executable_path=chrome, scale=VIEWPORT_SCALE,
        ) as page:
            session = ViewerSession(page, scale=VIEWPORT_SCALE)
            return self.run(session, url, options)

    def run(
        self, session: ViewerSession, url: str, options: CaptureOptions,
    ) -> RunResult:
        """Prepare the viewer and capture every page in index order.

        The first failure stops the run and is stored on the result; the
        diagnostic screenshot is taken either way.
        """
        t_total = time.time()
        result = RunResult()
        try:
            t_step = time.time()
            self._prepare_viewer(session, url)
            print(f"[canvasgrab] Viewer ready ({elapsed(t_step)})")

            result.total_pages = resolve_total_pages(session, timeout=options.timeout)
            for index in range(result.total_pages):
                result.images.append(capture_page(session, index, options))
        except Exception as exc:
            result.failure = exc
            print(f"[canvasgrab] Failure: {exc}")

        result.screenshot = self._diagnostic_screenshot(session, options)
        print(
            f"[canvasgrab] Captured {len(result.images)}/{result.total_pages} "
            f"pages in {elapsed(t_total)}"
        )
        return result

    # ------------------------------------------------------------------
    # Viewer preparation
    # ------------------------------------------------------------------

    def _prepare_viewer(self, session: ViewerSession, url: str) -> None:
        self._evasion(session)
        set_wide_viewport(session)
        session.navigate(url)
        session.set_cookie(COOKIE_NAME, COOKIE_VALUE, COOKIE_DOMAIN, secure=True)
        session.evaluate(
            _SET_STORAGE_JS,
            [SETTINGS_KEY, json.dumps(VIEWER_SETTINGS, separators=(",", ":"))],
        )
        session.reload()
        self._check_viewer_settings(session)

    @staticmethod
    def _check_viewer_settings(session: ViewerSession) -> None:
        """Verify the reloaded viewer kept single-page, unanimated settings.

        The capture math assumes one canvas per page index with stable
        dimensions.
        """
        raw = session.evaluate(_GET_STORAGE_JS, SETTINGS_KEY)
        if not raw:
            raise ViewerConfigError(f"{SETTINGS_KEY} is missing after reload")
        try:
            stored = json.loads(raw)
        except ValueError as exc:
            raise ViewerConfigError(f"{SETTINGS_KEY} is not valid JSON") from exc

        if stored.get("viewerSpreadDouble") is not False:
            raise ViewerConfigError("Viewer double-page spreads are enabled")
        if stored.get("viewerAnimationPattern") != "off":
            raise ViewerConfigError("Viewer page animations are enabled")

    @staticmethod
    def _diagnostic_screenshot(
        session: ViewerSession, options: CaptureOptions,
    ) -> Path | None:
        path = Path(options.output_dir) / SCREENSHOT_NAME
        try:
            session.screenshot(str(path))
        except Exception as exc:
            print(f"[canvasgrab] Warning: could not save screenshot: {exc}")
            return None
        print(f"[canvasgrab] Saved screenshot to {path}")
        return path
