from __future__ import annotations

import base64
import re

import pytest
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

from canvasgrab import capture, viewport
from canvasgrab.providers import bookwalker

_PAGE_INDEX = re.compile(r"#wideScreen(\d+)")


def _index_of(selector: str) -> int:
    return int(_PAGE_INDEX.match(selector).group(1))


class FakeSession:
    """In-memory stand-in for ``ViewerSession``.

    Models a viewer whose canvas raster is ``0.5 * width`` by ``1.5 * width``
    of the current viewport, so the wide preset (2000) gives 1000x3000 and the
    narrow preset (1000) gives 500x1500.  With *lag*, the canvas keeps its old
    size until *lag* seconds of ``sleep`` have passed after a viewport change.
    """

    def __init__(
        self, pages: int = 2, counter_text: str | None = None, lag: float = 0,
    ) -> None:
        self.page = None
        self.pages = pages
        self.counter_text = f"1/{pages}" if counter_text is None else counter_text
        self.width: int | None = None
        self.lag = lag
        self.clock = 0.0
        self.rendered_at = 0.0
        self.previous_width: int | None = None
        self.events: list[tuple] = []
        self.storage: dict[str, str] = {}
        self.cookies: list[dict] = []
        self.stuck_loading: set[int] = set()
        self.screenshot_fails = False

    # -- canvas model ------------------------------------------------------

    def rendered_width(self) -> int | None:
        if self.clock < self.rendered_at:
            return self.previous_width
        return self.width

    def canvas_size(self, index: int) -> tuple[int, int]:
        width = self.rendered_width()
        return width // 2, width * 3 // 2

    def canvas_payload(self, index: int) -> bytes:
        w, h = self.canvas_size(index)
        return f"png:{index}:{w}x{h}".encode()

    # -- ViewerSession surface ----------------------------------------------

    def navigate(self, url: str) -> None:
        self.events.append(("navigate", url))

    def reload(self) -> None:
        self.events.append(("reload",))

    def set_cookie(self, name, value, domain, *, secure=True) -> None:
        self.cookies.append(
            {"name": name, "value": value, "domain": domain, "secure": secure}
        )
        self.events.append(("cookie", name))

    def evaluate(self, script, arg=None):
        if script == viewport._CANVAS_SIZE_JS:
            w, h = self.canvas_size(_index_of(arg))
            return {"width": w, "height": h}
        if script == capture._SCROLL_INTO_VIEW_JS:
            self.events.append(("scroll", _index_of(arg)))
            return None
        if script == capture._EXPORT_CANVAS_JS:
            index = _index_of(arg)
            self.events.append(("export", index, self.width))
            encoded = base64.b64encode(self.canvas_payload(index)).decode()
            return f"data:image/png;base64,{encoded}"
        if script == bookwalker._SET_STORAGE_JS:
            key, value = arg
            self.storage[key] = value
            return None
        if script == bookwalker._GET_STORAGE_JS:
            return self.storage.get(arg)
        raise AssertionError(f"unexpected script: {script}")

    def set_viewport(self, width, height, scale) -> None:
        assert height == viewport.VIEWPORT_HEIGHT
        assert scale == viewport.VIEWPORT_SCALE
        self.previous_width = self.rendered_width()
        self.rendered_at = self.clock + self.lag
        self.width = width
        self.events.append(("viewport", width))

    def wait_for_selector(self, selector, *, hidden=False, timeout) -> None:
        index = _index_of(selector)
        if hidden:
            if index in self.stuck_loading:
                raise PlaywrightTimeoutError(
                    f"Timeout {timeout * 1000:g}ms exceeded."
                )
            self.events.append(("loaded", index))
        else:
            if index >= self.pages:
                raise PlaywrightTimeoutError(
                    f"Timeout {timeout * 1000:g}ms exceeded."
                )
            self.events.append(("present", index))

    def wait_for_function(self, script, arg=None, *, timeout) -> None:
        if not self.counter_text:
            raise PlaywrightTimeoutError(f"Timeout {timeout * 1000:g}ms exceeded.")
        self.events.append(("counter",))

    def inner_text(self, selector: str) -> str:
        return self.counter_text

    def screenshot(self, path: str) -> None:
        if self.screenshot_fails:
            raise RuntimeError("Target page, context or browser has been closed")
        with open(path, "wb") as f:
            f.write(b"screenshot")
        self.events.append(("screenshot", path))

    def sleep(self, seconds: float) -> None:
        self.clock += seconds
        self.events.append(("sleep", seconds))

    # -- helpers -------------------------------------------------------------

    def viewports(self) -> list[int]:
        return [e[1] for e in self.events if e[0] == "viewport"]


@pytest.fixture
def session() -> FakeSession:
    fake = FakeSession()
    fake.width = viewport.WIDE_WIDTH
    return fake


@pytest.fixture
def options(tmp_path):
    return capture.CaptureOptions(output_dir=tmp_path, timeout=0.5)
