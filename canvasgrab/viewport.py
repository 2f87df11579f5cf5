"""Viewport control and canvas re-render settling.

The viewer sizes its canvas raster from the viewport, so every capture is a
sequence of viewport changes followed by a settle wait.  Only the width ever
changes; height and scale are fixed for the whole run.
"""

from __future__ import annotations

from dataclasses import dataclass

from canvasgrab.errors import WaitTimeoutError
from canvasgrab.session import ViewerSession

VIEWPORT_HEIGHT = 3000
VIEWPORT_SCALE = 1

#: Width at which the viewer renders its highest-fidelity raster.
WIDE_WIDTH = 2000
#: Width used to force a re-render at a smaller, differently-scaled size.
NARROW_WIDTH = 1000

SETTLE_MODES = ("poll", "fixed")

_CANVAS_SIZE_JS = """(selector) => {
    const canvas = document.querySelector(selector);
    const width = parseInt(canvas.getAttribute("width"), 10);
    const height = parseInt(canvas.getAttribute("height"), 10);
    return {
        width: Number.isNaN(width) ? null : width,
        height: Number.isNaN(height) ? null : height,
    };
}"""


@dataclass(frozen=True)
class ViewportSpec:
    width: int
    height: int = VIEWPORT_HEIGHT
    scale: float = VIEWPORT_SCALE

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Viewport must be positive, got {self.width}x{self.height}"
            )
        if self.scale <= 0:
            raise ValueError(f"Viewport scale must be positive, got {self.scale}")


def set_viewport(session: ViewerSession, width: int) -> ViewportSpec:
    """Replace the session viewport with *width* x ``VIEWPORT_HEIGHT`` at scale 1.

    Returns once the driver has applied the change; the canvas re-renders
    asynchronously afterwards, see :func:`wait_for_canvas_settle`.
    """
    spec = ViewportSpec(width=width)
    session.set_viewport(spec.width, spec.height, spec.scale)
    return spec


def set_wide_viewport(session: ViewerSession) -> ViewportSpec:
    return set_viewport(session, WIDE_WIDTH)


def set_narrow_viewport(session: ViewerSession) -> ViewportSpec:
    return set_viewport(session, NARROW_WIDTH)


def read_canvas_size(
    session: ViewerSession, canvas_selector: str,
) -> tuple[int | None, int | None]:
    """Read the intrinsic ``width``/``height`` attributes of a canvas."""
    size = session.evaluate(_CANVAS_SIZE_JS, canvas_selector)
    return size["width"], size["height"]


def wait_for_canvas_settle(
    session: ViewerSession,
    canvas_selector: str,
    *,
    mode: str = "poll",
    delay: float = 1.0,
    interval: float = 0.25,
    timeout: float = 10.0,
) -> None:
    """Block until the canvas has re-rendered after a viewport change.

    In ``fixed`` mode this sleeps for *delay* seconds.  In ``poll`` mode it
    also sleeps *delay* first, then reads the canvas size every *interval*
    until two consecutive readings agree, raising
    :class:`~canvasgrab.errors.WaitTimeoutError` after *timeout* seconds.
    """
    if mode == "fixed":
        session.sleep(delay)
        return
    if mode != "poll":
        raise ValueError(f"Unknown settle mode {mode!r}; expected one of {SETTLE_MODES}")

    session.sleep(delay)
    waited = delay
    previous = read_canvas_size(session, canvas_selector)
    while True:
        session.sleep(interval)
        waited += interval
        current = read_canvas_size(session, canvas_selector)
        if current == previous:
            return
        if waited >= timeout:
            raise WaitTimeoutError(
                f"{canvas_selector!r} size did not settle within {timeout:g}s "
                f"(last {current[0]}x{current[1]})"
            )
        previous = current
