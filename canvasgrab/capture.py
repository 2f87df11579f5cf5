"""Per-page capture pipeline.

The viewer only rasterizes a page canvas at the resolution implied by the
current viewport.  For each page we measure the canvas height at the wide
preset, re-render at the narrow preset to learn the canvas aspect ratio,
then resize the viewport so the exported raster matches the wide-preset
height exactly.

Steps run strictly in order on the one session; a failure at any step is
raised as :class:`~canvasgrab.errors.CaptureError` naming the page and step.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path

from canvasgrab.chrome import elapsed
from canvasgrab.dataurl import parse_data_url
from canvasgrab.errors import CanvasMeasurementError, CaptureError
from canvasgrab.readiness import DEFAULT_TIMEOUT, wait_for_absence, wait_for_presence
from canvasgrab.session import ViewerSession
from canvasgrab.viewport import (
    read_canvas_size,
    set_narrow_viewport,
    set_viewport,
    set_wide_viewport,
    wait_for_canvas_settle,
)

IMAGE_NAME = "image_{index}.png"

_SCROLL_INTO_VIEW_JS = """(selector) => {
    document.querySelector(selector).scrollIntoView();
}"""

_EXPORT_CANVAS_JS = """(selector) => {
    return document.querySelector(selector).toDataURL();
}"""


@dataclass(frozen=True)
class CaptureOptions:
    """Tunables for a capture run."""

    output_dir: Path = Path(".")
    #: Budget for each readiness wait, in seconds.
    timeout: float = DEFAULT_TIMEOUT
    #: ``"poll"`` waits for the canvas size to stabilise, ``"fixed"`` sleeps.
    settle: str = "poll"
    settle_delay: float = 1.0
    settle_interval: float = 0.25
    settle_timeout: float = 10.0
    image_name: str = IMAGE_NAME

    def image_path(self, index: int) -> Path:
        return Path(self.output_dir) / self.image_name.format(index=index)


@dataclass(frozen=True)
class CanvasMeasurement:
    reference_height: int
    measured_width: int
    measured_height: int

    @property
    def target_width(self) -> int:
        return compute_target_width(
            self.reference_height, self.measured_width, self.measured_height,
        )


@dataclass(frozen=True)
class ImageArtifact:
    page_index: int
    mime_type: str
    payload: bytes


def compute_target_width(reference_height: int, width: int, height: int) -> int:
    """Project the canvas aspect ratio *width*/*height* onto *reference_height*.

    Rounds half up, like ``Math.round``, using integer arithmetic.
    """
    if height is None or height <= 0:
        raise CanvasMeasurementError(f"Canvas height must be positive, got {height}")
    if width is None or width <= 0:
        raise CanvasMeasurementError(f"Canvas width must be positive, got {width}")
    if reference_height is None or reference_height <= 0:
        raise CanvasMeasurementError(
            f"Reference height must be positive, got {reference_height}"
        )
    target = (2 * reference_height * width + height) // (2 * height)
    if target <= 0:
        raise CanvasMeasurementError(
            f"Canvas {width}x{height} projects to a zero width at height {reference_height}"
        )
    return target


def export_canvas(
    session: ViewerSession, index: int, canvas_selector: str,
) -> ImageArtifact:
    """Export the canvas raster in-page and decode it."""
    data_url = session.evaluate(_EXPORT_CANVAS_JS, canvas_selector)
    mime, payload = parse_data_url(data_url)
    return ImageArtifact(page_index=index, mime_type=mime, payload=payload)


def persist_artifact(artifact: ImageArtifact, options: CaptureOptions) -> Path:
    path = options.image_path(artifact.page_index)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.write(artifact.payload)
    return path


def _settle(session: ViewerSession, canvas_selector: str, options: CaptureOptions) -> None:
    wait_for_canvas_settle(
        session,
        canvas_selector,
        mode=options.settle,
        delay=options.settle_delay,
        interval=options.settle_interval,
        timeout=options.settle_timeout,
    )


def capture_page(
    session: ViewerSession, index: int, options: CaptureOptions | None = None,
) -> Path:
    """Capture page *index* at full resolution and return the written file.

    Expects the session at the wide preset and leaves it there.
    """
    options = options or CaptureOptions()
    wrapper_selector = f"#wideScreen{index}"
    canvas_selector = f"{wrapper_selector} canvas"
    loading_selector = f"{wrapper_selector} .loading"

    t_page = time.time()
    step = "locate"
    try:
        wait_for_presence(session, wrapper_selector, timeout=options.timeout)
        wait_for_absence(session, loading_selector, timeout=options.timeout)
        session.evaluate(_SCROLL_INTO_VIEW_JS, wrapper_selector)

        step = "measure"
        _, reference_height = read_canvas_size(session, canvas_selector)
        if reference_height is None or reference_height <= 0:
            raise CanvasMeasurementError(
                f"Canvas height must be positive, got {reference_height}"
            )

        step = "narrow"
        set_narrow_viewport(session)
        _settle(session, canvas_selector, options)

        step = "compute"
        width, height = read_canvas_size(session, canvas_selector)
        measurement = CanvasMeasurement(reference_height, width, height)
        target_width = measurement.target_width

        step = "resize"
        set_viewport(session, target_width)
        _settle(session, canvas_selector, options)

        step = "export"
        artifact = export_canvas(session, index, canvas_selector)
        path = persist_artifact(artifact, options)

        step = "restore"
        set_wide_viewport(session)
        _settle(session, canvas_selector, options)
    except Exception as exc:
        raise CaptureError(index, step, exc) from exc

    print(
        f"[canvasgrab] Saved page {index} "
        f"({target_width}x{reference_height}) to {path} ({elapsed(t_page)})"
    )
    return path
