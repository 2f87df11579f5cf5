"""Exception types raised while capturing viewer pages."""

from __future__ import annotations


class GrabberError(Exception):
    """Base class for all canvasgrab errors."""


class MalformedDataUrlError(GrabberError, ValueError):
    """A canvas export did not produce a ``data:<mime>;base64,<payload>`` URL."""


class CounterParseError(GrabberError, ValueError):
    """The page counter text had no ``/``-delimited numeric total."""


class WaitTimeoutError(GrabberError, TimeoutError):
    """A readiness wait did not complete within its budget."""


class CanvasMeasurementError(GrabberError, ValueError):
    """The canvas reported a size that cannot be used for scaling."""


class ViewerConfigError(GrabberError):
    """The viewer settings injected before reload did not take effect."""


class CaptureError(GrabberError):
    """Capturing a single page failed at a named pipeline step.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, index: int, step: str, cause: BaseException) -> None:
        self.index = index
        self.step = step
        self.cause = cause
        super().__init__(f"page {index} ({step}): {cause}")
