"""Base provider interface for canvas viewers.

To add support for another viewer, create a new module in this package that
subclasses ``BaseProvider`` and register it in
``canvasgrab/providers/__init__.py``.
"""

from __future__ import annotations

import abc
from pathlib import Path

from canvasgrab.capture import CaptureOptions


class BaseProvider(abc.ABC):
    """Abstract base for all viewer-capture providers."""

    @staticmethod
    @abc.abstractmethod
    def can_handle(url: str) -> bool:
        """Return True if this provider knows how to handle *url*."""

    @abc.abstractmethod
    def fetch(
        self,
        url: str,
        options: CaptureOptions,
        *,
        headless: bool = True,
        chrome: str | None = None,
    ):
        """Capture every page of the document at *url* as image files.

        Parameters
        ----------
        url:
            The viewer URL.
        options:
            Output directory, wait timeouts and settle behaviour.
        headless:
            Whether to run the browser in headless mode.
        chrome:
            Optional path to a Chrome binary to use instead of the bundled
            Chromium.

        Returns
        -------
        RunResult
            The written image paths, the diagnostic screenshot and the
            failure that stopped the run, if any.
        """
