"""Page-count discovery from the viewer's slider counter."""

from __future__ import annotations

import re

from canvasgrab.errors import CounterParseError
from canvasgrab.readiness import DEFAULT_TIMEOUT, wait_for_non_empty_text
from canvasgrab.session import ViewerSession

COUNTER_SELECTOR = "#pageSliderCounter"

_LEADING_INT = re.compile(r"\s*([0-9]+)")


def parse_counter_text(text: str) -> int:
    """Return the total from counter text such as ``"3/57"``.

    Like ``parseInt``, only the leading digits of the segment after the
    first ``/`` are used.
    """
    parts = text.split("/")
    if len(parts) < 2:
        raise CounterParseError(f"Page counter {text!r} has no '/'")
    match = _LEADING_INT.match(parts[1])
    if match is None:
        raise CounterParseError(
            f"Page counter {text!r} has no numeric total"
        )
    return int(match.group(1), 10)


def resolve_total_pages(
    session: ViewerSession, *, timeout: float = DEFAULT_TIMEOUT,
) -> int:
    """Wait for the page counter to populate and read the total page count."""
    wait_for_non_empty_text(session, COUNTER_SELECTOR, timeout=timeout)
    total = parse_counter_text(session.inner_text(COUNTER_SELECTOR))
    print(f"[canvasgrab] Detected {total} pages")
    return total
