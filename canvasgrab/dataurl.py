"""Decoding of ``data:`` URLs produced by ``HTMLCanvasElement.toDataURL``."""

from __future__ import annotations

import base64
import binascii
import re

from canvasgrab.errors import MalformedDataUrlError

_DATA_URL = re.compile(r"data:(.+);base64,(.+)")


def parse_data_url(data_url: str) -> tuple[str, bytes]:
    """Split *data_url* into its MIME type and decoded payload.

    The MIME type is returned verbatim.  Raises
    :class:`~canvasgrab.errors.MalformedDataUrlError` if the string is not
    exactly ``data:<mime>;base64,<payload>`` or the payload is not base64.
    """
    match = _DATA_URL.fullmatch(data_url) if isinstance(data_url, str) else None
    if match is None:
        raise MalformedDataUrlError("Could not parse data URL.")

    mime, payload = match.groups()
    try:
        buffer = base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise MalformedDataUrlError(
            f"Data URL payload is not valid base64: {exc}"
        ) from exc
    return mime, buffer
