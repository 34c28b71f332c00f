"""Parse ``/uploads`` query parameters into a typed derivative request.

Inputs are never rejected here: widths and qualities are clamped into range,
unparseable numbers are treated as absent and unknown formats fall back to
content negotiation.
"""
from __future__ import annotations

import re
from pathlib import PurePosixPath

from shopfront_media.domain.entities.derivative import (
    DerivativeRequest,
    ImageFormat,
    NoTransform,
    ParsedRequest,
)

MIN_WIDTH = 100
MAX_WIDTH = 2000
MIN_QUALITY = 1
MAX_QUALITY = 100
DEFAULT_QUALITY = 80

_leading_int_re = re.compile(r"^\s*([+-]?\d+)")

_FORMAT_ALIASES = {
    "webp": ImageFormat.WEBP,
    "jpeg": ImageFormat.JPEG,
    "jpg": ImageFormat.JPEG,
    "png": ImageFormat.PNG,
}


def _parse_int(value: str | None) -> int | None:
    # "300px" -> 300, "abc" -> None
    if not value:
        return None
    m = _leading_int_re.match(value)
    if m is None:
        return None
    return int(m.group(1))


def _clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


def negotiate_format(source_path: str, accept: str | None) -> ImageFormat:
    """Pick the output format when the client did not ask for one."""
    if accept and "image/webp" in accept:
        return ImageFormat.WEBP
    if PurePosixPath(source_path).suffix.lower() == ".png":
        return ImageFormat.PNG
    return ImageFormat.JPEG


def parse_derivative_request(
    source_path: str,
    w: str | None = None,
    q: str | None = None,
    format: str | None = None,
    accept: str | None = None,
) -> ParsedRequest:
    if not w and not q and not format:
        return NoTransform(source_path=source_path)

    width = _parse_int(w)
    if width is not None:
        width = _clamp(width, MIN_WIDTH, MAX_WIDTH)

    quality = _parse_int(q)
    quality = DEFAULT_QUALITY if quality is None else _clamp(quality, MIN_QUALITY, MAX_QUALITY)

    output_format = _FORMAT_ALIASES.get((format or "").strip().lower())
    if output_format is None:
        output_format = negotiate_format(source_path, accept)

    return DerivativeRequest(
        source_path=source_path,
        width=width,
        quality=quality,
        format=output_format,
    )
