from __future__ import annotations

import hashlib
from pathlib import PurePosixPath

from shopfront_media.domain.entities.derivative import DerivativeRequest, ImageFormat

ORIGINAL_WIDTH_MARKER = "orig"


def build_cache_key(source_path: str, width: int | None, quality: int, format: ImageFormat) -> str:
    """Return ``{stem}_w{width|orig}_q{quality}.{format}`` for a source image.

    Sources stored in a subdirectory get a short hash of that directory appended
    to the stem, so ``a/shirt.jpg`` and ``b/shirt.jpg`` map to different files.
    Sources at the upload root keep the plain stem.
    """
    path = PurePosixPath(source_path.lstrip("/"))
    stem = path.stem
    parent = str(path.parent)
    if parent not in ("", "."):
        stem = f"{stem}-{hashlib.sha1(parent.encode('utf-8')).hexdigest()[:8]}"
    w = ORIGINAL_WIDTH_MARKER if width is None else str(width)
    return f"{stem}_w{w}_q{quality}.{format.value}"


def cache_key_for(request: DerivativeRequest) -> str:
    return build_cache_key(request.source_path, request.width, request.quality, request.format)
