from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ImageFormat(str, Enum):
    WEBP = "webp"
    JPEG = "jpeg"
    PNG = "png"

    @property
    def content_type(self) -> str:
        return f"image/{self.value}"

    @property
    def pillow_format(self) -> str:
        return self.value.upper()


class CacheStatus(Enum):
    NOT_FOUND = "not_found"
    MISS = "miss"
    HIT = "hit"


@dataclass(frozen=True)
class NoTransform:
    """Request carrying no w/q/format parameters: serve the original file."""

    source_path: str


@dataclass(frozen=True)
class DerivativeRequest:
    source_path: str  # relative to the upload root, posix separators
    width: int | None  # None keeps the original size
    quality: int
    format: ImageFormat


ParsedRequest = NoTransform | DerivativeRequest
