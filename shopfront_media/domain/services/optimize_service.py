from __future__ import annotations

import os
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

import structlog
from PIL import Image

from shopfront_media.domain.entities.derivative import ImageFormat
from shopfront_media.domain.services.transcode_service import TranscodeService

logger = structlog.get_logger(__name__)


@dataclass
class OptimizeService:
    """Optimize freshly uploaded originals in place.

    The original is shrunk to `max_width` when wider, re-encoded according to its
    extension and atomically replaced. Non-WebP originals also get a sibling
    ``<stem>.webp`` at the same size.
    """

    max_width: int = 1600
    quality: int = 85

    def _encode_for_extension(self, img: Image.Image, ext: str) -> bytes:
        if ext == ".png":
            return _save(img, "PNG", compress_level=9, optimize=True)
        if ext == ".webp":
            return TranscodeService.encode(img, ImageFormat.WEBP, self.quality)
        if ext == ".gif":
            return _save(img, "GIF")
        return TranscodeService.encode(img, ImageFormat.JPEG, self.quality)

    def optimize_in_place(self, path: Path) -> bool:
        """Returns False (and logs) when the file cannot be optimized. Never raises."""
        ext = path.suffix.lower()
        tmp_path = path.with_name(f"{path.stem}_temp{path.suffix}")
        try:
            with Image.open(path) as img:
                img.load()
                needs_resize = img.width > self.max_width
                out = TranscodeService.resize_to_width(img, self.max_width)
                data = self._encode_for_extension(out, ext)
                webp = None
                if ext != ".webp":
                    webp = TranscodeService.encode(out, ImageFormat.WEBP, self.quality)

            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
            if webp is not None:
                path.with_name(f"{path.stem}.webp").write_bytes(webp)
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            tmp_path.unlink(missing_ok=True)
            logger.warning("optimize.failed", path=str(path), error=str(exc))
            return False

        logger.info(
            "optimize.completed",
            path=str(path),
            resized=needs_resize,
            webp_sibling=webp is not None,
            size=len(data),
        )
        return True


def _save(img: Image.Image, fmt: str, **params) -> bytes:
    buf = BytesIO()
    img.save(buf, format=fmt, **params)
    return buf.getvalue()
