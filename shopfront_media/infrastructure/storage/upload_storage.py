from __future__ import annotations

import secrets
import time
from pathlib import Path

import structlog
from fastapi.responses import FileResponse

from shopfront_media.domain.entities.upload import StoredUpload

logger = structlog.get_logger(__name__)

LONG_CACHE_CONTROL = "public, max-age=31536000"

_EXT_BY_CONTENT_TYPE = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


class UploadStorage:
    """Local-disk storage for original product images (the upload root)."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def resolve(self, relative_path: str) -> Path | None:
        """Map a request path to a file under the root, or None if it escapes the root."""
        root = self.root.resolve()
        candidate = (root / relative_path.lstrip("/")).resolve()
        if candidate == root or not candidate.is_relative_to(root):
            return None
        return candidate

    @staticmethod
    def generate_filename(original_filename: str | None, content_type: str | None) -> str:
        ext = Path(original_filename or "").suffix.lower()
        if not ext:
            ext = _EXT_BY_CONTENT_TYPE.get(content_type or "", "")
        return f"product-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"

    def save(self, data: bytes, original_filename: str | None, content_type: str) -> StoredUpload:
        filename = self.generate_filename(original_filename, content_type)
        full_path = self.root / filename
        full_path.write_bytes(data)
        logger.info("upload.stored", filename=filename, size=len(data), content_type=content_type)
        return StoredUpload(filename=filename, path=full_path, content_type=content_type, size=len(data))

    @staticmethod
    def serve_original(path: Path) -> FileResponse:
        # ETag and Last-Modified are added by FileResponse
        return FileResponse(path=path, headers={"Cache-Control": LONG_CACHE_CONTROL})
