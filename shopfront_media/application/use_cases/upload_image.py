from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from shopfront_media.domain.entities.upload import StoredUpload
from shopfront_media.infrastructure.storage.upload_storage import UploadStorage


class UploadRejectedError(ValueError):
    """Upload failed validation; carries the HTTP status to answer with."""

    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


@dataclass
class UploadImageUseCase:
    storage: UploadStorage
    allowed_content_types: Sequence[str]
    max_file_bytes: int

    def validate(self, content_type: str | None, size: int) -> None:
        if content_type not in self.allowed_content_types:
            raise UploadRejectedError(400, f"Unsupported file type: {content_type}")
        if size > self.max_file_bytes:
            raise UploadRejectedError(
                413, f"File exceeds the {self.max_file_bytes // (1024 * 1024)} MB limit"
            )
        if size == 0:
            raise UploadRejectedError(400, "Empty file")

    def execute(self, data: bytes, original_filename: str | None, content_type: str | None) -> StoredUpload:
        """
        Store one original image under the upload root.

        Optimizing it in place is scheduled separately by the caller so the
        upload response is not held back by re-encoding.

        Raises:
            UploadRejectedError: on a disallowed content type, an empty or oversize file
        """
        self.validate(content_type, len(data))
        return self.storage.save(data, original_filename, content_type or "application/octet-stream")
