from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class StoredUpload:
    filename: str  # product-{epoch_ms}-{random}{ext}
    path: Path
    content_type: str
    size: int  # bytes

    @property
    def url(self) -> str:
        return f"/uploads/{self.filename}"


@dataclass(frozen=True)
class CacheStats:
    file_count: int
    total_size: int  # bytes

    @property
    def total_size_mb(self) -> str:
        return f"{self.total_size / (1024 * 1024):.2f}"
