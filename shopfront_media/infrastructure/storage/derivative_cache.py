from __future__ import annotations

import contextlib
import os
import stat
import uuid
from pathlib import Path

import structlog

from shopfront_media.domain.entities.derivative import CacheStatus
from shopfront_media.domain.entities.upload import CacheStats

logger = structlog.get_logger(__name__)


class DerivativeCache:
    """Disk-backed cache of image derivatives under ``<upload root>/.cache``.

    The directory is the only index: entries are located by building their path
    from the cache key, never by scanning. An entry is fresh only while its mtime
    is strictly later than the source image's mtime.
    """

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = cache_dir
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.cache_dir / key

    def lookup(self, source: Path, cache_path: Path) -> CacheStatus:
        try:
            source_mtime = source.stat().st_mtime_ns
        except FileNotFoundError:
            return CacheStatus.NOT_FOUND
        if not source.is_file():
            return CacheStatus.NOT_FOUND
        try:
            cache_stat = cache_path.stat()
        except FileNotFoundError:
            return CacheStatus.MISS
        if not stat.S_ISREG(cache_stat.st_mode):
            return CacheStatus.MISS
        return CacheStatus.HIT if cache_stat.st_mtime_ns > source_mtime else CacheStatus.MISS

    def read(self, cache_path: Path) -> bytes:
        return cache_path.read_bytes()

    def write(self, cache_path: Path, data: bytes) -> bool:
        """Persist a derivative. Best effort: failures are logged, never raised."""
        tmp_path = cache_path.with_name(f".{cache_path.name}.{uuid.uuid4().hex}.tmp")
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            tmp_path.write_bytes(data)
            # last writer wins; readers never see a partial file
            os.replace(tmp_path, cache_path)
        except OSError as exc:
            logger.warning("derivative_cache.write_failed", path=str(cache_path), error=str(exc))
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            return False
        logger.debug("derivative_cache.stored", path=str(cache_path), size=len(data))
        return True

    def _entries(self) -> list[Path]:
        if not self.cache_dir.exists():
            return []
        return [p for p in self.cache_dir.iterdir() if p.is_file()]

    def clear(self) -> int:
        deleted = 0
        for entry in self._entries():
            entry.unlink(missing_ok=True)
            deleted += 1
        logger.info("derivative_cache.cleared", deleted=deleted)
        return deleted

    def stats(self) -> CacheStats:
        total = 0
        count = 0
        for entry in self._entries():
            try:
                total += entry.stat().st_size
            except FileNotFoundError:
                # removed by a concurrent clear
                continue
            count += 1
        return CacheStats(file_count=count, total_size=total)
