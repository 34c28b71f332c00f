from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

import structlog

from shopfront_media.domain.entities.derivative import (
    CacheStatus,
    DerivativeRequest,
    ImageFormat,
    NoTransform,
)
from shopfront_media.domain.services.cache_key import cache_key_for
from shopfront_media.domain.services.derivative_request import parse_derivative_request
from shopfront_media.domain.services.transcode_service import TranscodeError, TranscodeService
from shopfront_media.infrastructure.storage.derivative_cache import DerivativeCache
from shopfront_media.infrastructure.storage.upload_storage import UploadStorage

logger = structlog.get_logger(__name__)


class ImageNotFoundError(ValueError):
    """The requested source image does not exist under the upload root."""


@dataclass(frozen=True)
class OriginalImage:
    """Serve the file untouched (no parameters, or the pipeline failed)."""

    path: Path


@dataclass(frozen=True)
class DerivativeImage:
    content: bytes
    format: ImageFormat
    cache_status: CacheStatus  # HIT or MISS
    cache_path: Path

    @property
    def needs_store(self) -> bool:
        return self.cache_status is CacheStatus.MISS


@dataclass
class ServeImageUseCase:
    """
    Resolve an ``/uploads`` request to either the original file or a derivative.

    Flow:
    1. Parse w/q/format + Accept into NoTransform | DerivativeRequest
    2. NoTransform -> original file
    3. Build the cache key and check freshness against the source mtime
    4. HIT -> cached bytes; MISS -> transcode (off the event loop)
    5. Transcode failure -> original file

    Storing a fresh derivative is left to the caller so it can happen after the
    response is sent (see ``DerivativeCache.write``).
    """

    storage: UploadStorage
    cache: DerivativeCache
    transcoder: TranscodeService

    async def execute(
        self,
        relative_path: str,
        *,
        w: str | None = None,
        q: str | None = None,
        format: str | None = None,
        accept: str | None = None,
    ) -> OriginalImage | DerivativeImage:
        """
        Raises:
            ImageNotFoundError: if the source file is missing or outside the root
                (the cache directory counts as outside)
        """
        source = self.storage.resolve(relative_path)
        # derivatives are only reachable through their source image
        if source is None or source.is_relative_to(self.cache.cache_dir.resolve()):
            raise ImageNotFoundError("Image not found")

        parsed = parse_derivative_request(relative_path, w=w, q=q, format=format, accept=accept)
        if isinstance(parsed, NoTransform):
            if not source.is_file():
                raise ImageNotFoundError("Image not found")
            return OriginalImage(path=source)

        cache_path = self.cache.path_for(cache_key_for(parsed))
        status = await asyncio.to_thread(self.cache.lookup, source, cache_path)
        if status is CacheStatus.NOT_FOUND:
            raise ImageNotFoundError("Image not found")

        if status is CacheStatus.HIT:
            try:
                content = await asyncio.to_thread(self.cache.read, cache_path)
                return DerivativeImage(content, parsed.format, CacheStatus.HIT, cache_path)
            except FileNotFoundError:
                # entry removed between lookup and read (cache clear)
                logger.info("derivative_cache.vanished", path=str(cache_path))

        return await self._transcode(source, parsed, cache_path)

    async def _transcode(
        self, source: Path, request: DerivativeRequest, cache_path: Path
    ) -> OriginalImage | DerivativeImage:
        try:
            data = await asyncio.to_thread(source.read_bytes)
        except FileNotFoundError as exc:
            raise ImageNotFoundError("Image not found") from exc
        try:
            content = await asyncio.to_thread(self.transcoder.transcode, data, request)
        except TranscodeError as exc:
            logger.warning("transcode.failed", source=request.source_path, error=str(exc))
            return OriginalImage(path=source)
        return DerivativeImage(content, request.format, CacheStatus.MISS, cache_path)
