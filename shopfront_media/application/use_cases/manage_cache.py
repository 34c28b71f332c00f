from __future__ import annotations

from dataclasses import dataclass

from shopfront_media.domain.entities.upload import CacheStats
from shopfront_media.infrastructure.storage.derivative_cache import DerivativeCache


@dataclass
class ClearCacheUseCase:
    cache: DerivativeCache

    def execute(self) -> int:
        """Delete every cached derivative. Returns the number of files removed."""
        return self.cache.clear()


@dataclass
class CacheStatsUseCase:
    cache: DerivativeCache

    def execute(self) -> CacheStats:
        return self.cache.stats()
