"""Application configuration builder."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

CACHE_DIR_NAME = ".cache"


@dataclass(slots=True)
class UploadLimits:
    allowed_content_types: Sequence[str]
    max_file_bytes: int
    max_files: int


@dataclass(slots=True)
class OptimizeSettings:
    max_width: int
    quality: int


@dataclass(slots=True)
class SupabaseSettings:
    disabled: bool
    url: str | None
    anon_key: str | None


@dataclass(slots=True)
class AppConfig:
    uploads_dir: Path
    cache_dir: Path
    upload_limits: UploadLimits
    optimize: OptimizeSettings
    supabase: SupabaseSettings
    env: str
    log_level: str


def _ensure_dirs(config: AppConfig) -> None:
    config.uploads_dir.mkdir(parents=True, exist_ok=True)
    config.cache_dir.mkdir(parents=True, exist_ok=True)


def load_config(uploads_dir: Path | None = None) -> AppConfig:
    """Load configuration from environment. `uploads_dir` overrides UPLOADS_DIR."""
    root = uploads_dir or Path(os.getenv("UPLOADS_DIR", "uploads"))

    upload_limits = UploadLimits(
        allowed_content_types=("image/jpeg", "image/png", "image/webp", "image/gif"),
        max_file_bytes=int(os.getenv("MAX_UPLOAD_BYTES", 5 * 1024 * 1024)),
        max_files=int(os.getenv("UPLOAD_MAX_FILES", 10)),
    )
    optimize = OptimizeSettings(
        max_width=int(os.getenv("OPTIMIZE_MAX_WIDTH", 1600)),
        quality=int(os.getenv("OPTIMIZE_QUALITY", 85)),
    )
    supabase = SupabaseSettings(
        disabled=os.getenv("SUPABASE_DISABLED", "0") == "1",
        url=os.getenv("SUPABASE_URL"),
        anon_key=os.getenv("SUPABASE_ANON_KEY"),
    )

    config = AppConfig(
        uploads_dir=root,
        cache_dir=root / CACHE_DIR_NAME,
        upload_limits=upload_limits,
        optimize=optimize,
        supabase=supabase,
        env=os.getenv("ENV", "development"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
    _ensure_dirs(config)
    return config
