from __future__ import annotations

from pydantic import BaseModel, Field


class ClearCacheResponse(BaseModel):
    """Response model for clearing the derivative cache."""
    success: bool = Field(True, description="Indicates the cache was cleared")
    message: str = Field(..., description="Human readable summary", example="Deleted 12 files from cache")
    deleted_count: int = Field(..., description="Number of cached derivatives removed", example=12, ge=0)


class CacheStatsResponse(BaseModel):
    """Response model for derivative cache statistics."""
    file_count: int = Field(..., description="Number of cached derivatives", example=42, ge=0)
    total_size: int = Field(..., description="Total size of the cache in bytes", example=3145728, ge=0)
    total_size_mb: str = Field(..., description="Total size in megabytes, two decimals", example="3.00")
