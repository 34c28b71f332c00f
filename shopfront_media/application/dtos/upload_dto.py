from __future__ import annotations

from pydantic import BaseModel, Field


class UploadImageResponse(BaseModel):
    """Response model for a single image upload."""
    url: str = Field(..., description="Public URL of the stored original", example="/uploads/product-1718000000000-123456789.jpg")
    filename: str = Field(..., description="Generated filename under the upload root", example="product-1718000000000-123456789.jpg")


class UploadMultipleResponse(BaseModel):
    """Response model for a multi-file upload."""
    urls: list[str] = Field(..., description="Public URLs of the stored originals, in upload order")
    count: int = Field(..., description="Number of files stored", example=3, ge=1)
