"""Common DTOs for API responses and error handling."""
from __future__ import annotations

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response model."""
    detail: str = Field(..., description="Error message describing what went wrong", example="Image not found")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Health status", example="healthy")


class RootResponse(BaseModel):
    """Root endpoint response model."""
    status: str = Field(..., description="API status", example="ok")
    service: str = Field(..., description="Service name", example="shopfront-media")
    version: str = Field(..., description="API version", example="0.1.0")


class AdminInfoResponse(BaseModel):
    """Identity behind a valid admin token."""
    id: str = Field(..., description="Supabase user id", example="8f14e45f-ceea-467f-a0e6-1b2c3d4e5f60")
    email: str | None = Field(None, description="User email, when known", example="admin@example.com")
