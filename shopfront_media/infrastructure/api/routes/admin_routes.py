from __future__ import annotations

import asyncio

from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, UploadFile, status

from shopfront_media.application.dtos.cache_dto import CacheStatsResponse, ClearCacheResponse
from shopfront_media.application.dtos.common_dto import AdminInfoResponse, ErrorResponse
from shopfront_media.application.dtos.upload_dto import UploadImageResponse, UploadMultipleResponse
from shopfront_media.application.use_cases.manage_cache import CacheStatsUseCase, ClearCacheUseCase
from shopfront_media.application.use_cases.upload_image import UploadImageUseCase, UploadRejectedError
from shopfront_media.config import AppConfig
from shopfront_media.domain.services.optimize_service import OptimizeService
from shopfront_media.infrastructure.api.dependencies import (
    get_config,
    get_current_admin,
    get_derivative_cache,
    get_optimize_service,
    get_storage,
)
from shopfront_media.infrastructure.auth.supabase_client import AdminInfo
from shopfront_media.infrastructure.storage.derivative_cache import DerivativeCache
from shopfront_media.infrastructure.storage.upload_storage import UploadStorage

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(get_current_admin)],
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized - Invalid or missing authentication token"},
        422: {"description": "Validation Error - Invalid request format"},
    },
)


@router.get(
    "/me",
    response_model=AdminInfoResponse,
    summary="Current Admin",
    description="""
    Return the identity behind the bearer token. The admin UI calls this to
    check that a stored token is still valid.

    **Authentication required**: Yes (Bearer token)
    """,
    response_description="Admin user id and email",
)
def read_current_admin(admin: AdminInfo = Depends(get_current_admin)):
    return AdminInfoResponse(id=admin.id, email=admin.email)


def _upload_use_case(storage: UploadStorage, config: AppConfig) -> UploadImageUseCase:
    return UploadImageUseCase(
        storage=storage,
        allowed_content_types=config.upload_limits.allowed_content_types,
        max_file_bytes=config.upload_limits.max_file_bytes,
    )


async def _read_limited(file: UploadFile, limit: int) -> bytes:
    # one byte past the limit is enough to tell it was exceeded
    return await file.read(limit + 1)


@router.post(
    "/upload",
    response_model=UploadImageResponse,
    summary="Upload Product Image",
    description="""
    Upload one product image (multipart field `image`).

    **Supported formats**: JPEG, PNG, WEBP, GIF
    **Maximum file size**: 5 MB by default (`MAX_UPLOAD_BYTES`)
    **Authentication required**: Yes (Bearer token)

    After the response is sent the stored original is optimized in place:
    shrunk to at most 1600 px wide, re-encoded, and given a sibling WebP copy.
    """,
    response_description="URL and filename of the stored original",
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request - Unsupported or empty file"},
        413: {"model": ErrorResponse, "description": "Payload Too Large - File size exceeds limit"},
    },
)
async def upload_image(
    background_tasks: BackgroundTasks,
    image: UploadFile = File(..., description="Image file to upload"),
    config: AppConfig = Depends(get_config),
    storage: UploadStorage = Depends(get_storage),
    optimizer: OptimizeService = Depends(get_optimize_service),
):
    """Store an original image and schedule its optimization."""
    uc = _upload_use_case(storage, config)
    data = await _read_limited(image, config.upload_limits.max_file_bytes)
    try:
        stored = await asyncio.to_thread(uc.execute, data, image.filename, image.content_type)
    except UploadRejectedError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
    background_tasks.add_task(optimizer.optimize_in_place, stored.path)
    return UploadImageResponse(url=stored.url, filename=stored.filename)


@router.post(
    "/upload-multiple",
    response_model=UploadMultipleResponse,
    summary="Upload Several Product Images",
    description="""
    Upload up to 10 product images at once (multipart field `images`).

    All files are validated before any is stored; one rejected file rejects
    the whole request. Each stored original is optimized in place after the
    response is sent.

    **Authentication required**: Yes (Bearer token)
    """,
    response_description="URLs of the stored originals",
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request - Too many, unsupported or empty files"},
        413: {"model": ErrorResponse, "description": "Payload Too Large - A file exceeds the size limit"},
    },
)
async def upload_multiple(
    background_tasks: BackgroundTasks,
    images: list[UploadFile] = File(..., description="Image files to upload"),
    config: AppConfig = Depends(get_config),
    storage: UploadStorage = Depends(get_storage),
    optimizer: OptimizeService = Depends(get_optimize_service),
):
    """Store several originals and schedule their optimization."""
    if len(images) > config.upload_limits.max_files:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"At most {config.upload_limits.max_files} files per request",
        )
    uc = _upload_use_case(storage, config)
    payloads = []
    for image in images:
        data = await _read_limited(image, config.upload_limits.max_file_bytes)
        try:
            uc.validate(image.content_type, len(data))
        except UploadRejectedError as exc:
            raise HTTPException(status_code=exc.status_code, detail=f"{image.filename}: {exc.detail}") from exc
        payloads.append((data, image))

    urls: list[str] = []
    for data, image in payloads:
        stored = await asyncio.to_thread(uc.execute, data, image.filename, image.content_type)
        background_tasks.add_task(optimizer.optimize_in_place, stored.path)
        urls.append(stored.url)
    return UploadMultipleResponse(urls=urls, count=len(urls))


@router.delete(
    "/image-cache",
    response_model=ClearCacheResponse,
    summary="Clear Image Cache",
    description="""
    Delete every cached image derivative. Derivatives are rebuilt on demand
    by the next request for them.

    **Authentication required**: Yes (Bearer token)
    """,
    response_description="Number of cached files removed",
)
def clear_image_cache(cache: DerivativeCache = Depends(get_derivative_cache)):
    """Remove all cached derivatives."""
    deleted = ClearCacheUseCase(cache=cache).execute()
    return ClearCacheResponse(
        success=True,
        message=f"Deleted {deleted} files from cache",
        deleted_count=deleted,
    )


@router.get(
    "/image-cache/stats",
    response_model=CacheStatsResponse,
    summary="Image Cache Statistics",
    description="""
    Report the number of cached derivatives and their total size.

    **Authentication required**: Yes (Bearer token)
    """,
    response_description="Cache file count and size",
)
def image_cache_stats(cache: DerivativeCache = Depends(get_derivative_cache)):
    """Get derivative cache statistics."""
    stats = CacheStatsUseCase(cache=cache).execute()
    return CacheStatsResponse(
        file_count=stats.file_count,
        total_size=stats.total_size,
        total_size_mb=stats.total_size_mb,
    )
