from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends, Header, HTTPException, Query
from fastapi.responses import Response

from shopfront_media.application.dtos.common_dto import ErrorResponse

from shopfront_media.application.use_cases.serve_image import (
    ImageNotFoundError,
    OriginalImage,
    ServeImageUseCase,
)
from shopfront_media.domain.services.transcode_service import TranscodeService
from shopfront_media.infrastructure.api.dependencies import (
    get_derivative_cache,
    get_storage,
    get_transcode_service,
)
from shopfront_media.infrastructure.storage.derivative_cache import DerivativeCache
from shopfront_media.infrastructure.storage.upload_storage import LONG_CACHE_CONTROL, UploadStorage

router = APIRouter(
    prefix="/uploads",
    tags=["Images"],
    responses={
        404: {"model": ErrorResponse, "description": "Not Found - Source image does not exist"},
    },
)


@router.get(
    "/{file_path:path}",
    summary="Get Image",
    description="""
    Serve an uploaded product image, optionally as an optimized derivative.

    **Query parameters** (all optional):
    - `w`: target width, clamped to 100-2000 px; aspect ratio kept, never upscaled
    - `q`: quality, clamped to 1-100, default 80
    - `format`: `webp`, `jpeg` or `png`; when omitted, `image/webp` in the
      `Accept` header selects WebP, otherwise the source format is kept

    Without any of these parameters the original file is returned as is.
    Derivatives are cached on disk; the `X-Image-Cache` header reports `HIT`
    or `MISS`. If the image cannot be processed the original is returned.
    """,
    response_description="Image bytes",
    responses={200: {"content": {"image/*": {}}, "description": "Image content"}},
)
async def get_image(
    file_path: str,
    background_tasks: BackgroundTasks,
    w: str | None = Query(None, description="Target width in pixels (100-2000)"),
    q: str | None = Query(None, description="Output quality (1-100, default 80)"),
    output_format: str | None = Query(None, alias="format", description="Output format: webp, jpeg or png"),
    accept: str | None = Header(None),
    storage: UploadStorage = Depends(get_storage),
    cache: DerivativeCache = Depends(get_derivative_cache),
    transcoder: TranscodeService = Depends(get_transcode_service),
):
    """Serve an original image or a cached/freshly built derivative."""
    uc = ServeImageUseCase(storage=storage, cache=cache, transcoder=transcoder)
    try:
        result = await uc.execute(file_path, w=w, q=q, format=output_format, accept=accept)
    except ImageNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    if isinstance(result, OriginalImage):
        return storage.serve_original(result.path)

    if result.needs_store:
        # runs after the response has been sent
        background_tasks.add_task(cache.write, result.cache_path, result.content)
    return Response(
        content=result.content,
        media_type=result.format.content_type,
        headers={
            "Cache-Control": LONG_CACHE_CONTROL,
            "X-Image-Cache": result.cache_status.name,
        },
    )
