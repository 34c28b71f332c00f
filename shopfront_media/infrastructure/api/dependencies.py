from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shopfront_media.config import AppConfig
from shopfront_media.domain.services.optimize_service import OptimizeService
from shopfront_media.domain.services.transcode_service import TranscodeService
from shopfront_media.infrastructure.auth.supabase_client import AdminInfo, SupabaseAuthAdapter
from shopfront_media.infrastructure.storage.derivative_cache import DerivativeCache
from shopfront_media.infrastructure.storage.upload_storage import UploadStorage

_bearer_scheme = HTTPBearer(auto_error=False)


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_auth_adapter(request: Request) -> SupabaseAuthAdapter:
    return request.app.state.auth


def get_current_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(_bearer_scheme)] = None,
    auth: Annotated[SupabaseAuthAdapter, Depends(get_auth_adapter)] = None,
) -> AdminInfo:
    if not credentials or not credentials.scheme or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    token = credentials.credentials
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    try:
        return auth.validate_token(token)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))


def get_storage(config: Annotated[AppConfig, Depends(get_config)]) -> UploadStorage:
    return UploadStorage(config.uploads_dir)


def get_derivative_cache(config: Annotated[AppConfig, Depends(get_config)]) -> DerivativeCache:
    return DerivativeCache(config.cache_dir)


def get_transcode_service() -> TranscodeService:
    return TranscodeService()


def get_optimize_service(config: Annotated[AppConfig, Depends(get_config)]) -> OptimizeService:
    return OptimizeService(max_width=config.optimize.max_width, quality=config.optimize.quality)
