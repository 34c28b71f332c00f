from __future__ import annotations

from fastapi import FastAPI

from shopfront_media.application.dtos.common_dto import HealthResponse, RootResponse
from shopfront_media.config import AppConfig, load_config
from shopfront_media.infrastructure.api.middlewares import add_default_middlewares
from shopfront_media.infrastructure.api.routes.admin_routes import router as admin_router
from shopfront_media.infrastructure.api.routes.media_routes import router as media_router
from shopfront_media.infrastructure.auth.supabase_client import SupabaseAuthAdapter
from shopfront_media.logging import configure_logging


def create_app(config: AppConfig | None = None) -> FastAPI:
    cfg = config or load_config()
    configure_logging(cfg.log_level)
    app = FastAPI(
        title="Shopfront Media",
        version="0.1.0",
        description="""
        ## Shopfront Media API

        Image service for the storefront: serves uploaded product images,
        builds resized / recompressed derivatives on demand and caches them
        on disk.

        ### Features
        - **Derivatives**: `GET /uploads/<file>?w=&q=&format=` with WebP
          negotiation through the `Accept` header
        - **Disk cache**: derivatives are stored under `<uploads>/.cache` and
          rebuilt when the original changes
        - **Uploads**: admin upload with in-place optimization and a WebP copy
        - **Cache administration**: clear the cache and read its statistics

        ### Authentication
        Admin endpoints (`/api/admin/*`) require a Bearer token in the
        Authorization header:
        ```
        Authorization: Bearer your-jwt-token
        ```

        ### Error Responses
        - **400 Bad Request**: Unsupported or empty upload
        - **401 Unauthorized**: Missing or invalid authentication token
        - **404 Not Found**: Source image does not exist
        - **413 Payload Too Large**: Upload exceeds the size limit
        - **422 Unprocessable Entity**: Validation error in request
        """,
    )
    app.state.config = cfg
    app.state.auth = SupabaseAuthAdapter(cfg.supabase)
    add_default_middlewares(app, cfg.env)

    @app.get(
        "/",
        response_model=RootResponse,
        summary="API Root",
        description="Get basic information about the media API",
    )
    def root():
        """Get API root information."""
        return {"status": "ok", "service": "shopfront-media", "version": app.version}

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Health Check",
        description="Check if the API service is running and healthy",
    )
    def health():
        """Check API health status."""
        return {"status": "healthy"}

    app.include_router(media_router)
    app.include_router(admin_router)
    return app


app = create_app()
