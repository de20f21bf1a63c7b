"""
FastAPI application entry point for the CarBoot site runtime.

Responsibilities:
- create the FastAPI app
- construct shared singletons (SiteStore, UploadManager, AccessGuard)
- initialize data files and upload directories on startup
- include the public routes and the admin routes under /admin
- allow cross-origin requests from the configured origins
- map domain and unexpected exceptions to `{"error": ...}` JSON responses
- serve uploaded images under /uploads and the static site under /
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from configs.settings import Settings, settings
from exceptions.exceptions import (
    GalleryFull,
    MissingUpload,
    PayloadTooLarge,
    RejectedUpload,
    StorageError,
    Unauthorized,
)
from runtime.models.api_models import ClientConfig
from runtime.services.access_guard import AccessGuard
from runtime.services.upload_manager import UploadManager
from runtime.store.site_store import SiteStore
from . import admin_routes, site_routes


logger = logging.getLogger(__name__)


# HTTP status for each domain error raised by the stores / services.
ERROR_STATUS_CODES = {
    Unauthorized: 401,
    MissingUpload: 400,
    RejectedUpload: 400,
    GalleryFull: 400,
    PayloadTooLarge: 413,
    StorageError: 500,
}


async def _domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    if isinstance(exc, StorageError):
        # Paths stay in the server log, not in the response.
        logger.error("[SITE] %s %s failed: %s", request.method, request.url.path, exc)
        message = "Failed to save changes"
    else:
        message = str(exc)
    return JSONResponse({"error": message}, status_code=status_code)


async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("[SITE] Unexpected error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        {"error": exc.detail},
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
    )


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the application and its shared objects from `app_settings`."""
    app_settings = app_settings or settings

    # ---------------------------------------------------------------------------
    # Shared singletons
    # ---------------------------------------------------------------------------

    # Status / gallery / hero documents under the data directory.
    site_store = SiteStore(data_dir=str(app_settings.data_dir))

    # Image uploads under <uploads_dir>/gallery and <uploads_dir>/hero.
    upload_manager = UploadManager(
        store=site_store,
        uploads_dir=str(app_settings.uploads_dir),
        gallery_max_images=app_settings.gallery_max_images,
        gallery_max_bytes=app_settings.gallery_max_bytes,
        hero_max_bytes=app_settings.hero_max_bytes,
    )

    access_guard = AccessGuard(secret=app_settings.admin_password)

    client_config = ClientConfig(
        lazy_load_images=app_settings.lazy_load_images,
        defer_hero_load=app_settings.defer_hero_load,
        poll_interval_ms=app_settings.poll_interval_ms,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        site_store.initialize()
        upload_manager.ensure_directories()
        logger.info(
            "[SITE] Ready (data=%s, uploads=%s)",
            site_store.data_dir,
            upload_manager.uploads_dir,
        )
        yield

    # ---------------------------------------------------------------------------
    # FastAPI app + route registration
    # ---------------------------------------------------------------------------

    app = FastAPI(title="CarBoot Site", lifespan=lifespan)
    app.state.settings = app_settings

    # Browsers on other origins poll the public API (and may post the admin forms).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Initialize the router modules with our shared objects, then include them.
    site_routes.init_routes(site_store=site_store, client_config=client_config)
    admin_routes.init_routes(
        site_store=site_store,
        upload_manager=upload_manager,
        access_guard=access_guard,
    )
    app.include_router(site_routes.router)
    app.include_router(admin_routes.router, prefix="/admin")

    for exc_type in ERROR_STATUS_CODES:
        app.add_exception_handler(exc_type, _domain_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)

    # Uploaded images; the directory is created on startup.
    app.mount(
        "/uploads",
        StaticFiles(directory=str(app_settings.uploads_dir), check_dir=False),
        name="uploads",
    )

    # The public website itself, if one is deployed next to the server.
    # Mounted last so the API routes above take precedence.
    if app_settings.static_dir.is_dir():
        app.mount(
            "/",
            StaticFiles(directory=str(app_settings.static_dir), html=True),
            name="site",
        )
    else:
        logger.info("[SITE] No static site at %s; serving API only", app_settings.static_dir)

    return app


app = create_app()
