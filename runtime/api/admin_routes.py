"""HTTP routes for the admin side of the CarBoot site.

Exposes endpoints like:

- GET  /admin                -> HTML admin panel
- POST /admin/update-status  -> takes (password, status, notice), form or JSON
- POST /admin/upload-gallery -> takes (password, image, description), multipart
- POST /admin/upload-hero    -> takes (password, image), multipart

Every POST checks the admin password first. Domain errors (Unauthorized,
RejectedUpload, GalleryFull, ...) propagate to the exception handlers
registered by the server, which turn them into `{"error": ...}` responses.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import HTMLResponse

from exceptions.exceptions import MissingUpload
from ..models.api_models import (
    ErrorResponse,
    GalleryUploadResponse,
    HeroUploadResponse,
    StatusUpdateResponse,
)
from ..services.access_guard import AccessGuard
from ..services.upload_manager import UploadManager
from ..store.site_store import SiteStore
from .admin_page import render_admin_page


logger = logging.getLogger(__name__)

# Router for all admin endpoints; every failure body is `{"error": ...}`.
router = APIRouter(
    responses={
        400: {"model": ErrorResponse, "description": "Missing file, non-image or gallery full"},
        401: {"model": ErrorResponse, "description": "Wrong or missing admin password"},
        413: {"model": ErrorResponse, "description": "Upload over the size limit"},
        500: {"model": ErrorResponse, "description": "Storage failure"},
    },
)


# Module-level references, to be initialized by the server.
_SITE_STORE: Optional[SiteStore] = None
_UPLOAD_MANAGER: Optional[UploadManager] = None
_ACCESS_GUARD: Optional[AccessGuard] = None


def init_routes(
    site_store: SiteStore,
    upload_manager: UploadManager,
    access_guard: AccessGuard,
) -> None:
    """Initialize module-level references used by the route handlers."""
    global _SITE_STORE, _UPLOAD_MANAGER, _ACCESS_GUARD
    _SITE_STORE = site_store
    _UPLOAD_MANAGER = upload_manager
    _ACCESS_GUARD = access_guard


def _require_site_store() -> SiteStore:
    if _SITE_STORE is None:
        raise HTTPException(
            status_code=500,
            detail="SiteStore is not configured on the server.",
        )
    return _SITE_STORE


def _require_upload_manager() -> UploadManager:
    if _UPLOAD_MANAGER is None:
        raise HTTPException(
            status_code=500,
            detail="UploadManager is not configured on the server.",
        )
    return _UPLOAD_MANAGER


def _require_access_guard() -> AccessGuard:
    if _ACCESS_GUARD is None:
        raise HTTPException(
            status_code=500,
            detail="AccessGuard is not configured on the server.",
        )
    return _ACCESS_GUARD


def parse_status_flag(value: Any) -> bool:
    """Only boolean True or the string "true" (any case) mean open."""
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() == "true"


async def _read_body(request: Request) -> Dict[str, Any]:
    """Return the request body as a dict, from JSON or form encoding."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid JSON body")
        if not isinstance(data, dict):
            raise HTTPException(status_code=400, detail="Expected a JSON object")
        return data

    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


@router.get("", response_class=HTMLResponse)
async def admin_home() -> HTMLResponse:
    site_store = _require_site_store()
    manager = _require_upload_manager()
    html = render_admin_page(
        status=site_store.read_status(),
        gallery=site_store.read_gallery(),
        gallery_max=manager.gallery_max_images,
    )
    return HTMLResponse(html)


@router.post("/update-status", response_model=StatusUpdateResponse)
async def update_status(request: Request) -> StatusUpdateResponse:
    """Set the open/closed flag and the notice.

    Accepts `application/json` or form-encoded bodies with the fields
    `password`, `status` and `notice`.
    """
    body = await _read_body(request)
    _require_access_guard().require(body.get("password"))

    notice = body.get("notice") or ""
    if not isinstance(notice, str):
        notice = str(notice)

    record = _require_site_store().write_status(
        is_open=parse_status_flag(body.get("status")),
        notice=notice,
    )
    logger.info("[ADMIN] Status set to %s", "OPEN" if record.is_open else "CLOSED")
    return StatusUpdateResponse(data=record)


def _has_file(image: Optional[UploadFile]) -> bool:
    # Browsers submit an empty, unnamed part when no file was chosen.
    return image is not None and bool(image.filename)


@router.post("/upload-gallery", response_model=GalleryUploadResponse)
async def upload_gallery(
    password: Optional[str] = Form(None),
    description: str = Form(""),
    image: Optional[UploadFile] = File(None),
) -> GalleryUploadResponse:
    _require_access_guard().require(password)
    manager = _require_upload_manager()

    if not _has_file(image):
        raise MissingUpload()

    try:
        # One byte past the limit is enough to reject an oversized file.
        data = await image.read(manager.gallery_max_bytes + 1)
        entry = manager.store_gallery_image(
            data=data,
            mime_type=image.content_type,
            original_name=image.filename,
            description=description,
        )
    finally:
        await image.close()

    return GalleryUploadResponse(image=entry)


@router.post("/upload-hero", response_model=HeroUploadResponse)
async def upload_hero(
    password: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
) -> HeroUploadResponse:
    _require_access_guard().require(password)
    manager = _require_upload_manager()

    if not _has_file(image):
        raise MissingUpload()

    try:
        data = await image.read(manager.hero_max_bytes + 1)
        record = manager.store_hero_image(
            data=data,
            mime_type=image.content_type,
            original_name=image.filename,
        )
    finally:
        await image.close()

    return HeroUploadResponse(hero=record)
