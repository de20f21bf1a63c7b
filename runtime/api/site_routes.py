"""Public HTTP routes for the CarBoot site.

Exposes read-only endpoints polled by the browser:

- GET /api/status           -> status document
- GET /api/gallery          -> gallery document
- GET /api/hero-background  -> hero background document
- GET /api/client-config    -> client capability record
- GET /health               -> liveness probe
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException

from ..models.api_models import ClientConfig, HealthResponse
from ..store.site_store import SiteStore


# Router for all public endpoints
router = APIRouter()


# Module-level references, to be initialized by the server.
_SITE_STORE: Optional[SiteStore] = None
_CLIENT_CONFIG: Optional[ClientConfig] = None


def init_routes(site_store: SiteStore, client_config: ClientConfig) -> None:
    """Initialize module-level references used by the route handlers."""
    global _SITE_STORE, _CLIENT_CONFIG
    _SITE_STORE = site_store
    _CLIENT_CONFIG = client_config


def _require_site_store() -> SiteStore:
    if _SITE_STORE is None:
        raise HTTPException(
            status_code=500,
            detail="SiteStore is not configured on the server.",
        )
    return _SITE_STORE


@router.get("/api/status")
async def get_status() -> dict:
    return _require_site_store().read_status().to_document()


@router.get("/api/gallery")
async def get_gallery() -> dict:
    return _require_site_store().read_gallery().to_document()


@router.get("/api/hero-background")
async def get_hero_background() -> dict:
    return _require_site_store().read_hero().to_document()


@router.get("/api/client-config", response_model=ClientConfig)
async def get_client_config() -> ClientConfig:
    """Capabilities the single browser client adapts to (lazy images, polling)."""
    return _CLIENT_CONFIG or ClientConfig()


# --------------------------------------------------------
# Endpoint: GET /health
# --------------------------------------------------------
@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """
    Simple health check endpoint for uptime monitoring.
    """
    return HealthResponse(timestamp=datetime.now(timezone.utc))
