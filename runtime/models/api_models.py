"""
HTTP request/response models for the CarBoot site API.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .site_models import HeroRecord, ImageEntry, StatusRecord


class StatusUpdateResponse(BaseModel):
    success: bool = True
    data: StatusRecord


class GalleryUploadResponse(BaseModel):
    success: bool = True
    image: ImageEntry


class HeroUploadResponse(BaseModel):
    success: bool = True
    hero: HeroRecord


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "OK"
    timestamp: datetime


class ClientConfig(BaseModel):
    """
    Capabilities of the browser client.

    A single client implementation reads this record instead of shipping a
    separate "mobile-optimized" variant:

    - lazy_load_images: defer gallery image loading until visible
    - defer_hero_load: apply the hero background after first paint
    - poll_interval_ms: how often the page re-fetches status/gallery/hero
    """
    model_config = ConfigDict(populate_by_name=True)

    lazy_load_images: bool = Field(default=False, alias="lazyLoadImages")
    defer_hero_load: bool = Field(default=False, alias="deferHeroLoad")
    poll_interval_ms: int = Field(default=30000, alias="pollIntervalMs")
