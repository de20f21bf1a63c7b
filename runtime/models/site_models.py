"""
Document models for the CarBoot site.

These describe the three JSON documents owned by the SiteStore:
- StatusRecord: open/closed flag + notice
- GalleryRecord + ImageEntry: ordered list of uploaded gallery images
- HeroRecord: the single hero background image

Field names follow Python conventions; the aliases are the camelCase keys
used in the persisted files and in API responses.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StatusRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_open: bool = Field(default=False, alias="status")
    notice: str = ""
    last_updated: datetime = Field(default_factory=utcnow, alias="lastUpdated")

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class ImageEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filename: str                 # generated, unique within the gallery dir
    original_name: str = Field(alias="originalName")
    description: str = ""
    uploaded_at: datetime = Field(default_factory=utcnow, alias="uploadedAt")

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class GalleryRecord(BaseModel):
    images: List[ImageEntry] = Field(default_factory=list)

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class HeroRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filename: Optional[str] = None
    original_name: Optional[str] = Field(default=None, alias="originalName")
    uploaded_at: Optional[datetime] = Field(default=None, alias="uploadedAt")

    def to_document(self) -> dict:
        """Serialize for disk / API; `originalName` is omitted when unknown."""
        data = self.model_dump(mode="json", by_alias=True)
        if data.get("originalName") is None:
            data.pop("originalName", None)
        return data
