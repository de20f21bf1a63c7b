"""
Pydantic models used by the CarBoot site runtime.

Split into:
- site_models: StatusRecord + GalleryRecord/ImageEntry + HeroRecord
- api_models: HTTP request/response schemas
"""
