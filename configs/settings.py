from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings:
    """
    Central configuration for the CarBoot site.

    Values are loaded once from environment variables (with sensible defaults)
    and then exposed via typed properties.
    """

    def __init__(self) -> None:
        # Admin secret. Left unset, every mutating request is denied.
        self._admin_password = os.getenv("SITE_ADMIN_PASSWORD") or None

        # Data, upload and static site paths
        self._data_dir = Path(os.getenv("SITE_DATA_DIR", "data"))
        self._uploads_dir = Path(os.getenv("SITE_UPLOADS_DIR", "uploads"))
        self._static_dir = Path(os.getenv("SITE_STATIC_DIR", "site"))

        # Upload limits
        self._gallery_max_images = _env_int("SITE_GALLERY_MAX_IMAGES", 10)
        self._gallery_max_bytes = _env_int("SITE_GALLERY_MAX_BYTES", 5 * 1024 * 1024)
        self._hero_max_bytes = _env_int("SITE_HERO_MAX_BYTES", 10 * 1024 * 1024)

        # Client capabilities
        self._poll_interval_ms = _env_int("SITE_POLL_INTERVAL_MS", 30000)
        self._lazy_load_images = _env_bool("SITE_LAZY_LOAD_IMAGES", False)
        self._defer_hero_load = _env_bool("SITE_DEFER_HERO_LOAD", False)

        # Origins allowed to call the API from the browser
        self._cors_origins = _env_list("SITE_CORS_ORIGINS", ["*"])

        # Server
        self._host = os.getenv("HOST", "0.0.0.0")
        self._port = _env_int("PORT", 3000)
        self._log_level = os.getenv("SITE_LOG_LEVEL", "INFO").upper()

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    @property
    def admin_password(self) -> Optional[str]:
        return self._admin_password

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def uploads_dir(self) -> Path:
        return self._uploads_dir

    @property
    def static_dir(self) -> Path:
        return self._static_dir

    # ------------------------------------------------------------------
    # Upload limits
    # ------------------------------------------------------------------

    @property
    def gallery_max_images(self) -> int:
        return self._gallery_max_images

    @property
    def gallery_max_bytes(self) -> int:
        return self._gallery_max_bytes

    @property
    def hero_max_bytes(self) -> int:
        return self._hero_max_bytes

    # ------------------------------------------------------------------
    # Client capabilities
    # ------------------------------------------------------------------

    @property
    def poll_interval_ms(self) -> int:
        return self._poll_interval_ms

    @property
    def lazy_load_images(self) -> bool:
        return self._lazy_load_images

    @property
    def defer_hero_load(self) -> bool:
        return self._defer_hero_load

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    @property
    def cors_origins(self) -> List[str]:
        return list(self._cors_origins)

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def log_level(self) -> str:
        return self._log_level


settings = Settings()
