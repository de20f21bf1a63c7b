"""File-backed storage for the three site documents.

Layout under the configured data directory:

    <data_dir>/status.json
    <data_dir>/gallery.json
    <data_dir>/hero-background.json

The design is intentionally simple:
- Files on disk are the only source of truth. Nothing is cached between
  calls; every read re-parses the file and every write rewrites it whole.
- A missing, unreadable or malformed file reads as the document's default.
  That failure is logged and never raised to the caller.
- Writes are last-write-wins. Two callers doing read-modify-write on the same
  document concurrently can lose an update; the site assumes one admin.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from exceptions.exceptions import StorageError
from ..models.site_models import GalleryRecord, HeroRecord, StatusRecord, utcnow


logger = logging.getLogger(__name__)

STATUS_FILENAME = "status.json"
GALLERY_FILENAME = "gallery.json"
HERO_FILENAME = "hero-background.json"

RecordT = TypeVar("RecordT", bound=BaseModel)


class SiteStore:
    """Read/write access to the status, gallery and hero documents.

    Parameters
    ----------
    data_dir:
        Directory holding the JSON documents. It is created by
        `initialize()` (or lazily on the first write).
    """

    def __init__(self, data_dir: Optional[str] = None) -> None:
        self._data_dir = Path(data_dir) if data_dir else Path("data")

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    @property
    def status_path(self) -> Path:
        return self._data_dir / STATUS_FILENAME

    @property
    def gallery_path(self) -> Path:
        return self._data_dir / GALLERY_FILENAME

    @property
    def hero_path(self) -> Path:
        return self._data_dir / HERO_FILENAME

    # ------------------------------------------------------------------
    # First run
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Create the data directory and any missing document.

        Existing documents are left untouched, even if they are corrupt;
        reads of a corrupt document fall back to the default anyway.
        """
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(self._data_dir, str(exc)) from exc

        defaults = (
            (self.status_path, StatusRecord().to_document()),
            (self.gallery_path, GalleryRecord().to_document()),
            (self.hero_path, HeroRecord().to_document()),
        )
        for path, document in defaults:
            if path.exists():
                continue
            self._write_document(path, document)
            logger.info("[STORE] Created %s", path)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def read_status(self) -> StatusRecord:
        return self._read_record(self.status_path, StatusRecord)

    def write_status(self, is_open: bool, notice: str = "") -> StatusRecord:
        """Persist a new status, stamped with the current time, and return it."""
        record = StatusRecord(is_open=is_open, notice=notice or "", last_updated=utcnow())
        self._write_document(self.status_path, record.to_document())
        return record

    # ------------------------------------------------------------------
    # Gallery
    # ------------------------------------------------------------------

    def read_gallery(self) -> GalleryRecord:
        return self._read_record(self.gallery_path, GalleryRecord)

    def write_gallery(self, record: GalleryRecord) -> GalleryRecord:
        self._write_document(self.gallery_path, record.to_document())
        return record

    # ------------------------------------------------------------------
    # Hero background
    # ------------------------------------------------------------------

    def read_hero(self) -> HeroRecord:
        return self._read_record(self.hero_path, HeroRecord)

    def write_hero(self, record: HeroRecord) -> HeroRecord:
        self._write_document(self.hero_path, record.to_document())
        return record

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_record(
        self,
        path: Path,
        model: Type[RecordT],
    ) -> RecordT:
        """Parse `path` into `model`, or return a fresh default."""
        if not path.is_file():
            logger.debug("[STORE] %s not found, using default", path)
            return model()

        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            return model.model_validate(data)
        except (OSError, ValueError, ValidationError) as exc:
            # json.JSONDecodeError and UnicodeDecodeError are ValueErrors.
            logger.warning("[STORE] Unreadable document %s, using default: %s", path, exc)
            return model()

    def _write_document(self, path: Path, document: dict) -> None:
        """Replace `path` with the pretty-printed JSON of `document`."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
                f.write("\n")
        except OSError as exc:
            logger.error("[STORE] Failed to write %s: %s", path, exc)
            raise StorageError(path, str(exc)) from exc
