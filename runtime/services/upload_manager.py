"""UploadManager: image uploads for the gallery and the hero background.

Expected layout under the configured uploads directory:

    <uploads_dir>/gallery/gallery-<epoch-ms>-<random><ext>
    <uploads_dir>/hero/hero-background<ext>

Both operations validate the payload first, then write the file, and only
then record its metadata through the SiteStore. A failed file write leaves
the store untouched; a failed metadata write removes the new gallery file.
"""

import logging
import mimetypes
import secrets
import time
from pathlib import Path
from typing import Optional

from exceptions.exceptions import GalleryFull, PayloadTooLarge, RejectedUpload, StorageError
from ..models.site_models import GalleryRecord, HeroRecord, ImageEntry, utcnow
from ..store.site_store import SiteStore


logger = logging.getLogger(__name__)

GALLERY_SUBDIR = "gallery"
HERO_SUBDIR = "hero"
HERO_BASENAME = "hero-background"

DEFAULT_GALLERY_MAX_IMAGES = 10
DEFAULT_GALLERY_MAX_BYTES = 5 * 1024 * 1024
DEFAULT_HERO_MAX_BYTES = 10 * 1024 * 1024


def _extension_for(original_name: str, mime_type: str) -> str:
    """Return a lower-cased extension (".jpg") for the stored file.

    Taken from the original filename when it has one, otherwise guessed
    from the MIME type. May be empty.
    """
    suffix = Path(original_name or "").suffix.lower()
    if suffix and suffix[1:].isalnum():
        return suffix
    guessed = mimetypes.guess_extension(mime_type or "")
    return guessed or ""


class UploadManager:
    """Validate and persist uploaded images.

    Parameters
    ----------
    store:
        SiteStore receiving the gallery / hero metadata.
    uploads_dir:
        Root directory for uploaded files; `gallery/` and `hero/` are
        created beneath it by `ensure_directories()`.
    gallery_max_images, gallery_max_bytes, hero_max_bytes:
        Upload limits.
    """

    def __init__(
        self,
        store: SiteStore,
        uploads_dir: Optional[str] = None,
        gallery_max_images: int = DEFAULT_GALLERY_MAX_IMAGES,
        gallery_max_bytes: int = DEFAULT_GALLERY_MAX_BYTES,
        hero_max_bytes: int = DEFAULT_HERO_MAX_BYTES,
    ) -> None:
        self.store = store
        self.uploads_dir = Path(uploads_dir) if uploads_dir else Path("uploads")
        self.gallery_max_images = gallery_max_images
        self.gallery_max_bytes = gallery_max_bytes
        self.hero_max_bytes = hero_max_bytes

    @property
    def gallery_dir(self) -> Path:
        return self.uploads_dir / GALLERY_SUBDIR

    @property
    def hero_dir(self) -> Path:
        return self.uploads_dir / HERO_SUBDIR

    def ensure_directories(self) -> None:
        for directory in (self.gallery_dir, self.hero_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise StorageError(directory, str(exc)) from exc

    # ------------------------------------------------------------------
    # Gallery
    # ------------------------------------------------------------------

    def store_gallery_image(
        self,
        data: bytes,
        mime_type: Optional[str],
        original_name: str,
        description: str = "",
    ) -> ImageEntry:
        """Save a gallery image and append its entry to the gallery.

        Raises
        ------
        RejectedUpload
            If `mime_type` is not an image type.
        PayloadTooLarge
            If `data` exceeds the gallery byte limit.
        GalleryFull
            If the gallery already holds the maximum number of images.
        StorageError
            If the file or the gallery document cannot be written.
        """
        self._check_payload(data, mime_type, self.gallery_max_bytes)

        gallery = self.store.read_gallery()
        if len(gallery.images) >= self.gallery_max_images:
            logger.warning("[UPLOAD] Gallery full (%d images), rejecting %r",
                           len(gallery.images), original_name)
            raise GalleryFull(self.gallery_max_images)

        path = self._unique_gallery_path(_extension_for(original_name, mime_type))
        self._write_file(path, data)

        entry = ImageEntry(
            filename=path.name,
            original_name=original_name or path.name,
            description=description or "",
            uploaded_at=utcnow(),
        )
        updated = GalleryRecord(images=[*gallery.images, entry])
        try:
            self.store.write_gallery(updated)
        except StorageError:
            path.unlink(missing_ok=True)
            raise

        logger.info("[UPLOAD] Gallery image %s stored (%d bytes, %d/%d)",
                    path.name, len(data), len(updated.images), self.gallery_max_images)
        return entry

    def _unique_gallery_path(self, extension: str) -> Path:
        while True:
            suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
            path = self.gallery_dir / f"gallery-{suffix}{extension}"
            if not path.exists():
                return path

    # ------------------------------------------------------------------
    # Hero background
    # ------------------------------------------------------------------

    def store_hero_image(
        self,
        data: bytes,
        mime_type: Optional[str],
        original_name: str,
    ) -> HeroRecord:
        """Save the hero background and replace the hero record.

        The file is always named `hero-background<ext>`; an existing file
        with the same extension is overwritten. A previous hero file with a
        different extension stays on disk.
        """
        self._check_payload(data, mime_type, self.hero_max_bytes)

        path = self.hero_dir / f"{HERO_BASENAME}{_extension_for(original_name, mime_type)}"
        self._write_file(path, data)

        record = HeroRecord(
            filename=path.name,
            original_name=original_name or path.name,
            uploaded_at=utcnow(),
        )
        self.store.write_hero(record)

        logger.info("[UPLOAD] Hero background %s stored (%d bytes)", path.name, len(data))
        return record

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check_payload(self, data: bytes, mime_type: Optional[str], limit: int) -> None:
        if not mime_type or not mime_type.lower().startswith("image/"):
            logger.warning("[UPLOAD] Rejected content type %r", mime_type)
            raise RejectedUpload(mime_type)
        if len(data) > limit:
            logger.warning("[UPLOAD] Rejected payload of %d bytes (limit %d)", len(data), limit)
            raise PayloadTooLarge(len(data), limit)

    def _write_file(self, path: Path, data: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            logger.error("[UPLOAD] Failed to write %s: %s", path, exc)
            raise StorageError(path, str(exc)) from exc
