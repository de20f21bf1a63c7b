"""
Custom exceptions for the CarBoot site.

These exceptions are intentionally simple and descriptive.
They are used across:

  - runtime/store/
  - runtime/services/
  - runtime/api/

Placing them at the project root (exceptions/) avoids circular imports and
keeps exception types consistent across modules. The API layer maps each of
them to a `{"error": ...}` response with its own HTTP status code.

Read failures of the JSON documents are deliberately absent here: a missing
or corrupt document is replaced by its default inside the store and never
reaches a caller.
"""


class Unauthorized(Exception):
    """
    Raised when the supplied admin password does not match the configured one.
    """

    def __init__(self, message="Unauthorized"):
        super().__init__(message)


class MissingUpload(Exception):
    """
    Raised when an upload request carries no file part.
    """

    def __init__(self, message="No file uploaded"):
        super().__init__(message)


class RejectedUpload(Exception):
    """
    Raised when an uploaded file does not declare an image MIME type.

    Example:
        'image/jpeg'       ← accepted
        'application/pdf'  ← raises this exception
    """

    def __init__(self, mime_type):
        self.mime_type = mime_type
        msg = f"Only image files allowed (got {mime_type or 'no content type'})"
        super().__init__(msg)


class PayloadTooLarge(Exception):
    """
    Raised when an uploaded file exceeds the configured byte limit.

    `size` is the number of bytes received, which may be truncated at
    `limit + 1` when the caller bounds its read.
    """

    def __init__(self, size, limit):
        self.size = size
        self.limit = limit
        if limit >= 1024 * 1024:
            readable = f"{limit / (1024 * 1024):g} MB"
        else:
            readable = f"{limit} bytes"
        msg = f"File too large (limit is {readable})"
        super().__init__(msg)


class GalleryFull(Exception):
    """
    Raised when the gallery already holds the maximum number of images.
    """

    def __init__(self, limit):
        self.limit = limit
        super().__init__(f"Gallery full ({limit} max)")


class StorageError(Exception):
    """
    Raised when a document or an uploaded file cannot be written to disk.

    The exception contains the path that failed and the underlying reason.
    """

    def __init__(self, path, details=None):
        self.path = path
        self.details = details or "Write failed."
        msg = f"Storage error for path: {path}\nDetails: {self.details}"
        super().__init__(msg)
