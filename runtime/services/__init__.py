"""
Admin-side services for the CarBoot site runtime.

Includes:
- AccessGuard: shared admin password check
- UploadManager: gallery / hero image uploads
"""
