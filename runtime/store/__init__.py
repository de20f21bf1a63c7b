"""
Storage abstractions for the CarBoot site runtime.

Includes:
- SiteStore: file-backed status, gallery and hero documents
"""
