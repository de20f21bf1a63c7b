"""
Runtime package for the CarBoot site server.

This package contains:
- API layer (FastAPI server, public routes, admin routes + admin page)
- Services (admin password check, image uploads)
- Stores (status, gallery and hero JSON documents)
- Models (Pydantic documents and request/response schemas)
"""
