"""API routers for the REST API."""

from encimeras.web.routers.layout import router as layout_router
from encimeras.web.routers.shapes import router as shapes_router
from encimeras.web.routers.validate import router as validate_router

__all__ = [
    "layout_router",
    "shapes_router",
    "validate_router",
]
