"""FastAPI dependency injection for layout services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from encimeras.domain.services.layout_engine import SpatialLayoutService


@lru_cache(maxsize=1)
def get_layout_service() -> SpatialLayoutService:
    """Get the shared layout service with the default slab thickness."""
    return SpatialLayoutService()


LayoutServiceDep = Annotated[SpatialLayoutService, Depends(get_layout_service)]
