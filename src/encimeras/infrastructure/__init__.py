"""Infrastructure layer - output formatters."""

from .formatters import (
    LayoutFormatter,
    ShapeCatalogFormatter,
    layout_to_dict,
    placement_to_dict,
    shape_to_dict,
    vector_to_dict,
)

__all__ = [
    "LayoutFormatter",
    "ShapeCatalogFormatter",
    "layout_to_dict",
    "placement_to_dict",
    "shape_to_dict",
    "vector_to_dict",
]
