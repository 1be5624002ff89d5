"""Pytest configuration and shared fixtures for countertop tests."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from encimeras.domain.catalogs import (
    AddonCatalog,
    AddonDefinition,
    MaterialCatalog,
    MaterialDefinition,
)
from encimeras.domain.commands import StageMaterial
from encimeras.domain.entities import MaterialSelection, Piece, ProjectState
from encimeras.domain.reducer import reduce
from encimeras.domain.value_objects import (
    AddonCategory,
    MeasurementKey,
    PieceLayout,
    PieceMeasurements,
)


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: tests that exercise the CLI or HTTP API")


# =============================================================================
# Materials and catalogs
# =============================================================================


@pytest.fixture
def material() -> MaterialSelection:
    """A staged HPL material with one selected attribute."""
    return MaterialSelection(
        material_id="HPL_RURAL",
        material_name="HPL Rural",
        selected_attributes={"MAT_FINISH": "OAK"},
    )


@pytest.fixture
def staged_state(material: MaterialSelection) -> ProjectState:
    """Empty project with the HPL material staged."""
    return reduce(ProjectState.empty(), StageMaterial(material))


@pytest.fixture
def addon_catalog() -> AddonCatalog:
    return AddonCatalog(
        [
            AddonDefinition(
                code="UNION_RECTA",
                name="Unión recta",
                category=AddonCategory.ENSAMBLAJE,
                required_measurements=(MeasurementKey.QUANTITY,),
                allowed_material_categories=frozenset({"HPL"}),
            ),
            AddonDefinition(
                code="UNION_INGLETE",
                name="Unión a inglete",
                category=AddonCategory.ENSAMBLAJE,
                required_measurements=(MeasurementKey.QUANTITY,),
                allowed_material_categories=frozenset({"HPL", "COMPACTO"}),
            ),
            AddonDefinition(
                code="FREGADERO",
                name="Hueco fregadero",
                category=AddonCategory.TRABAJO,
                required_measurements=(
                    MeasurementKey.QUANTITY,
                    MeasurementKey.WIDTH_MM,
                    MeasurementKey.HEIGHT_MM,
                ),
                allowed_material_categories=frozenset({"HPL"}),
            ),
            AddonDefinition(
                code="ZOCALO",
                name="Zócalo",
                category=AddonCategory.COMPLEMENTO,
                required_measurements=(MeasurementKey.LENGTH_ML,),
                allowed_material_categories=frozenset({"COMPACTO"}),
            ),
        ]
    )


@pytest.fixture
def material_catalog() -> MaterialCatalog:
    return MaterialCatalog(
        [
            MaterialDefinition(
                id="HPL_RURAL",
                name="HPL Rural",
                category="HPL",
                selectable_attributes={"MAT_FINISH": ("OAK", "WALNUT")},
            ),
            MaterialDefinition(id="COMPACT_BLACK", name="Compacto Negro", category="COMPACTO"),
        ]
    )


# =============================================================================
# Piece helpers
# =============================================================================


@pytest.fixture
def make_piece() -> Callable[..., Piece]:
    """Factory for pieces with measurements in millimeters."""

    def _make(
        piece_id: str,
        length_mm: float = 2000,
        width_mm: float = 600,
        layout: PieceLayout | None = None,
        **kwargs: Any,
    ) -> Piece:
        return Piece(
            id=piece_id,
            material_id=kwargs.pop("material_id", "HPL_RURAL"),
            measurements=PieceMeasurements(length_mm=length_mm, width_mm=width_mm),
            layout=layout,
            **kwargs,
        )

    return _make


# =============================================================================
# Project files
# =============================================================================


@pytest.fixture
def l_left_config() -> dict[str, Any]:
    """Project file for an L_LEFT shape with an assembly on the second piece."""
    return {
        "schema_version": "1.0",
        "material": {
            "material_id": "HPL_RURAL",
            "material_name": "HPL Rural",
            "selected_attributes": {"MAT_FINISH": "OAK"},
        },
        "shape_id": "L_LEFT",
        "pieces": [
            {"measurements": {"length_mm": 2400, "width_mm": 600}},
            {"addons": [{"code": "UNION_RECTA", "measurements": {"quantity": 1}}]},
        ],
        "catalog": {
            "addons": [
                {
                    "code": "UNION_RECTA",
                    "name": "Unión recta",
                    "category": "ENSAMBLAJE",
                    "required_measurements": ["quantity"],
                    "allowed_material_categories": ["HPL"],
                }
            ],
            "materials": [
                {
                    "id": "HPL_RURAL",
                    "name": "HPL Rural",
                    "category": "HPL",
                    "selectable_attributes": {"MAT_FINISH": ["OAK", "WALNUT"]},
                }
            ],
        },
    }
