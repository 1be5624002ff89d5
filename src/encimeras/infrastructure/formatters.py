"""Text and JSON output for layouts, shapes and pricing payloads."""

from __future__ import annotations

import json
import math
from typing import Any, Sequence

from encimeras.domain.entities import Piece
from encimeras.domain.shape_catalog import ShapeVariation
from encimeras.domain.value_objects import LayoutResult, Placement, Vector3


def vector_to_dict(vector: Vector3) -> dict[str, float]:
    return {"x": vector.x, "y": vector.y, "z": vector.z}


def placement_to_dict(placement: Placement) -> dict[str, Any]:
    """Serialize one placement for a rendering client."""
    return {
        "piece_id": placement.piece_id,
        "size": {
            "length": placement.size.length,
            "thickness": placement.size.thickness,
            "depth": placement.size.depth,
        },
        "center": vector_to_dict(placement.center),
        "rotation_y": placement.rotation_y,
        "start_offset": placement.start_offset,
        "cursor_after": vector_to_dict(placement.cursor_after),
    }


def layout_to_dict(layout: LayoutResult) -> dict[str, Any]:
    return {
        "placements": [placement_to_dict(p) for p in layout.placements],
        "camera_target": vector_to_dict(layout.camera_target),
    }


def shape_to_dict(variation: ShapeVariation) -> dict[str, Any]:
    """Serialize a shape variation, layouts included when declared."""
    layouts = None
    if variation.piece_layouts is not None:
        layouts = [
            None
            if layout is None
            else {
                "order": layout.order,
                "rotation": layout.rotation,
                "connection_type": layout.connection_type.value,
                "joint_type": layout.joint_type.value if layout.joint_type else None,
            }
            for layout in variation.piece_layouts
        ]
    return {
        "id": variation.id,
        "group": variation.group,
        "name": variation.name,
        "required_count": variation.required_count,
        "default_measurements": [
            {"length_mm": m.length_mm, "width_mm": m.width_mm}
            for m in variation.default_measurements
        ],
        "piece_layouts": layouts,
    }


class LayoutFormatter:
    """Formats computed layouts as a table or JSON."""

    def format(self, layout: LayoutResult, pieces: Sequence[Piece] = ()) -> str:
        """Format placements as a table.

        Args:
            layout: Computed layout.
            pieces: Pieces the layout was computed from, used to show the
                nominal length next to the drawn length.
        """
        if not layout.placements:
            return "No pieces to lay out."

        nominal = {p.id: p.measurements.length_m for p in pieces}
        lines = [
            "COUNTERTOP LAYOUT",
            "=" * 86,
            f"{'Piece':<12} {'Length':>8} {'Drawn':>8} {'Depth':>7} {'Rot':>5} "
            f"{'Center (x, y, z)':<26} {'Trim':>6}",
            "-" * 86,
        ]
        for p in layout.placements:
            length = nominal.get(p.piece_id)
            length_text = f"{length:.3f}" if length is not None else "-"
            center = f"({p.center.x:.3f}, {p.center.y:.3f}, {p.center.z:.3f})"
            lines.append(
                f"{p.piece_id:<12} {length_text:>8} {p.size.length:>8.3f} "
                f"{p.size.depth:>7.3f} {round(math.degrees(-p.rotation_y)):>5} "
                f"{center:<26} {p.start_offset:>6.3f}"
            )
        lines.append("-" * 86)
        target = layout.camera_target
        lines.append(
            f"Camera target: ({target.x:.3f}, {target.y:.3f}, {target.z:.3f})  "
            f"[meters]"
        )
        return "\n".join(lines)

    def export(self, layout: LayoutResult) -> str:
        return json.dumps(layout_to_dict(layout), indent=2)


class ShapeCatalogFormatter:
    """Formats shape variations for listing and detail views."""

    def format_list(self, variations: Sequence[ShapeVariation]) -> str:
        if not variations:
            return "No shapes found."

        width = max(len(v.id) for v in variations)
        lines: list[str] = []
        group = None
        for variation in variations:
            if variation.group != group:
                if group is not None:
                    lines.append("")
                group = variation.group
                lines.append(f"{group}:")
            pieces = "piece" if variation.required_count == 1 else "pieces"
            lines.append(
                f"  {variation.id:<{width}}  {variation.name} "
                f"({variation.required_count} {pieces})"
            )
        return "\n".join(lines)

    def format_detail(self, variation: ShapeVariation) -> str:
        lines = [
            f"{variation.name} [{variation.id}]",
            "=" * 60,
            f"Group:  {variation.group}",
            f"Pieces: {variation.required_count}",
            "",
            f"{'#':<3} {'Length mm':>10} {'Width mm':>9}  Layout",
            "-" * 60,
        ]
        for i, m in enumerate(variation.default_measurements):
            layout = variation.layout_for(i)
            if layout is None:
                layout_text = "-"
            else:
                layout_text = (
                    f"order {layout.order}, rot {layout.rotation}, "
                    f"{layout.connection_type.value}"
                )
                if layout.joint_type is not None:
                    layout_text += f", {layout.joint_type.value}"
            lines.append(f"{i + 1:<3} {m.length_mm:>10g} {m.width_mm:>9g}  {layout_text}")
        return "\n".join(lines)

    def export(self, variations: Sequence[ShapeVariation]) -> str:
        return json.dumps([shape_to_dict(v) for v in variations], indent=2)
