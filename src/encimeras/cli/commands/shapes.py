"""Shapes commands for browsing the shape variation catalog."""

import json
from typing import Annotated

import typer

from encimeras.domain.shape_catalog import (
    SHAPE_GROUPS,
    ShapeVariationNotFoundError,
    get_shape_variation,
    list_shape_variations,
)
from encimeras.infrastructure import ShapeCatalogFormatter, shape_to_dict

shapes_app = typer.Typer(
    name="shapes",
    help="Browse the countertop shape catalog.",
)


@shapes_app.command(name="list")
def list_shapes(
    group: Annotated[
        str | None,
        typer.Option("--group", "-g", help=f"Only show one group ({', '.join(SHAPE_GROUPS)})"),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the shapes as JSON"),
    ] = False,
) -> None:
    """List the available shape variations.

    Example:
        encimeras shapes list --group "FORMA L"
    """
    if group is not None and group not in SHAPE_GROUPS:
        typer.echo(f"Unknown group: {group}", err=True)
        typer.echo(f"Available groups: {', '.join(SHAPE_GROUPS)}", err=True)
        raise typer.Exit(code=1)

    variations = list_shape_variations(group)
    formatter = ShapeCatalogFormatter()
    if as_json:
        typer.echo(formatter.export(variations))
    else:
        typer.echo(formatter.format_list(variations))


@shapes_app.command(name="show")
def show_shape(
    shape_id: Annotated[str, typer.Argument(help="Shape variation id, e.g. L_LEFT")],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print the shape as JSON"),
    ] = False,
) -> None:
    """Show the pieces and layout of one shape variation."""
    try:
        variation = get_shape_variation(shape_id)
    except ShapeVariationNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(shape_to_dict(variation), indent=2))
    else:
        typer.echo(ShapeCatalogFormatter().format_detail(variation))
