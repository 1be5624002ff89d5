"""Typer CLI for countertop projects."""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from encimeras.application import ProjectSession, to_pricing_payload
from encimeras.application.config import (
    ConfigError,
    ProjectConfiguration,
    config_to_state,
    load_config,
    project_to_snapshot_config,
)
from encimeras.cli.commands import display_load_error, shapes_app, validate_command
from encimeras.domain.entities import ProjectState
from encimeras.domain.services.layout_engine import (
    PIECE_THICKNESS_M,
    SpatialLayoutService,
    check_layout_contract,
)
from encimeras.infrastructure import LayoutFormatter

app = typer.Typer(
    name="encimeras",
    help="Configure countertop projects: shapes, pieces, addons and 3D layout.",
)

app.command(name="validate")(validate_command)
app.add_typer(shapes_app, name="shapes")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """Countertop project configurator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_project(config_file: Path) -> tuple[ProjectConfiguration, ProjectState]:
    try:
        config = load_config(config_file)
        return config, config_to_state(config)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)


@app.command()
def layout(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON project file"),
    ],
    as_json: Annotated[
        bool,
        typer.Option("--json", help="Print placements as JSON for a renderer"),
    ] = False,
    thickness: Annotated[
        float,
        typer.Option("--thickness", "-t", min=0.001, help="Slab thickness in meters"),
    ] = PIECE_THICKNESS_M,
) -> None:
    """Compute the 3D placement of every piece in a project."""
    _, state = _load_project(config_file)

    for warning in check_layout_contract(state.pieces):
        typer.echo(f"Warning: {warning}", err=True)

    session = ProjectSession(state, layout_service=SpatialLayoutService(thickness=thickness))
    result = session.layout()
    formatter = LayoutFormatter()
    if as_json:
        typer.echo(formatter.export(result))
    else:
        typer.echo(formatter.format(result, state.pieces))


@app.command()
def payload(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON project file"),
    ],
) -> None:
    """Print the pricing request body for a project."""
    _, state = _load_project(config_file)
    typer.echo(json.dumps(to_pricing_payload(state.pieces), indent=2))


@app.command()
def snapshot(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON project file"),
    ],
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the snapshot to a file"),
    ] = None,
) -> None:
    """Build a project and print it as a saved-project snapshot."""
    _, state = _load_project(config_file)
    text = project_to_snapshot_config(state).model_dump_json(indent=2)
    if output_file is None:
        typer.echo(text)
        return
    output_file.write_text(text + "\n", encoding="utf-8")
    typer.echo(f"Snapshot written to {output_file}")


if __name__ == "__main__":
    app()
