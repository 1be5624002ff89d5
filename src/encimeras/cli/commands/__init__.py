"""CLI command implementations for the encimeras application.

This package contains subcommands for the encimeras CLI, including:
- validate: Validate a project file
- shapes: Browse the shape catalog
"""

from encimeras.cli.commands.shapes import shapes_app
from encimeras.cli.commands.validate import display_load_error, validate_command

__all__ = ["display_load_error", "shapes_app", "validate_command"]
