"""Validate command for checking optimization request files.

This module provides the `validate` command that checks a JSON request
file for syntax and schema errors, and checks every piece against the
stock catalogue without running the optimizer.
"""

from pathlib import Path
from typing import Annotated

import typer

from panelcut.application.config import (
    ConfigError,
    config_to_domain,
    load_config,
)
from panelcut.application.config.loader import SCHEMA_ERROR_TYPES
from panelcut.domain.exceptions import PanelCutError
from panelcut.domain.normalizer import available_stock, fits_any_stock, normalize_pieces


def display_load_error(error: ConfigError) -> None:
    """Display a request loading error.

    Args:
        error: The ConfigError to display
    """
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            line = detail.get("line", "?")
            column = detail.get("column", "?")
            message = detail.get("message", "Unknown error")
            typer.echo(f"    Line {line}, Column {column}: {message}", err=True)
    elif error.error_type in SCHEMA_ERROR_TYPES:
        typer.echo(f"  [{error.error_type}]", err=True)
        for detail in error.details:
            path = detail.get("path") or "(root)"
            message = detail.get("message", "Unknown error")
            value = detail.get("value")
            typer.echo(f"    {path}: {message}", err=True)
            if value is not None and not isinstance(value, (dict, list)):
                typer.echo(f"      Value: {value!r}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)


def display_panelcut_error(error: PanelCutError) -> None:
    """Display a piece or stock validation error."""
    typer.echo("Errors:", err=True)
    typer.echo(f"  [{error.error_type}] {error.message}", err=True)


def validate_command(
    request_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON request file to validate"),
    ],
) -> None:
    """Validate an optimization request file.

    Checks the request file for:
    - JSON syntax errors
    - Schema validation errors (missing fields, non-positive dimensions, etc.)
    - Pieces that fit no available stock sheet
    - Empty or exhausted stock catalogues

    Exit codes:
        0 - Request is valid
        1 - Request has errors (cannot be optimized)

    Example:
        panelcut validate kitchen-job.json
    """
    typer.echo(f"Validating {request_file}...")
    typer.echo()

    try:
        config = load_config(request_file)
    except ConfigError as e:
        display_load_error(e)
        typer.echo()
        typer.echo("Validation failed.", err=True)
        raise typer.Exit(code=1)

    requests, stock, options = config_to_domain(config)
    try:
        pieces = normalize_pieces(
            requests,
            stock,
            allow_rotation=options.allow_rotation,
            strict=config.options.strict_validation,
        )
    except PanelCutError as e:
        display_panelcut_error(e)
        typer.echo()
        typer.echo("Validation failed.", err=True)
        raise typer.Exit(code=1)

    # Only reachable with strict validation off
    usable = available_stock(stock)
    oversized = [r for r in requests if not fits_any_stock(r, usable, options.allow_rotation)]
    if oversized:
        typer.echo("Warnings:")
        for request in oversized:
            typer.echo(
                f"  '{request.label}' ({request.width}x{request.height}) fits no "
                f"stock sheet and will be reported as unplaced"
            )
        typer.echo()

    typer.echo(
        f"Validation passed: {len(pieces)} pieces, "
        f"{len(usable)} stock type{'s' if len(usable) != 1 else ''} available."
    )
