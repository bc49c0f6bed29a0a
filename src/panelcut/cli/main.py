"""Typer CLI for panel cutting optimization."""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

import typer

from panelcut.application import CuttingPlan, OptimizeCuttingCommand
from panelcut.application.config import ConfigError, PlacementHeuristicConfig, load_config
from panelcut.cli.commands import display_load_error, validate_command
from panelcut.infrastructure import CutDiagramRenderer, CuttingPlanFormatter, JsonExporter


class OutputFormat(str, Enum):
    JSON = "json"
    TEXT = "text"
    ASCII = "ascii"
    SVG = "svg"


app = typer.Typer(
    name="panelcut",
    help="Compute multi-sheet cutting plans for rectangular panels.",
)

# Register validate command
app.command(name="validate")(validate_command)


def render_plan(plan: CuttingPlan, output_format: OutputFormat) -> str:
    """Render a cutting plan in the requested output format."""
    if output_format == OutputFormat.JSON:
        return JsonExporter().export(plan)
    if output_format == OutputFormat.TEXT:
        return CuttingPlanFormatter().format(plan)
    if output_format == OutputFormat.ASCII:
        return CutDiagramRenderer().render_all_ascii(plan)
    return CutDiagramRenderer().render_combined_svg(plan)


@app.command()
def optimize(
    request_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON request file"),
    ],
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Output format: json, text, ascii, svg"),
    ] = OutputFormat.TEXT,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the result to this file instead of stdout"),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Random seed for reproducible plans"),
    ] = None,
    max_iterations: Annotated[
        int | None,
        typer.Option("--max-iterations", min=1, help="Cap on optimizer iterations"),
    ] = None,
    time_budget_ms: Annotated[
        int | None,
        typer.Option("--time-budget-ms", min=0, help="Wall-clock budget in milliseconds"),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", min=1, max=64, help="Worker threads for iterations"),
    ] = None,
    placement_heuristic: Annotated[
        PlacementHeuristicConfig | None,
        typer.Option("--placement-heuristic", help="Use only this placement heuristic"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log optimizer progress to stderr"),
    ] = False,
) -> None:
    """Compute a cutting plan for a request file.

    Command line options override the matching request options.

    Exit codes:
        0 - Every piece was placed
        1 - The request is invalid
        2 - Some pieces could not be placed

    Example:
        panelcut optimize kitchen-job.json --format ascii --seed 42
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    try:
        config = load_config(request_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)

    overrides: dict[str, Any] = {
        "random_seed": seed,
        "max_iterations": max_iterations,
        "time_budget_ms": time_budget_ms,
        "workers": workers,
        "placement_heuristic": placement_heuristic,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if overrides:
        config = config.model_copy(
            update={"options": config.options.model_copy(update=overrides)}
        )

    result = OptimizeCuttingCommand().execute_request(config)
    if not result.is_ok:
        typer.echo(f"Error [{result.kind}]: {result.message}", err=True)
        raise typer.Exit(code=1)

    plan = result.value
    rendered = render_plan(plan, output_format)

    if output is not None:
        output.write_text(rendered, encoding="utf-8")
        typer.echo(f"Cutting plan written to {output}")
    else:
        typer.echo(rendered)

    if not plan.is_complete:
        typer.echo(
            f"Warning: {plan.unplaced_pieces} of {plan.total_pieces} pieces could not be placed",
            err=True,
        )
        raise typer.Exit(code=2)


if __name__ == "__main__":
    app()
