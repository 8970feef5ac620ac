"""Typer CLI for slab optimization."""

from pathlib import Path
from typing import Annotated

import typer

from slabs.application import OptimizeQuoteCommand
from slabs.application.config import (
    ConfigError,
    config_to_machine_defaults,
    config_to_request,
    load_config,
)
from slabs.cli.commands import display_load_error, validate_command
from slabs.domain.services.cut_plan import PieceDimensions, calculate_cut_plan
from slabs.infrastructure import (
    CutDiagramRenderer,
    CutPlanFormatter,
    MultiMaterialReportFormatter,
    OptimizationReportFormatter,
    SqlitePieceRepository,
)
from slabs.infrastructure.exporters import ExporterRegistry, ExportManager

TEXT_FORMAT = "text"

app = typer.Typer(
    name="slabs",
    help="Plan stone slab cutting: bin packing, lamination strips and joins.",
)

app.command(name="validate")(validate_command)


@app.command()
def optimize(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file"),
    ],
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text, json, csv, svg"),
    ] = TEXT_FORMAT,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", help="Write the export to this directory instead of stdout"),
    ] = None,
    project_name: Annotated[
        str | None,
        typer.Option("--project-name", help="Base name for exported files (default: quote id)"),
    ] = None,
    diagram: Annotated[
        bool,
        typer.Option("--diagram", help="Append ASCII slab diagrams to the text report"),
    ] = False,
    database: Annotated[
        Path | None,
        typer.Option("--db", help="SQLite database receiving the oversize flags"),
    ] = None,
) -> None:
    """Optimize slab usage for a job file."""
    output_format = output_format.lower()
    if output_format != TEXT_FORMAT and not ExporterRegistry.is_registered(output_format):
        available = ", ".join([TEXT_FORMAT] + ExporterRegistry.available_formats())
        typer.echo(f"Unknown format: {output_format}", err=True)
        typer.echo(f"Available formats: {available}", err=True)
        raise typer.Exit(code=1)

    try:
        config = load_config(config_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)

    repository = SqlitePieceRepository(database) if database is not None else None
    command = OptimizeQuoteCommand(
        machine_defaults=config_to_machine_defaults(config),
        repository=repository,
    )
    try:
        output = command.execute(config_to_request(config, persist=repository is not None))
    finally:
        if repository is not None:
            repository.close()

    if not output.is_valid:
        typer.echo("Errors:", err=True)
        for error in output.errors:
            typer.echo(f"  - {error}", err=True)
        raise typer.Exit(code=1)

    if output_format == TEXT_FORMAT:
        if output.multi_material is not None:
            typer.echo(MultiMaterialReportFormatter().format(output.multi_material))
        elif output.result is not None:
            typer.echo(OptimizationReportFormatter().format(output.result))
            if diagram:
                typer.echo()
                typer.echo(CutDiagramRenderer().render_all_ascii(output.result))
        for warning in output.warnings:
            typer.echo(f"Warning: {warning}", err=True)
        return

    if output_dir is not None:
        path = ExportManager(output_dir).export_single(
            output_format, output, project_name or output.quote_id
        )
        typer.echo(f"Exported {output_format}: {path}")
        return

    exporter = ExporterRegistry.get(output_format)()
    typer.echo(exporter.export_string(output))


@app.command(name="cut-plan")
def cut_plan(
    length: Annotated[int, typer.Option("--length", "-l", help="Piece length in mm")],
    width: Annotated[int, typer.Option("--width", "-w", help="Piece width in mm")],
    material: Annotated[
        str | None,
        typer.Option("--material", "-m", help="Material or fabrication category name"),
    ] = None,
    thickness: Annotated[
        int | None,
        typer.Option("--thickness", "-t", help="Piece thickness in mm"),
    ] = None,
    slab_length: Annotated[
        int | None,
        typer.Option("--slab-length", help="Slab length in mm"),
    ] = None,
    slab_width: Annotated[
        int | None,
        typer.Option("--slab-width", help="Slab width in mm"),
    ] = None,
    edge_trim: Annotated[
        float,
        typer.Option("--edge-trim", help="Unusable slab margin per side in mm"),
    ] = 0,
    join_rate: Annotated[
        float,
        typer.Option("--join-rate", help="Join cost per metre"),
    ] = 0.0,
) -> None:
    """Show how a piece is split into slab-sized segments."""
    try:
        plan = calculate_cut_plan(
            PieceDimensions(length_mm=length, width_mm=width, thickness_mm=thickness),
            material_name=material,
            slab_length_mm=slab_length,
            slab_width_mm=slab_width,
            edge_trim_mm=edge_trim,
            join_rate_per_metre=join_rate,
        )
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(CutPlanFormatter().format(plan, length, width))


if __name__ == "__main__":
    app()
