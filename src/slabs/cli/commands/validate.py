"""The ``validate`` command: check a job file without optimizing it.

Exit codes follow ValidationResult.exit_code: 0 clean, 1 errors, 2 warnings
only. Load failures (missing file, bad JSON, schema errors) exit with 1.
"""

from pathlib import Path
from typing import Annotated

import typer

from slabs.application.config import (
    ConfigError,
    ValidationResult,
    load_config,
    validate_config,
)


def validate_command(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file to validate"),
    ],
) -> None:
    """Validate an optimization job file.

    Reports schema errors and fabrication advisories such as pieces that
    need joins, pieces no slab can hold and unknown materials.

    Example:
        slabs validate quote.json
    """
    typer.echo(f"Validating {config_file}...")
    typer.echo()

    try:
        config = load_config(config_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)

    result = validate_config(config)
    _report(result)
    raise typer.Exit(code=result.exit_code)


def _load_error_lines(error: ConfigError) -> list[str]:
    if error.error_type == "file_not_found":
        return [f"  File not found: {error.path}"]
    if error.error_type == "json_parse":
        lines = ["  Invalid JSON syntax"]
        for detail in error.details:
            lines.append(
                f"    Line {detail.get('line', '?')}, Column {detail.get('column', '?')}: "
                f"{detail.get('message', 'Unknown error')}"
            )
        return lines
    if error.error_type == "validation":
        lines = []
        for detail in error.details:
            lines.append(f"  {detail.get('path') or '(root)'}: {detail.get('message', 'Unknown error')}")
            value = detail.get("value")
            if value is not None and not isinstance(value, (dict, list)):
                lines.append(f"    Value: {value!r}")
        return lines
    return [f"  {error.message}"]


def display_load_error(error: ConfigError) -> None:
    """Print a job file loading error to stderr."""
    typer.echo("Errors:", err=True)
    for line in _load_error_lines(error):
        typer.echo(line, err=True)
    typer.echo()
    typer.echo("Validation failed.", err=True)


def _report(result: ValidationResult) -> None:
    if result.errors:
        typer.echo("Errors:", err=True)
        for error in result.errors:
            typer.echo(f"  {error.path}: {error.message}", err=True)
            if error.value is not None:
                typer.echo(f"    Value: {error.value!r}", err=True)
        typer.echo()

    if result.warnings:
        typer.echo("Warnings:")
        for warning in result.warnings:
            typer.echo(f"  {warning.path}: {warning.message}")
            if warning.suggestion:
                typer.echo(f"    Suggestion: {warning.suggestion}")
        typer.echo()

    errors, warnings = len(result.errors), len(result.warnings)
    if errors:
        typer.echo(f"Validation failed: {errors} error(s), {warnings} warning(s)", err=True)
    elif warnings:
        typer.echo(f"Validation passed with {warnings} warning(s)")
    else:
        typer.echo("Validation passed. Job file is valid.")
