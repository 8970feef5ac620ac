"""Loading of JSON optimization job files.

Every failure is raised as a ``ConfigError`` whose ``error_type`` tells the
caller what went wrong: the file is missing or unreadable, the JSON is
malformed, or the document fails schema validation. Validation details carry
a JSON path per problem (``pieces[1].length_mm``) for display by the CLI and
the REST API.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from slabs.application.config.schema import OptimizationJobConfig


class ConfigError(Exception):
    """A job file could not be loaded.

    Attributes:
        message: Human-readable summary.
        error_type: One of file_not_found, permission_denied,
            file_read_error, json_parse, validation.
        path: Job file path, None for in-memory documents.
        details: Per-problem dicts (line/column for JSON errors, path/message/
            value/error_type for validation errors).
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Render a pydantic error location as a JSON path.

    >>> _format_json_path(("pieces", 0, "length_mm"))
    'pieces[0].length_mm'
    """
    path = ""
    for segment in loc:
        if isinstance(segment, int):
            path += f"[{segment}]"
        else:
            path = f"{path}.{segment}" if path else str(segment)
    return path


def _describe(error: PydanticValidationError) -> tuple[str, list[dict[str, Any]]]:
    """Summary message and detail dicts for a pydantic validation error."""
    details = [
        {
            "path": _format_json_path(err["loc"]),
            "message": err["msg"],
            "value": err.get("input"),
            "error_type": err["type"],
        }
        for err in error.errors()
    ]

    lines = ["Job file validation failed:"]
    for detail in details:
        line = f"  - {detail['path'] or '(root)'}: {detail['message']}"
        value = detail["value"]
        if value is not None and not isinstance(value, (dict, list)):
            line += f" (got: {value!r})"
        lines.append(line)
    return "\n".join(lines), details


def _validate(data: Any, path: Path | None = None) -> OptimizationJobConfig:
    try:
        return OptimizationJobConfig.model_validate(data)
    except PydanticValidationError as e:
        message, details = _describe(e)
        raise ConfigError(message, "validation", path, details) from e


def _read(path: Path) -> str:
    if not path.exists():
        raise ConfigError(f"Job file not found: {path}", "file_not_found", path)
    try:
        return path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigError(
            f"Permission denied reading job file: {path}", "permission_denied", path
        ) from e
    except OSError as e:
        raise ConfigError(f"Error reading job file: {path}: {e}", "file_read_error", path) from e


def load_config(path: Path) -> OptimizationJobConfig:
    """Load and validate a job file.

    Raises:
        ConfigError: If the file is missing, unreadable, not JSON, or fails
            schema validation.
    """
    content = _read(path)
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Invalid JSON in job file: {path} (line {e.lineno}, column {e.colno}): {e.msg}",
            "json_parse",
            path,
            [{"line": e.lineno, "column": e.colno, "message": e.msg}],
        ) from e
    return _validate(data, path)


def load_config_from_dict(data: dict[str, Any]) -> OptimizationJobConfig:
    """Validate a job document already parsed from JSON (API requests, tests).

    Raises:
        ConfigError: If the data fails validation.
    """
    return _validate(data)
