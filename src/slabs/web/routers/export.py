"""Export format endpoints."""

from fastapi import APIRouter
from fastapi.responses import Response

from slabs.infrastructure.exporters import ExporterRegistry
from slabs.web.dependencies import OptimizeCommandDep
from slabs.web.exceptions import UnsupportedFormatError
from slabs.web.routers.optimize import run_optimization
from slabs.web.schemas.requests import OptimizeRequestSchema
from slabs.web.schemas.responses import ExportFormatsSchema

router = APIRouter(prefix="/export", tags=["export"])

MEDIA_TYPES: dict[str, str] = {
    "csv": "text/csv",
    "json": "application/json",
    "svg": "image/svg+xml",
}


@router.get("/formats", response_model=ExportFormatsSchema)
async def list_export_formats() -> ExportFormatsSchema:
    """List all available export formats."""
    return ExportFormatsSchema(formats=ExporterRegistry.available_formats())


@router.post("/{format_name}")
async def export(
    format_name: str,
    request: OptimizeRequestSchema,
    command: OptimizeCommandDep,
) -> Response:
    """Optimize a quote and return the result in the requested format."""
    if not ExporterRegistry.is_registered(format_name):
        raise UnsupportedFormatError(format_name, ExporterRegistry.available_formats())

    output = run_optimization(command, request)
    exporter = ExporterRegistry.get(format_name)()
    filename = f"{output.quote_id}.{exporter.file_extension}"
    return Response(
        content=exporter.export_string(output),
        media_type=MEDIA_TYPES.get(format_name, "text/plain"),
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
