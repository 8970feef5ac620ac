"""Pydantic response schemas for the REST API.

Responses are built with ``model_validate`` from the camelCase documents
produced by the JSON exporter, so the API and the JSON export never drift.
"""

from typing import Any

from pydantic import Field

from slabs.web.schemas.common import CamelModel


class OversizeRecordSchema(CamelModel):
    """Oversize flags written for one piece."""

    piece_id: str
    is_oversize: bool
    join_count: int
    join_length_mm: int
    requires_grain_match: bool


class OptimizeResponseSchema(CamelModel):
    """Response for an optimize run.

    Exactly one of ``result`` and ``multi_material`` is set.
    """

    quote_id: str
    total_slabs: int = Field(..., description="Slabs across all materials")
    waste_percent: float = Field(..., description="Waste over usable slab area")
    kerf_width: float
    mitre_kerf_width: float | None = None
    slab_source: str | None = None
    result: dict[str, Any] | None = Field(default=None, description="Single-material result")
    multi_material: dict[str, Any] | None = Field(
        default=None, description="Per-material results"
    )
    oversize_records: list[OversizeRecordSchema] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class SegmentSchema(CamelModel):
    length_mm: int
    width_mm: int
    slab_index: int


class JoinSchema(CamelModel):
    position_mm: int
    orientation: str
    length_mm: int


class CutPlanResponseSchema(CamelModel):
    """Response for a cut plan."""

    fits_on_single_slab: bool
    strategy: str
    segments: list[SegmentSchema]
    joins: list[JoinSchema]
    join_count: int
    total_slabs_required: int
    join_length_mm: int
    join_cost: float
    warnings: list[str] = Field(default_factory=list)


class ValidationResultSchema(CamelModel):
    """Response for job file validation."""

    is_valid: bool = Field(..., description="Whether the job has no errors")
    errors: list[dict[str, Any]] = Field(default_factory=list)
    warnings: list[dict[str, Any]] = Field(default_factory=list)


class ExportFormatsSchema(CamelModel):
    """Available export formats."""

    formats: list[str]


class ErrorResponseSchema(CamelModel):
    """Error body returned by the exception handlers."""

    error: str
    error_type: str
    details: Any = None
