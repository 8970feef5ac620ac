"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import Field, model_validator

from slabs.application.config.schema import SUPPORTED_VERSIONS
from slabs.web.schemas.common import (
    CamelModel,
    LaminationSchema,
    MaterialSchema,
    PieceSchema,
)

_JOB_SCHEMA_VERSION = max(SUPPORTED_VERSIONS)


class OptimizeRequestSchema(CamelModel):
    """Request for optimizing one quote."""

    quote_id: str = Field(default="job", min_length=1, description="Quote the pieces belong to")
    pieces: list[PieceSchema] = Field(..., min_length=1, description="Pieces to pack")
    materials: list[MaterialSchema] = Field(default_factory=list)
    primary_material_id: str | None = None
    slab_length_mm: int | None = Field(default=None, gt=0, description="Explicit slab length")
    slab_width_mm: int | None = Field(default=None, gt=0, description="Explicit slab width")
    edge_allowance_mm: float = Field(default=0, ge=0)
    kerf_width: float | None = Field(default=None, ge=0, description="Saw kerf in mm")
    mitre_kerf_width: float | None = Field(default=None, ge=0)
    allow_rotation: bool = True
    lamination: LaminationSchema = Field(default_factory=LaminationSchema)
    persist: bool = Field(default=True, description="Write oversize flags after packing")

    @model_validator(mode="after")
    def validate_slab_pair(self) -> "OptimizeRequestSchema":
        if (self.slab_length_mm is None) != (self.slab_width_mm is None):
            raise ValueError("slabLengthMm and slabWidthMm must be given together")
        return self

    def to_job_dict(self) -> dict[str, Any]:
        """The equivalent job file document, for the job file loader."""
        job: dict[str, Any] = {
            "schema_version": _JOB_SCHEMA_VERSION,
            "quote_id": self.quote_id,
            "pieces": [p.model_dump(mode="json", exclude_none=True) for p in self.pieces],
            "materials": [m.model_dump(mode="json", exclude_none=True) for m in self.materials],
            "primary_material_id": self.primary_material_id,
            "edge_allowance_mm": self.edge_allowance_mm,
            "kerf_width_mm": self.kerf_width,
            "mitre_kerf_width_mm": self.mitre_kerf_width,
            "allow_rotation": self.allow_rotation,
            "lamination": self.lamination.model_dump(),
        }
        if self.slab_length_mm is not None and self.slab_width_mm is not None:
            job["slab"] = {"length_mm": self.slab_length_mm, "width_mm": self.slab_width_mm}
        return job


class CutPlanRequestSchema(CamelModel):
    """Request for a single-piece cut plan."""

    length_mm: int = Field(..., gt=0)
    width_mm: int = Field(..., gt=0)
    thickness_mm: int | None = Field(default=None, gt=0)
    material_name: str | None = Field(default=None, description="Material or category name")
    slab_length_mm: int | None = Field(default=None, gt=0)
    slab_width_mm: int | None = Field(default=None, gt=0)
    edge_trim_mm: float = Field(default=0, ge=0)
    join_rate_per_metre: float = Field(default=0.0, ge=0)


class ConfigValidateRequest(CamelModel):
    """Request for validating a job file."""

    config: dict[str, Any] = Field(..., description="Job file JSON")
