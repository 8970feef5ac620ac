"""Pydantic models for optimization job files.

A job file describes one quote: its pieces, the materials they reference and
the packing options. Piece dimensions use stone-shop terms: ``length_mm``
runs along the slab length, ``width_mm`` across it.

Example:
    ```json
    {
      "schema_version": "1.0",
      "quote_id": "Q-1042",
      "kerf_width_mm": 4,
      "materials": [{"id": "m1", "name": "Calacatta", "fabrication_category": "caesarstone"}],
      "pieces": [
        {"id": "p1", "label": "Kitchen: Island", "length_mm": 2400, "width_mm": 900,
         "thickness_mm": 40, "finished_edges": {"top": true}, "material_id": "m1"}
      ]
    }
    ```
"""

from __future__ import annotations

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from slabs.domain.value_objects import EdgeSide, MachineOperation, ShapeType

# Supported schema versions for job files
# Version 1.0: Initial job file schema
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})

_L_SHAPE_LEGS = ("leg1", "leg2")
_U_SHAPE_LEGS = ("back", "left_leg", "right_leg")


class EdgeFlagsConfig(BaseModel):
    """Finished flag per side."""

    model_config = ConfigDict(extra="forbid")

    top: bool = False
    bottom: bool = False
    left: bool = False
    right: bool = False


class EdgeNamesConfig(BaseModel):
    """Edge profile name per side. An empty string marks a raw edge."""

    model_config = ConfigDict(extra="forbid")

    top: str | None = None
    bottom: str | None = None
    left: str | None = None
    right: str | None = None


class LegConfig(BaseModel):
    """Dimensions of one leg of an L or U shaped piece."""

    model_config = ConfigDict(extra="forbid")

    length_mm: int = Field(..., gt=0)
    width_mm: int = Field(..., gt=0)


class PieceConfig(BaseModel):
    """A stone piece.

    Attributes:
        id: Identifier unique within the job.
        label: Display label.
        length_mm: Extent along the slab length.
        width_mm: Extent across the slab.
        thickness_mm: Finished thickness; 40mm and up is laminated by default.
        finished_edges: Which sides carry a profile.
        edge_type_names: Profile names, used to detect mitres.
        material_id: Material reference; omit for unassigned.
        grain_matched: Never rotate this piece.
        can_rotate: Per-piece rotation switch.
        shape_type: RECTANGLE, L_SHAPE or U_SHAPE.
        shape_config: Leg dimensions keyed leg1/leg2 or back/left_leg/right_leg.
        no_strip_edges: Wall sides that never get lamination strips.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    label: str = ""
    length_mm: int = Field(..., gt=0)
    width_mm: int = Field(..., gt=0)
    thickness_mm: int = Field(default=20, gt=0)
    finished_edges: EdgeFlagsConfig = Field(default_factory=EdgeFlagsConfig)
    edge_type_names: EdgeNamesConfig | None = None
    material_id: str | None = None
    grain_matched: bool = False
    can_rotate: bool = True
    shape_type: ShapeType | None = None
    shape_config: dict[str, LegConfig] | None = None
    no_strip_edges: list[EdgeSide] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_shape_legs(self) -> PieceConfig:
        """L and U shapes must name all of their legs."""
        required: tuple[str, ...] = ()
        if self.shape_type is ShapeType.L_SHAPE:
            required = _L_SHAPE_LEGS
        elif self.shape_type is ShapeType.U_SHAPE:
            required = _U_SHAPE_LEGS
        missing = [leg for leg in required if leg not in (self.shape_config or {})]
        if missing:
            raise ValueError(
                f"{self.shape_type.value} piece '{self.id}' is missing leg(s): {', '.join(missing)}"
            )
        return self


class MaterialConfig(BaseModel):
    """A material record."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    slab_length_mm: int | None = Field(default=None, gt=0)
    slab_width_mm: int | None = Field(default=None, gt=0)
    fabrication_category: str | None = None


class SlabSizeConfig(BaseModel):
    """Explicit slab size applied to every material."""

    model_config = ConfigDict(extra="forbid")

    length_mm: int = Field(..., gt=0)
    width_mm: int = Field(..., gt=0)


class LaminationSettingsConfig(BaseModel):
    """Lamination thresholds and strip sizes."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    threshold_mm: int = Field(default=40, gt=0)
    standard_width_mm: int = Field(default=60, gt=0)
    mitre_width_mm: int = Field(default=40, gt=0)
    strip_thickness_mm: int = Field(default=20, gt=0)
    min_strip_length_mm: int = Field(default=100, ge=0)


class OptimizationJobConfig(BaseModel):
    """Root model of an optimization job file.

    Attributes:
        schema_version: Version string in format "major.minor".
        quote_id: Quote the pieces belong to.
        pieces: Pieces to pack (at least one).
        materials: Material records referenced by the pieces.
        primary_material_id: Material shown first in results.
        slab: Explicit slab size; otherwise resolved per material.
        edge_allowance_mm: Unusable slab margin per side.
        kerf_width_mm: Saw kerf; machine defaults apply when omitted.
        mitre_kerf_width_mm: Extra width for mitred strips.
        allow_rotation: Global rotation switch.
        lamination: Lamination settings.
        machine_kerfs: Kerf per machine operation, overriding the seed defaults.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    quote_id: str = Field(default="job", min_length=1)
    pieces: list[PieceConfig] = Field(..., min_length=1)
    materials: list[MaterialConfig] = Field(default_factory=list)
    primary_material_id: str | None = None
    slab: SlabSizeConfig | None = None
    edge_allowance_mm: float = Field(default=0, ge=0)
    kerf_width_mm: float | None = Field(default=None, ge=0)
    mitre_kerf_width_mm: float | None = Field(default=None, ge=0)
    allow_rotation: bool = True
    lamination: LaminationSettingsConfig = Field(default_factory=LaminationSettingsConfig)
    machine_kerfs: dict[MachineOperation, float] | None = None

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Accept supported versions and newer minors of a supported major."""
        if v in SUPPORTED_VERSIONS:
            return v
        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v
        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
        )

    @field_validator("machine_kerfs")
    @classmethod
    def validate_machine_kerfs(
        cls, v: dict[MachineOperation, float] | None
    ) -> dict[MachineOperation, float] | None:
        if v is not None and any(kerf < 0 for kerf in v.values()):
            raise ValueError("Machine kerf widths must be non-negative")
        return v

    @model_validator(mode="after")
    def validate_unique_ids(self) -> OptimizationJobConfig:
        """Piece and material ids must be unique."""
        for kind, ids in (
            ("piece", [p.id for p in self.pieces]),
            ("material", [m.id for m in self.materials]),
        ):
            duplicates = sorted({i for i in ids if ids.count(i) > 1})
            if duplicates:
                raise ValueError(f"Duplicate {kind} id(s): {', '.join(duplicates)}")
        return self
