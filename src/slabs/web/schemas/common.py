"""Common Pydantic schemas shared across requests and responses.

The REST API speaks camelCase; every schema derives from ``CamelModel`` so
fields are declared in snake_case and serialized with camelCase aliases.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from slabs.domain.value_objects import EdgeSide, ShapeType


class CamelModel(BaseModel):
    """Base schema accepting and emitting camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EdgeFlagsSchema(CamelModel):
    """Finished flag per side."""

    top: bool = False
    bottom: bool = False
    left: bool = False
    right: bool = False


class EdgeNamesSchema(CamelModel):
    """Edge profile name per side; an empty string marks a raw edge."""

    top: str | None = None
    bottom: str | None = None
    left: str | None = None
    right: str | None = None


class LegSchema(CamelModel):
    """One leg of an L or U shaped piece."""

    length_mm: int = Field(..., gt=0, description="Leg length in mm")
    width_mm: int = Field(..., gt=0, description="Leg width in mm")


class PieceSchema(CamelModel):
    """A stone piece."""

    id: str = Field(..., min_length=1, description="Piece id, unique within the quote")
    label: str = Field(default="", description="Display label")
    length_mm: int = Field(..., gt=0, description="Length along the slab in mm")
    width_mm: int = Field(..., gt=0, description="Width across the slab in mm")
    thickness_mm: int = Field(default=20, gt=0, description="Finished thickness in mm")
    finished_edges: EdgeFlagsSchema = Field(default_factory=EdgeFlagsSchema)
    edge_type_names: EdgeNamesSchema | None = None
    material_id: str | None = None
    grain_matched: bool = False
    can_rotate: bool = True
    shape_type: ShapeType | None = None
    shape_config: dict[str, LegSchema] | None = Field(
        default=None, description="Legs keyed leg1/leg2 or back/left_leg/right_leg"
    )
    no_strip_edges: list[EdgeSide] = Field(default_factory=list)


class MaterialSchema(CamelModel):
    """A material record."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    slab_length_mm: int | None = Field(default=None, gt=0)
    slab_width_mm: int | None = Field(default=None, gt=0)
    fabrication_category: str | None = None


class LaminationSchema(CamelModel):
    """Lamination thresholds and strip sizes."""

    enabled: bool = True
    threshold_mm: int = Field(default=40, gt=0)
    standard_width_mm: int = Field(default=60, gt=0)
    mitre_width_mm: int = Field(default=40, gt=0)
    strip_thickness_mm: int = Field(default=20, gt=0)
    min_strip_length_mm: int = Field(default=100, ge=0)
