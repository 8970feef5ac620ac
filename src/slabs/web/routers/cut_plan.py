"""Cut plan endpoint."""

from fastapi import APIRouter, HTTPException

from slabs.domain.services.cut_plan import PieceDimensions, calculate_cut_plan
from slabs.infrastructure.exporters import cut_plan_to_dict
from slabs.web.schemas.requests import CutPlanRequestSchema
from slabs.web.schemas.responses import CutPlanResponseSchema

router = APIRouter(prefix="/cut-plan", tags=["cut-plan"])


@router.post("", response_model=CutPlanResponseSchema)
async def cut_plan(request: CutPlanRequestSchema) -> CutPlanResponseSchema:
    """Plan the segments and joins for one piece."""
    try:
        plan = calculate_cut_plan(
            PieceDimensions(
                length_mm=request.length_mm,
                width_mm=request.width_mm,
                thickness_mm=request.thickness_mm,
            ),
            material_name=request.material_name,
            slab_length_mm=request.slab_length_mm,
            slab_width_mm=request.slab_width_mm,
            edge_trim_mm=request.edge_trim_mm,
            join_rate_per_metre=request.join_rate_per_metre,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": str(e), "error_type": "cut_plan"},
        ) from e
    return CutPlanResponseSchema.model_validate(cut_plan_to_dict(plan))
