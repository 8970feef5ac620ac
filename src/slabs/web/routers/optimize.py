"""Slab optimization endpoints."""

from fastapi import APIRouter

from slabs.application.commands import OptimizationInputError, OptimizeQuoteCommand
from slabs.application.config import config_to_request, load_config_from_dict
from slabs.application.dtos import OptimizeOutput
from slabs.infrastructure.exporters import output_to_dict
from slabs.web.dependencies import OptimizeCommandDep
from slabs.web.schemas.requests import OptimizeRequestSchema
from slabs.web.schemas.responses import OptimizeResponseSchema

router = APIRouter(prefix="/optimize", tags=["optimize"])


def run_optimization(
    command: OptimizeQuoteCommand,
    request: OptimizeRequestSchema,
    group_by_material: bool = False,
) -> OptimizeOutput:
    """Validate the request as a job file and run the optimize command.

    Raises:
        ConfigError: If the request fails job file validation.
        OptimizationInputError: If the command rejects the request.
    """
    config = load_config_from_dict(request.to_job_dict())
    optimize_request = config_to_request(config, persist=request.persist)
    optimize_request.group_by_material = group_by_material
    output = command.execute(optimize_request)
    if not output.is_valid:
        raise OptimizationInputError(output.errors)
    return output


@router.post("", response_model=OptimizeResponseSchema)
async def optimize(
    request: OptimizeRequestSchema,
    command: OptimizeCommandDep,
) -> OptimizeResponseSchema:
    """Pack a quote's pieces onto slabs.

    Pieces of more than one material are packed per material. Oversize
    flags are written unless ``persist`` is false; a failed write is
    reported in ``warnings``.
    """
    output = run_optimization(command, request)
    return OptimizeResponseSchema.model_validate(output_to_dict(output))


@router.post("/multi-material", response_model=OptimizeResponseSchema)
async def optimize_multi_material(
    request: OptimizeRequestSchema,
    command: OptimizeCommandDep,
) -> OptimizeResponseSchema:
    """Pack pieces grouped by material, even when only one material is used."""
    output = run_optimization(command, request, group_by_material=True)
    return OptimizeResponseSchema.model_validate(output_to_dict(output))
