"""Job file validation endpoints."""

from fastapi import APIRouter

from slabs.application.config import load_config_from_dict, validate_config
from slabs.web.schemas.requests import ConfigValidateRequest
from slabs.web.schemas.responses import ValidationResultSchema

router = APIRouter(prefix="/validate", tags=["validate"])


@router.post("", response_model=ValidationResultSchema)
async def validate_job(request: ConfigValidateRequest) -> ValidationResultSchema:
    """Validate a job file without optimizing.

    Schema errors are raised as ConfigError and returned as 422 by the
    exception handlers; advisory findings come back in the body.
    """
    config = load_config_from_dict(request.config)
    result = validate_config(config)
    return ValidationResultSchema(
        is_valid=result.is_valid,
        errors=[{"message": e.message, "path": e.path} for e in result.errors],
        warnings=[
            {"message": w.message, "path": w.path, "suggestion": w.suggestion}
            for w in result.warnings
        ],
    )
