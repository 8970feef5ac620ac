"""Pydantic schemas for the REST API."""

from slabs.web.schemas.common import (
    CamelModel,
    EdgeFlagsSchema,
    EdgeNamesSchema,
    LaminationSchema,
    LegSchema,
    MaterialSchema,
    PieceSchema,
)
from slabs.web.schemas.requests import (
    ConfigValidateRequest,
    CutPlanRequestSchema,
    OptimizeRequestSchema,
)
from slabs.web.schemas.responses import (
    CutPlanResponseSchema,
    ErrorResponseSchema,
    ExportFormatsSchema,
    OptimizeResponseSchema,
    OversizeRecordSchema,
    ValidationResultSchema,
)

__all__ = [
    # Common
    "CamelModel",
    "EdgeFlagsSchema",
    "EdgeNamesSchema",
    "LaminationSchema",
    "LegSchema",
    "MaterialSchema",
    "PieceSchema",
    # Requests
    "ConfigValidateRequest",
    "CutPlanRequestSchema",
    "OptimizeRequestSchema",
    # Responses
    "CutPlanResponseSchema",
    "ErrorResponseSchema",
    "ExportFormatsSchema",
    "OptimizeResponseSchema",
    "OversizeRecordSchema",
    "ValidationResultSchema",
]
