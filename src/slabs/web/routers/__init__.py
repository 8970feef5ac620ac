"""API routers for the REST API."""

from slabs.web.routers.cut_plan import router as cut_plan_router
from slabs.web.routers.export import router as export_router
from slabs.web.routers.optimize import router as optimize_router
from slabs.web.routers.validate import router as validate_router

__all__ = [
    "cut_plan_router",
    "export_router",
    "optimize_router",
    "validate_router",
]
