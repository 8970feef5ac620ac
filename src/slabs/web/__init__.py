"""FastAPI REST API for slab optimization.

This module provides a REST API for optimizing slab usage, planning joins,
validating job files, and exporting results.

Usage:
    uvicorn slabs.web:app --reload
"""

from slabs.web.app import app, create_app

__all__ = ["app", "create_app"]
