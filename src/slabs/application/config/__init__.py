"""Job file schema and loading system for slab optimization.

This package provides JSON-based job loading and validation. It includes
Pydantic models for schema validation, a loader with comprehensive error
handling, fabrication advisory checks and adapters to domain objects.

Public API:
    - OptimizationJobConfig: Root job model
    - PieceConfig: Piece model
    - MaterialConfig: Material record model
    - load_config: Load a job from a JSON file
    - load_config_from_dict: Load a job from a dictionary
    - ConfigError: Exception for job file errors
    - ValidationResult: Container for validation results
    - validate_config: Run the advisory checks
    - config_to_request: Build the optimize request for a job

Example:
    >>> from pathlib import Path
    >>> from slabs.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("quote.json"))
    ...     print(f"{len(config.pieces)} pieces")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from slabs.application.config.adapter import (
    config_to_lamination,
    config_to_machine_defaults,
    config_to_materials,
    config_to_piece,
    config_to_pieces,
    config_to_request,
)
from slabs.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
)
from slabs.application.config.schema import (
    SUPPORTED_VERSIONS,
    EdgeFlagsConfig,
    EdgeNamesConfig,
    LaminationSettingsConfig,
    LegConfig,
    MaterialConfig,
    OptimizationJobConfig,
    PieceConfig,
    SlabSizeConfig,
)
from slabs.application.config.validator import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    validate_config,
)

__all__ = [
    # Schema
    "SUPPORTED_VERSIONS",
    "EdgeFlagsConfig",
    "EdgeNamesConfig",
    "LaminationSettingsConfig",
    "LegConfig",
    "MaterialConfig",
    "OptimizationJobConfig",
    "PieceConfig",
    "SlabSizeConfig",
    # Loader
    "ConfigError",
    "load_config",
    "load_config_from_dict",
    # Validation
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "validate_config",
    # Adapters
    "config_to_lamination",
    "config_to_machine_defaults",
    "config_to_materials",
    "config_to_piece",
    "config_to_pieces",
    "config_to_request",
]
