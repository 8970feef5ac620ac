"""Validation structures and fabrication advisory checks for job files.

Schema validation (types, ranges, unique ids) happens in the Pydantic models.
The checks here look at the job as a whole and flag pieces that will need
joins, cannot be placed, or will not be laminated as expected.
"""

from dataclasses import dataclass, field
from typing import Any

from slabs.application.config.adapter import config_to_materials, config_to_piece
from slabs.application.config.schema import OptimizationJobConfig
from slabs.domain.services.cut_plan import PieceDimensions, calculate_cut_plan
from slabs.domain.services.shapes import leg_rects
from slabs.domain.slab_sizes import resolve_slab_size
from slabs.domain.value_objects import SlabSize


@dataclass
class ValidationError:
    """A blocking validation error.

    Attributes:
        path: JSON path to the invalid field (e.g., "pieces[0].length_mm")
        message: Human-readable description of the error
        value: The invalid value that caused the error
    """

    path: str
    message: str
    value: Any = None


@dataclass
class ValidationWarning:
    """A non-blocking validation warning.

    Attributes:
        path: JSON path to the concerning field
        message: Human-readable description of the concern
        suggestion: Optional suggested remediation
    """

    path: str
    message: str
    suggestion: str | None = None


@dataclass
class ValidationResult:
    """Container for validation errors and warnings."""

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def exit_code(self) -> int:
        """CLI exit code: 0 if clean, 1 if there are errors, 2 for warnings only."""
        if self.errors:
            return 1
        if self.warnings:
            return 2
        return 0

    def add_error(self, path: str, message: str, value: Any = None) -> "ValidationResult":
        self.errors.append(ValidationError(path=path, message=message, value=value))
        return self

    def add_warning(
        self, path: str, message: str, suggestion: str | None = None
    ) -> "ValidationResult":
        self.warnings.append(ValidationWarning(path=path, message=message, suggestion=suggestion))
        return self

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self


def _slab_for(config: OptimizationJobConfig, material_id: str | None) -> SlabSize:
    override = None
    if config.slab is not None:
        override = SlabSize(length_mm=config.slab.length_mm, width_mm=config.slab.width_mm)
    materials = {m.id: m for m in config_to_materials(config)}
    material = materials.get(material_id) if material_id else None
    if material is None and override is None and config.primary_material_id:
        material = materials.get(config.primary_material_id)
    return resolve_slab_size(material, override)[0]


def check_material_advisories(config: OptimizationJobConfig) -> ValidationResult:
    """Flag unassigned pieces and references to unknown materials."""
    result = ValidationResult()
    material_ids = {m.id for m in config.materials}
    assigned = {p.material_id for p in config.pieces if p.material_id}

    if config.primary_material_id and config.primary_material_id not in material_ids:
        result.add_warning(
            "primary_material_id",
            f"Primary material '{config.primary_material_id}' is not in materials",
        )

    for i, piece in enumerate(config.pieces):
        path = f"pieces[{i}].material_id"
        if piece.material_id is None:
            if len(assigned) > 1:
                result.add_warning(
                    path,
                    f"Piece '{piece.id}' has no material and will be excluded from packing",
                    suggestion="Assign a material to the piece",
                )
        elif piece.material_id not in material_ids:
            result.add_warning(
                path,
                f"Material '{piece.material_id}' is not defined; the default slab size will be used",
            )
    return result


def check_slab_advisories(config: OptimizationJobConfig) -> ValidationResult:
    """Flag pieces that need joins or cannot be placed at all."""
    result = ValidationResult()
    edge = config.edge_allowance_mm

    for i, piece_config in enumerate(config.pieces):
        slab = _slab_for(config, piece_config.material_id)
        usable_short = min(slab.length_mm, slab.width_mm) - 2 * edge
        if usable_short <= 0:
            result.add_error(
                "edge_allowance_mm",
                f"Edge allowance of {edge:g}mm leaves no usable area on a "
                f"{slab.length_mm}x{slab.width_mm}mm slab",
                edge,
            )
            return result

        piece = config_to_piece(piece_config)
        for leg in leg_rects(piece):
            name = f"'{piece.id}'" if leg.label is None else f"'{piece.id}' ({leg.label})"
            if min(leg.length_mm, leg.width_mm) > usable_short:
                result.add_warning(
                    f"pieces[{i}]",
                    f"Piece {name} is wider than the usable slab and cannot be placed",
                    suggestion="Split the piece into separate pieces",
                )
                continue
            plan = calculate_cut_plan(
                PieceDimensions(length_mm=leg.length_mm, width_mm=leg.width_mm),
                slab_length_mm=slab.length_mm,
                slab_width_mm=slab.width_mm,
                edge_trim_mm=edge,
            )
            if not plan.fits_on_single_slab:
                result.add_warning(
                    f"pieces[{i}]",
                    f"Piece {name} exceeds the {slab.length_mm}x{slab.width_mm}mm slab "
                    f"and needs {plan.join_count} join(s) ({plan.join_length_mm}mm)",
                )
    return result


def check_lamination_advisories(config: OptimizationJobConfig) -> ValidationResult:
    """Flag thick pieces that will get no lamination strips."""
    result = ValidationResult()
    settings = config.lamination
    if not settings.enabled:
        return result
    for i, piece in enumerate(config.pieces):
        if piece.thickness_mm < settings.threshold_mm:
            continue
        edges = piece.finished_edges
        if not (edges.top or edges.bottom or edges.left or edges.right):
            result.add_warning(
                f"pieces[{i}].finished_edges",
                f"Piece '{piece.id}' is {piece.thickness_mm}mm thick but has no finished "
                "edges, so no lamination strips will be cut",
            )
    return result


def validate_config(config: OptimizationJobConfig) -> ValidationResult:
    """Run every advisory check on a schema-valid job.

    Args:
        config: A validated OptimizationJobConfig instance

    Returns:
        ValidationResult with errors and warnings from all checks
    """
    result = ValidationResult()
    result.merge(check_material_advisories(config))
    result.merge(check_slab_advisories(config))
    result.merge(check_lamination_advisories(config))
    return result


__all__ = [
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "check_lamination_advisories",
    "check_material_advisories",
    "check_slab_advisories",
    "validate_config",
]
