"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from slabs.domain.services.lamination import LaminationConfig
from slabs.domain.value_objects import MaterialInfo, OversizeRecord, Piece, SlabSize

if TYPE_CHECKING:
    from slabs.infrastructure.bin_packing import PackingResult
    from slabs.infrastructure.multi_material import MultiMaterialResult

# Kerf used when neither the request nor the machine defaults provide one
DEFAULT_KERF_MM = 3


@dataclass
class OptimizeRequest:
    """Input DTO for optimizing one quote.

    ``group_by_material`` forces the multi-material orchestrator even when
    only one material is in play.
    """

    quote_id: str
    pieces: list[Piece]
    materials: list[MaterialInfo] = field(default_factory=list)
    primary_material_id: str | None = None
    kerf_width: float | None = None
    mitre_kerf_width: float | None = None
    allow_rotation: bool = True
    edge_allowance_mm: float = 0
    slab_length_mm: int | None = None
    slab_width_mm: int | None = None
    lamination: LaminationConfig = field(default_factory=LaminationConfig)
    persist: bool = True
    group_by_material: bool = False

    def validate(self) -> list[str]:
        """Validate input and return list of error messages."""
        errors: list[str] = []
        if not self.quote_id:
            errors.append("Quote id is required")
        seen: set[str] = set()
        for piece in self.pieces:
            if piece.id in seen:
                errors.append(f"Duplicate piece id '{piece.id}'")
            seen.add(piece.id)
        if self.kerf_width is not None and self.kerf_width < 0:
            errors.append("Kerf width cannot be negative")
        if self.mitre_kerf_width is not None and self.mitre_kerf_width < 0:
            errors.append("Mitre kerf width cannot be negative")
        if self.edge_allowance_mm < 0:
            errors.append("Edge allowance cannot be negative")
        if (self.slab_length_mm is None) != (self.slab_width_mm is None):
            errors.append("Slab length and width must be given together")
        elif self.slab_length_mm is not None and self.slab_width_mm is not None:
            if self.slab_length_mm <= 0 or self.slab_width_mm <= 0:
                errors.append("Slab dimensions must be positive")
        return errors

    @property
    def slab_override(self) -> SlabSize | None:
        if self.slab_length_mm and self.slab_width_mm:
            return SlabSize(length_mm=self.slab_length_mm, width_mm=self.slab_width_mm, name="Custom")
        return None


@dataclass
class OptimizeOutput:
    """Output DTO for an optimize run.

    Exactly one of ``result`` and ``multi_material`` is set for a valid run.
    ``warnings`` holds warnings raised outside the packer, such as a failed
    oversize write.
    """

    quote_id: str
    result: PackingResult | None = None
    multi_material: MultiMaterialResult | None = None
    slab: SlabSize | None = None
    slab_source: str | None = None
    kerf_width: float = DEFAULT_KERF_MM
    mitre_kerf_width: float | None = None
    oversize_records: tuple[OversizeRecord, ...] = ()
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def is_multi_material(self) -> bool:
        return self.multi_material is not None

    @property
    def total_slabs(self) -> int:
        if self.multi_material is not None:
            return self.multi_material.total_slab_count
        if self.result is not None:
            return self.result.total_slabs
        return 0

    @property
    def waste_percent(self) -> float:
        if self.multi_material is not None:
            return self.multi_material.overall_waste_percentage
        if self.result is not None:
            return self.result.waste_percent
        return 0.0

    @property
    def all_warnings(self) -> list[str]:
        """Optimizer warnings followed by run-level warnings."""
        if self.multi_material is not None:
            found = list(self.multi_material.warnings)
        elif self.result is not None:
            found = list(self.result.warnings)
        else:
            found = []
        return found + self.warnings
