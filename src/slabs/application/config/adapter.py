"""Conversion of job file models to domain objects and DTOs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from slabs.application.config.schema import OptimizationJobConfig, PieceConfig
from slabs.application.dtos import OptimizeRequest
from slabs.domain.services.lamination import LaminationConfig
from slabs.domain.value_objects import (
    EdgeTypeNames,
    FinishedEdges,
    MaterialInfo,
    Piece,
)

if TYPE_CHECKING:
    from slabs.infrastructure.persistence import StaticMachineDefaults


def config_to_piece(config: PieceConfig) -> Piece:
    """Convert a piece model; length maps to the slab-length axis (``width``)."""
    edge_names = None
    if config.edge_type_names is not None:
        edge_names = EdgeTypeNames(**config.edge_type_names.model_dump())
    shape_config = None
    if config.shape_config:
        shape_config = {key: leg.model_dump() for key, leg in config.shape_config.items()}
    return Piece(
        id=config.id,
        width=config.length_mm,
        height=config.width_mm,
        label=config.label,
        thickness=config.thickness_mm,
        finished_edges=FinishedEdges(**config.finished_edges.model_dump()),
        edge_type_names=edge_names,
        material_id=config.material_id,
        grain_matched=config.grain_matched,
        can_rotate=config.can_rotate,
        shape_type=config.shape_type,
        shape_config=shape_config,
        no_strip_edges=frozenset(config.no_strip_edges),
    )


def config_to_pieces(config: OptimizationJobConfig) -> list[Piece]:
    return [config_to_piece(piece) for piece in config.pieces]


def config_to_materials(config: OptimizationJobConfig) -> list[MaterialInfo]:
    return [
        MaterialInfo(
            id=material.id,
            name=material.name,
            slab_length_mm=material.slab_length_mm,
            slab_width_mm=material.slab_width_mm,
            fabrication_category=material.fabrication_category,
        )
        for material in config.materials
    ]


def config_to_lamination(config: OptimizationJobConfig) -> LaminationConfig:
    return LaminationConfig(**config.lamination.model_dump())


def config_to_machine_defaults(config: OptimizationJobConfig) -> StaticMachineDefaults:
    """Seed machine defaults overlaid with the job's ``machine_kerfs``."""
    from slabs.infrastructure.persistence import DEFAULT_MACHINE_KERFS, StaticMachineDefaults

    kerfs = dict(DEFAULT_MACHINE_KERFS)
    kerfs.update(config.machine_kerfs or {})
    return StaticMachineDefaults(kerfs)


def config_to_request(config: OptimizationJobConfig, persist: bool = True) -> OptimizeRequest:
    """Build the optimize request for a job."""
    return OptimizeRequest(
        quote_id=config.quote_id,
        pieces=config_to_pieces(config),
        materials=config_to_materials(config),
        primary_material_id=config.primary_material_id,
        kerf_width=config.kerf_width_mm,
        mitre_kerf_width=config.mitre_kerf_width_mm,
        allow_rotation=config.allow_rotation,
        edge_allowance_mm=config.edge_allowance_mm,
        slab_length_mm=config.slab.length_mm if config.slab else None,
        slab_width_mm=config.slab.width_mm if config.slab else None,
        lamination=config_to_lamination(config),
        persist=persist,
    )
