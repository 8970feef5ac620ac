"""Lamination strip generation for thick (laminated) pieces.

A laminated benchtop is built from a 20mm slab with a narrow strip bonded
under each finished edge to give the visible thickness. The strips are cut
from the same slab stock, so they are packed alongside the main pieces.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from slabs.domain.diagnostics import Diagnostics
from slabs.domain.value_objects import EdgeSide, FinishedEdges, Piece

logger = logging.getLogger(__name__)

_MITRE_MARKERS = ("mitre", "miter")


@dataclass(frozen=True)
class LaminationConfig:
    """Thresholds and strip sizes for lamination.

    Attributes:
        enabled: Generate strips at all.
        threshold_mm: Pieces at least this thick are laminated.
        standard_width_mm: Strip width for square and profiled edges.
        mitre_width_mm: Strip width for mitred edges.
        strip_thickness_mm: Thickness recorded on strip pieces.
        min_strip_length_mm: Edges shorter than this get no strip.
    """

    enabled: bool = True
    threshold_mm: int = 40
    standard_width_mm: int = 60
    mitre_width_mm: int = 40
    strip_thickness_mm: int = 20
    min_strip_length_mm: int = 100

    def __post_init__(self) -> None:
        if self.threshold_mm <= 0:
            raise ValueError("Lamination threshold must be positive")
        if self.standard_width_mm <= 0 or self.mitre_width_mm <= 0:
            raise ValueError("Strip widths must be positive")
        if self.min_strip_length_mm < 0:
            raise ValueError("Minimum strip length must be non-negative")


@dataclass(frozen=True)
class LaminationStrip:
    """A strip cut to laminate one edge of a parent piece.

    Attributes:
        parent_piece_id: Piece the strip is bonded to.
        parent_label: Display label of the parent.
        side: Parent edge the strip runs under.
        length_mm: Strip length (the edge span).
        width_mm: Strip width (the narrow dimension).
        edge_name: Edge profile name, if known.
        is_mitred: True if the edge is mitred.
    """

    parent_piece_id: str
    parent_label: str
    side: EdgeSide
    length_mm: int
    width_mm: int
    edge_name: str | None = None
    is_mitred: bool = False

    @property
    def id(self) -> str:
        return f"{self.parent_piece_id}-lam-{self.side.value}"

    @property
    def label(self) -> str:
        suffix = f" {self.edge_name}" if self.edge_name else ""
        return f"{self.parent_label} (Lam-{self.side.value.capitalize()}{suffix})"

    @property
    def area(self) -> int:
        return self.length_mm * self.width_mm


@dataclass(frozen=True)
class StripPiece:
    """A strip converted to a packing candidate, with its parent link."""

    piece: Piece
    strip: LaminationStrip
    parent_area: int = 0


@dataclass(frozen=True)
class StripBatch:
    """Strip candidates for a set of pieces plus the warnings raised."""

    strips: tuple[StripPiece, ...] = ()
    diagnostics: Diagnostics = field(default_factory=Diagnostics)


def is_mitred(edge_name: str | None) -> bool:
    """True if an edge profile name denotes a mitre."""
    if not edge_name:
        return False
    lowered = edge_name.lower()
    return any(marker in lowered for marker in _MITRE_MARKERS)


def requires_lamination(piece: Piece, config: LaminationConfig) -> bool:
    return config.enabled and piece.thickness >= config.threshold_mm


def _strips_for(
    piece: Piece,
    config: LaminationConfig,
    mitre_kerf_width: float | None,
) -> tuple[tuple[LaminationStrip, ...], Diagnostics]:
    if not requires_lamination(piece, config):
        return (), Diagnostics()

    strips: list[LaminationStrip] = []
    diagnostics = Diagnostics()
    names = piece.edge_type_names
    for side in piece.finished_edges.sides:
        if side in piece.no_strip_edges:
            continue
        if names is not None and names.is_raw(side):
            continue
        length = piece.edge_length(side)
        if length < config.min_strip_length_mm:
            logger.debug(
                "Skipping %s strip for '%s': %dmm is below minimum %dmm",
                side.value,
                piece.display_label,
                length,
                config.min_strip_length_mm,
            )
            diagnostics = diagnostics.with_warning(
                f"Lamination strip for '{piece.display_label}' {side.value} edge skipped: "
                f"{length}mm is below the {config.min_strip_length_mm}mm minimum"
            )
            continue

        edge_name = names.for_side(side) if names is not None else None
        mitred = is_mitred(edge_name)
        width = config.mitre_width_mm if mitred else config.standard_width_mm
        if mitred and mitre_kerf_width:
            width += int(round(mitre_kerf_width))

        strips.append(
            LaminationStrip(
                parent_piece_id=piece.id,
                parent_label=piece.display_label,
                side=side,
                length_mm=length,
                width_mm=width,
                edge_name=edge_name or None,
                is_mitred=mitred,
            )
        )
    return tuple(strips), diagnostics


def generate_lamination_strips(
    piece: Piece,
    config: LaminationConfig | None = None,
    mitre_kerf_width: float | None = None,
) -> tuple[LaminationStrip, ...]:
    """Generate lamination strips for a piece.

    One strip per finished side, in TOP, BOTTOM, LEFT, RIGHT order. Sides
    that are explicitly raw, listed in ``no_strip_edges`` or shorter than the
    configured minimum are skipped. Mitred sides use the narrower mitre width
    plus ``mitre_kerf_width`` when given.

    Args:
        piece: Parent piece.
        config: Lamination settings; defaults apply when omitted.
        mitre_kerf_width: Extra width lost on the mitring saw.

    Returns:
        Zero to four strips. Thin pieces get none.
    """
    strips, _ = _strips_for(piece, config or LaminationConfig(), mitre_kerf_width)
    return strips


def strip_to_piece(strip: LaminationStrip, parent: Piece, config: LaminationConfig) -> Piece:
    """Packing candidate for a strip.

    Top and bottom strips run along the parent width; left and right strips
    run along the parent height.
    """
    if strip.side.runs_along_width:
        width, height = strip.length_mm, strip.width_mm
    else:
        width, height = strip.width_mm, strip.length_mm
    return Piece(
        id=strip.id,
        width=width,
        height=height,
        label=strip.label,
        thickness=config.strip_thickness_mm,
        finished_edges=FinishedEdges(),
        material_id=parent.material_id,
        grain_matched=parent.grain_matched,
        can_rotate=parent.can_rotate,
    )


def generate_strip_pieces(
    pieces: list[Piece] | tuple[Piece, ...],
    config: LaminationConfig | None = None,
    mitre_kerf_width: float | None = None,
) -> StripBatch:
    """Generate strip packing candidates for every piece in order."""
    config = config or LaminationConfig()
    result: list[StripPiece] = []
    diagnostics = Diagnostics()
    for parent in pieces:
        strips, found = _strips_for(parent, config, mitre_kerf_width)
        diagnostics = diagnostics.merge(found)
        for strip in strips:
            result.append(
                StripPiece(
                    piece=strip_to_piece(strip, parent, config),
                    strip=strip,
                    parent_area=parent.area,
                )
            )
    if result:
        logger.debug("Generated %d lamination strips for %d pieces", len(result), len(pieces))
    return StripBatch(strips=tuple(result), diagnostics=diagnostics)
