"""Standard slab sizes per fabrication category and resolution helpers."""

from __future__ import annotations

import re

from slabs.domain.value_objects import FabricationCategory, MaterialInfo, SlabSize

# Jumbo engineered quartz; used when nothing more specific is known
FALLBACK_SLAB = SlabSize(length_mm=3200, width_mm=1600, name="Engineered Quartz (Jumbo)")

SLAB_SIZES: dict[FabricationCategory, SlabSize] = {
    FabricationCategory.ENGINEERED_QUARTZ_JUMBO: FALLBACK_SLAB,
    FabricationCategory.ENGINEERED_QUARTZ_STANDARD: SlabSize(
        length_mm=3050, width_mm=1440, name="Engineered Quartz (Standard)"
    ),
    FabricationCategory.NATURAL_STONE: SlabSize(
        length_mm=2800, width_mm=1600, name="Natural Stone"
    ),
    FabricationCategory.PORCELAIN: SlabSize(
        length_mm=3200, width_mm=1600, name="Porcelain"
    ),
}

# Brand and category names seen on material records, normalised to [a-z]
CATEGORY_ALIASES: dict[str, FabricationCategory] = {
    "caesarstone": FabricationCategory.ENGINEERED_QUARTZ_JUMBO,
    "silestone": FabricationCategory.ENGINEERED_QUARTZ_JUMBO,
    "smartstone": FabricationCategory.ENGINEERED_QUARTZ_JUMBO,
    "essastone": FabricationCategory.ENGINEERED_QUARTZ_STANDARD,
    "engineeredquartz": FabricationCategory.ENGINEERED_QUARTZ_JUMBO,
    "engineeredquartzjumbo": FabricationCategory.ENGINEERED_QUARTZ_JUMBO,
    "engineeredquartzstandard": FabricationCategory.ENGINEERED_QUARTZ_STANDARD,
    "granite": FabricationCategory.NATURAL_STONE,
    "marble": FabricationCategory.NATURAL_STONE,
    "quartzite": FabricationCategory.NATURAL_STONE,
    "naturalstone": FabricationCategory.NATURAL_STONE,
    "porcelain": FabricationCategory.PORCELAIN,
    "dekton": FabricationCategory.PORCELAIN,
    "neolith": FabricationCategory.PORCELAIN,
    "sintered": FabricationCategory.PORCELAIN,
    "sinteredstone": FabricationCategory.PORCELAIN,
}


def _normalise(name: str) -> str:
    return re.sub(r"[^a-z]", "", name.lower())


def category_for(name: str | None) -> FabricationCategory | None:
    """Map a category or brand name to a known fabrication category.

    Returns None when the name is empty or unknown.
    """
    if not name:
        return None
    return CATEGORY_ALIASES.get(_normalise(name))


def default_slab_size(category: str | None) -> SlabSize | None:
    """Standard slab for a fabrication category, or None if unknown."""
    resolved = category_for(category)
    if resolved is None:
        return None
    return SLAB_SIZES[resolved]


def get_slab_size(name: str | None) -> SlabSize:
    """Standard slab for a category or brand name, falling back to jumbo quartz."""
    return default_slab_size(name) or FALLBACK_SLAB


def resolve_slab_size(
    material: MaterialInfo | None,
    override: SlabSize | None = None,
) -> tuple[SlabSize, str]:
    """Resolve slab dimensions for a material.

    Fallback chain: explicit override, material record, fabrication category
    default, then jumbo quartz. Length and width resolve independently so a
    record with only one dimension still contributes it.

    Returns:
        Tuple of (slab size, source) where source is one of "override",
        "material-record", "category-default" or "ultimate-fallback".
    """
    if override is not None:
        return override, "override"

    category_size = default_slab_size(material.fabrication_category) if material else None
    length = material.slab_length_mm if material else None
    width = material.slab_width_mm if material else None

    if length or width:
        source = "material-record"
    elif category_size is not None:
        source = "category-default"
    else:
        source = "ultimate-fallback"

    resolved_length = length or (category_size.length_mm if category_size else FALLBACK_SLAB.length_mm)
    resolved_width = width or (category_size.width_mm if category_size else FALLBACK_SLAB.width_mm)
    name = material.name if material else FALLBACK_SLAB.name
    return SlabSize(length_mm=resolved_length, width_mm=resolved_width, name=name), source
