"""Infrastructure layer - packing engines, persistence and output formats."""

from .bin_packing import (
    LaminationSummary,
    PackingConfig,
    PackingResult,
    Placement,
    SlabBinPacker,
    SlabConfig,
    SlabLayout,
    optimize_slabs,
)
from .cut_diagram_renderer import CutDiagramRenderer
from .exporters import (
    CsvCutListExporter,
    Exporter,
    ExporterRegistry,
    ExportManager,
    JsonResultExporter,
    SvgExporter,
)
from .formatters import (
    CutPlanFormatter,
    MultiMaterialReportFormatter,
    OptimizationReportFormatter,
)
from .multi_material import (
    MaterialGroupResult,
    MultiMaterialOptimizer,
    MultiMaterialResult,
    OversizePieceInfo,
    optimize_multi_material,
)
from .persistence import (
    DEFAULT_MACHINE_KERFS,
    InMemoryPieceRepository,
    PersistenceError,
    SqlitePieceRepository,
    StaticMachineDefaults,
    StaticMaterialCatalog,
)

__all__ = [
    # Bin packing
    "LaminationSummary",
    "PackingConfig",
    "PackingResult",
    "Placement",
    "SlabBinPacker",
    "SlabConfig",
    "SlabLayout",
    "optimize_slabs",
    # Multi-material
    "MaterialGroupResult",
    "MultiMaterialOptimizer",
    "MultiMaterialResult",
    "OversizePieceInfo",
    "optimize_multi_material",
    # Persistence
    "DEFAULT_MACHINE_KERFS",
    "InMemoryPieceRepository",
    "PersistenceError",
    "SqlitePieceRepository",
    "StaticMachineDefaults",
    "StaticMaterialCatalog",
    # Rendering and formatting
    "CutDiagramRenderer",
    "CutPlanFormatter",
    "MultiMaterialReportFormatter",
    "OptimizationReportFormatter",
    # Exporters
    "CsvCutListExporter",
    "ExportManager",
    "Exporter",
    "ExporterRegistry",
    "JsonResultExporter",
    "SvgExporter",
]
