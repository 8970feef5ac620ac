"""Exporter framework for optimization results.

This package provides a unified exporter framework with:
- Exporter Protocol: Defines the interface for all exporters
- ExporterRegistry: Central registry for format discovery
- ExportManager: Coordinates multi-format export operations

Registered exporters:
- csv: Cut list with summary and lamination breakdown
- json: camelCase result document
- svg: Cut diagrams, one panel per slab

Usage:
    from slabs.infrastructure.exporters import ExportManager, ExporterRegistry

    formats = ExporterRegistry.available_formats()

    manager = ExportManager(output_dir=Path("./output"))
    results = manager.export_all(["csv", "svg"], optimize_output, project_name="Q-1042")
"""

from slabs.infrastructure.exporters.base import (
    Exporter,
    ExporterRegistry,
    ExportManager,
    packing_runs,
)
from slabs.infrastructure.exporters.csv_cutlist import CsvCutListExporter
from slabs.infrastructure.exporters.json_result import (
    JsonResultExporter,
    cut_plan_to_dict,
    multi_material_to_dict,
    output_to_dict,
    packing_result_to_dict,
)
from slabs.infrastructure.exporters.svg import SvgExporter

__all__ = [
    "CsvCutListExporter",
    "ExportManager",
    "Exporter",
    "ExporterRegistry",
    "JsonResultExporter",
    "SvgExporter",
    "cut_plan_to_dict",
    "multi_material_to_dict",
    "output_to_dict",
    "packing_result_to_dict",
    "packing_runs",
]
