"""Exporter protocol, format registry and multi-format export manager."""

from __future__ import annotations

import logging
from abc import abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar, Protocol, runtime_checkable

if TYPE_CHECKING:
    from slabs.application.dtos import OptimizeOutput
    from slabs.infrastructure.bin_packing import PackingResult


logger = logging.getLogger(__name__)


@runtime_checkable
class Exporter(Protocol):
    """Protocol for all exporters.

    Exporters convert an OptimizeOutput to a specific format. Each exporter
    defines its format name and file extension and implements ``export`` and
    ``export_string``.

    Attributes:
        format_name: Registered name of the format (e.g., "csv", "svg").
        file_extension: File extension without leading dot.
    """

    format_name: ClassVar[str]
    file_extension: ClassVar[str]

    @abstractmethod
    def export(self, output: OptimizeOutput, path: Path) -> None:
        """Export an optimize run to a file."""
        ...

    @abstractmethod
    def export_string(self, output: OptimizeOutput) -> str:
        """Export an optimize run as a string."""
        ...


def packing_runs(output: OptimizeOutput) -> list[tuple[str | None, PackingResult]]:
    """Packing results of a run as ``(material name, result)`` pairs.

    Single-material runs yield one pair with no material name.

    Raises:
        ValueError: If the output carries no packing result.
    """
    if output.multi_material is not None:
        return [
            (group.material_name, group.result)
            for group in output.multi_material.material_groups
        ]
    if output.result is None:
        raise ValueError("Export requires an optimization result")
    return [(None, output.result)]


class ExporterRegistry:
    """Registry for exporter classes.

    Exporters register themselves with the @ExporterRegistry.register
    decorator.

    Example:
        @ExporterRegistry.register("csv")
        class CsvCutListExporter:
            format_name = "csv"
            file_extension = "csv"
            ...
    """

    _exporters: ClassVar[dict[str, type[Exporter]]] = {}

    @classmethod
    def register(cls, format_name: str):
        """Decorator to register an exporter class under ``format_name``."""

        def decorator(exporter_class: type[Exporter]) -> type[Exporter]:
            if format_name in cls._exporters:
                logger.warning("Overwriting existing exporter for format '%s'", format_name)
            cls._exporters[format_name] = exporter_class
            logger.debug("Registered exporter '%s': %s", format_name, exporter_class.__name__)
            return exporter_class

        return decorator

    @classmethod
    def get(cls, format_name: str) -> type[Exporter]:
        """Get an exporter class by format name.

        Raises:
            KeyError: If no exporter is registered for the format.
        """
        if format_name not in cls._exporters:
            available = ", ".join(sorted(cls._exporters.keys()))
            raise KeyError(
                f"No exporter registered for format '{format_name}'. "
                f"Available formats: {available or 'none'}"
            )
        return cls._exporters[format_name]

    @classmethod
    def available_formats(cls) -> list[str]:
        return sorted(cls._exporters.keys())

    @classmethod
    def is_registered(cls, format_name: str) -> bool:
        return format_name in cls._exporters


class ExportManager:
    """Exports an optimize run to one or more formats.

    Attributes:
        output_dir: Directory where exported files are written.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    def export_all(
        self,
        formats: list[str],
        output: OptimizeOutput,
        project_name: str = "slabs",
    ) -> dict[str, Path]:
        """Export an optimize run to several formats.

        Files are named ``{project_name}_{format}.{ext}``.

        Returns:
            Mapping of format name to written file path.

        Raises:
            KeyError: If any format is not registered.
            OSError: If file operations fail.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)

        results: dict[str, Path] = {}
        for format_name in formats:
            exporter = ExporterRegistry.get(format_name)()
            filepath = self.output_dir / f"{project_name}_{format_name}.{exporter.file_extension}"
            logger.info("Exporting to %s: %s", format_name, filepath)
            exporter.export(output, filepath)
            results[format_name] = filepath
        return results

    def export_single(
        self,
        format_name: str,
        output: OptimizeOutput,
        project_name: str = "slabs",
    ) -> Path:
        return self.export_all([format_name], output, project_name)[format_name]
