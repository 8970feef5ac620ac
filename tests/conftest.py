"""Pytest configuration and shared fixtures for slab optimizer tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from slabs.domain.value_objects import FinishedEdges, MaterialInfo, Piece


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: tests exercising several layers together")
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def island_piece() -> Piece:
    """A 40mm island benchtop with a finished front edge."""
    return Piece(
        id="p1",
        width=2000,
        height=600,
        label="Kitchen: Island",
        thickness=40,
        finished_edges=FinishedEdges(top=True),
        material_id="m1",
    )


@pytest.fixture
def splashback_piece() -> Piece:
    """A thin splashback with no lamination."""
    return Piece(id="p2", width=1000, height=500, label="Kitchen: Splashback", material_id="m1")


@pytest.fixture
def quartz_material() -> MaterialInfo:
    """Engineered quartz resolved through its brand category."""
    return MaterialInfo(id="m1", name="Calacatta", fabrication_category="caesarstone")


@pytest.fixture
def marble_material() -> MaterialInfo:
    """Natural stone on the smaller 2800x1600 slab."""
    return MaterialInfo(id="m2", name="Carrara", fabrication_category="marble")


# =============================================================================
# Job file fixtures
# =============================================================================


@pytest.fixture
def job_data() -> dict[str, Any]:
    """A schema-valid job with no advisory findings."""
    return {
        "schema_version": "1.0",
        "quote_id": "Q-1",
        "kerf_width_mm": 3,
        "pieces": [
            {"id": "p1", "label": "Island", "length_mm": 2000, "width_mm": 600},
            {"id": "p2", "label": "Splashback", "length_mm": 1000, "width_mm": 500},
        ],
    }


@pytest.fixture
def write_job(tmp_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Write a job dict to a JSON file and return its path."""

    def _write(data: dict[str, Any], name: str = "job.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
