"""Unit tests for the job file schema, loader, adapters and advisory checks.

Tests cover:
- Pydantic schema validation (required fields, ranges, versions, shapes)
- Loader error categories and JSON paths
- Conversion of job models to domain objects and requests
- Advisory checks and ValidationResult exit codes
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest
from pydantic import ValidationError as PydanticValidationError

from slabs.application.config import (
    ConfigError,
    OptimizationJobConfig,
    ValidationResult,
    config_to_machine_defaults,
    config_to_piece,
    config_to_request,
    load_config,
    load_config_from_dict,
    validate_config,
)
from slabs.application.config.loader import _format_json_path
from slabs.application.config.validator import (
    check_lamination_advisories,
    check_material_advisories,
    check_slab_advisories,
)
from slabs.domain.value_objects import EdgeSide, MachineOperation, ShapeType


def _job(*pieces: dict[str, Any], **fields: Any) -> OptimizationJobConfig:
    data: dict[str, Any] = {"schema_version": "1.0", "pieces": list(pieces)}
    data.update(fields)
    return OptimizationJobConfig.model_validate(data)


def _piece(piece_id: str = "p1", length: int = 2000, width: int = 600, **fields: Any) -> dict[str, Any]:
    return {"id": piece_id, "length_mm": length, "width_mm": width, **fields}


# =============================================================================
# Schema
# =============================================================================


class TestSchema:
    """Tests for OptimizationJobConfig validation."""

    def test_minimal_job(self) -> None:
        config = _job(_piece())
        assert config.quote_id == "job"
        assert config.pieces[0].thickness_mm == 20
        assert config.lamination.enabled is True
        assert config.kerf_width_mm is None

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            _job(_piece(colour="white"))

    def test_no_pieces_rejected(self) -> None:
        with pytest.raises(PydanticValidationError):
            _job()

    @pytest.mark.parametrize("field,value", [("length_mm", 0), ("width_mm", -5)])
    def test_non_positive_dimensions(self, field: str, value: int) -> None:
        with pytest.raises(PydanticValidationError):
            _job(_piece(**{field: value}))

    def test_duplicate_piece_ids(self) -> None:
        with pytest.raises(PydanticValidationError, match="Duplicate piece id"):
            _job(_piece("p1"), _piece("p1"))

    def test_newer_minor_version_accepted(self) -> None:
        config = OptimizationJobConfig.model_validate(
            {"schema_version": "1.5", "pieces": [_piece()]}
        )
        assert config.schema_version == "1.5"

    def test_unsupported_major_version(self) -> None:
        with pytest.raises(PydanticValidationError, match="Unsupported schema version"):
            OptimizationJobConfig.model_validate({"schema_version": "2.0", "pieces": [_piece()]})

    def test_l_shape_requires_both_legs(self) -> None:
        with pytest.raises(PydanticValidationError, match="missing leg"):
            _job(
                _piece(
                    shape_type="L_SHAPE",
                    shape_config={"leg1": {"length_mm": 2400, "width_mm": 600}},
                )
            )

    def test_negative_kerf(self) -> None:
        with pytest.raises(PydanticValidationError):
            _job(_piece(), kerf_width_mm=-1)

    def test_machine_kerfs(self) -> None:
        config = _job(_piece(), machine_kerfs={"INITIAL_CUT": 5})
        assert config.machine_kerfs == {MachineOperation.INITIAL_CUT: 5}

    def test_negative_machine_kerf(self) -> None:
        with pytest.raises(PydanticValidationError, match="non-negative"):
            _job(_piece(), machine_kerfs={"MITRING": -1})


# =============================================================================
# Loader
# =============================================================================


class TestLoader:
    """Tests for load_config and load_config_from_dict."""

    def test_load_valid_file(
        self, job_data: dict[str, Any], write_job: Callable[..., Path]
    ) -> None:
        config = load_config(write_job(job_data))
        assert config.quote_id == "Q-1"
        assert len(config.pieces) == 2

    def test_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "missing.json")
        assert exc_info.value.error_type == "file_not_found"

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text('{"schema_version": "1.0",\n  "pieces": [', encoding="utf-8")

        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.error_type == "json_parse"
        assert exc_info.value.details[0]["line"] >= 1

    def test_validation_error_paths(self, job_data: dict[str, Any]) -> None:
        job_data["pieces"][1]["length_mm"] = 0

        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(job_data)
        error = exc_info.value
        assert error.error_type == "validation"
        assert error.details[0]["path"] == "pieces[1].length_mm"
        assert "pieces[1].length_mm" in error.message

    def test_format_json_path(self) -> None:
        assert _format_json_path(("pieces", 0, "finished_edges", "top")) == "pieces[0].finished_edges.top"
        assert _format_json_path(()) == ""


# =============================================================================
# Adapters
# =============================================================================


class TestAdapters:
    """Tests for conversion to domain objects."""

    def test_piece_axes(self) -> None:
        piece = config_to_piece(_job(_piece(length=2400, width=650)).pieces[0])
        assert (piece.width, piece.height) == (2400, 650)

    def test_piece_fields(self) -> None:
        config = _job(
            _piece(
                label="Island",
                thickness_mm=40,
                finished_edges={"top": True},
                edge_type_names={"top": "Mitre", "left": ""},
                material_id="m1",
                grain_matched=True,
                no_strip_edges=["left"],
            )
        )
        piece = config_to_piece(config.pieces[0])

        assert piece.label == "Island"
        assert piece.thickness == 40
        assert piece.finished_edges.top is True
        assert piece.edge_type_names is not None
        assert piece.edge_type_names.is_raw(EdgeSide.LEFT)
        assert piece.grain_matched is True
        assert piece.no_strip_edges == frozenset({EdgeSide.LEFT})

    def test_shape_config_converted(self) -> None:
        config = _job(
            _piece(
                shape_type="L_SHAPE",
                shape_config={
                    "leg1": {"length_mm": 2400, "width_mm": 600},
                    "leg2": {"length_mm": 1200, "width_mm": 600},
                },
            )
        )
        piece = config_to_piece(config.pieces[0])
        assert piece.shape_type is ShapeType.L_SHAPE
        assert piece.shape_config == {
            "leg1": {"length_mm": 2400, "width_mm": 600},
            "leg2": {"length_mm": 1200, "width_mm": 600},
        }

    def test_request(self) -> None:
        config = _job(
            _piece(material_id="m1"),
            quote_id="Q-7",
            materials=[{"id": "m1", "name": "Calacatta", "fabrication_category": "caesarstone"}],
            slab={"length_mm": 3000, "width_mm": 1400},
            edge_allowance_mm=10,
            kerf_width_mm=4,
            lamination={"threshold_mm": 30},
        )
        request = config_to_request(config, persist=False)

        assert request.quote_id == "Q-7"
        assert request.materials[0].fabrication_category == "caesarstone"
        assert request.slab_override is not None
        assert request.slab_override.length_mm == 3000
        assert request.edge_allowance_mm == 10
        assert request.kerf_width == 4
        assert request.lamination.threshold_mm == 30
        assert request.persist is False

    def test_machine_defaults_overlay(self) -> None:
        defaults = config_to_machine_defaults(_job(_piece(), machine_kerfs={"INITIAL_CUT": 5}))
        assert defaults.kerf_for(MachineOperation.INITIAL_CUT) == 5
        assert defaults.kerf_for(MachineOperation.MITRING) == 4


# =============================================================================
# Advisory checks
# =============================================================================


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_exit_codes(self) -> None:
        assert ValidationResult().exit_code == 0
        assert ValidationResult().add_warning("a", "b").exit_code == 2
        assert ValidationResult().add_warning("a", "b").add_error("c", "d").exit_code == 1

    def test_merge(self) -> None:
        result = ValidationResult().add_error("a", "b")
        result.merge(ValidationResult().add_warning("c", "d"))
        assert result.is_valid is False
        assert result.has_warnings is True


class TestAdvisories:
    """Tests for the fabrication advisory checks."""

    def test_clean_job(self, job_data: dict[str, Any]) -> None:
        result = validate_config(load_config_from_dict(job_data))
        assert result.errors == []
        assert result.warnings == []
        assert result.exit_code == 0

    def test_oversize_piece_warns(self) -> None:
        result = check_slab_advisories(_job(_piece(length=4000, width=600)))
        assert len(result.warnings) == 1
        warning = result.warnings[0]
        assert warning.path == "pieces[0]"
        assert "needs 1 join(s) (600mm)" in warning.message

    def test_unplaceable_piece_warns(self) -> None:
        result = check_slab_advisories(_job(_piece(length=3500, width=1700)))
        assert "cannot be placed" in result.warnings[0].message
        assert result.warnings[0].suggestion is not None

    def test_material_slab_used(self) -> None:
        config = _job(
            _piece(length=3000, material_id="m2"),
            materials=[{"id": "m2", "name": "Carrara", "fabrication_category": "marble"}],
        )
        result = check_slab_advisories(config)
        assert "2800x1600mm slab" in result.warnings[0].message

    def test_slab_override_used(self) -> None:
        config = _job(_piece(length=2500), slab={"length_mm": 2400, "width_mm": 1200})
        assert len(check_slab_advisories(config).warnings) == 1

    def test_shaped_piece_checked_per_leg(self) -> None:
        config = _job(
            _piece(
                length=4000,
                width=1800,
                shape_type="L_SHAPE",
                shape_config={
                    "leg1": {"length_mm": 4000, "width_mm": 600},
                    "leg2": {"length_mm": 1200, "width_mm": 600},
                },
            )
        )
        (warning,) = check_slab_advisories(config).warnings
        assert "'p1' (Leg A)" in warning.message

    def test_edge_allowance_consumes_slab(self) -> None:
        result = validate_config(_job(_piece(), edge_allowance_mm=800))
        assert result.errors[0].path == "edge_allowance_mm"
        assert result.exit_code == 1

    def test_unknown_material(self) -> None:
        result = check_material_advisories(_job(_piece(material_id="m9")))
        assert "Material 'm9' is not defined" in result.warnings[0].message

    def test_primary_material_missing(self) -> None:
        result = check_material_advisories(_job(_piece(), primary_material_id="m1"))
        assert result.warnings[0].path == "primary_material_id"

    def test_unassigned_piece_only_warned_with_several_materials(self) -> None:
        materials = [{"id": "m1", "name": "Quartz"}, {"id": "m2", "name": "Marble"}]
        single = _job(_piece("p1", material_id="m1"), _piece("p2"), materials=materials)
        mixed = _job(
            _piece("p1", material_id="m1"),
            _piece("p2", material_id="m2"),
            _piece("p3"),
            materials=materials,
        )

        assert check_material_advisories(single).warnings == []
        (warning,) = check_material_advisories(mixed).warnings
        assert warning.path == "pieces[2].material_id"

    def test_thick_piece_without_finished_edges(self) -> None:
        result = check_lamination_advisories(_job(_piece(thickness_mm=40)))
        assert "no lamination strips will be cut" in result.warnings[0].message

    def test_lamination_disabled_skips_check(self) -> None:
        config = _job(_piece(thickness_mm=40), lamination={"enabled": False})
        assert check_lamination_advisories(config).warnings == []

    def test_job_file_round_trip(self, write_job: Callable[..., Path]) -> None:
        path = write_job({"schema_version": "1.0", "pieces": [_piece(length=4000)]})
        data = json.loads(path.read_text(encoding="utf-8"))
        assert validate_config(load_config_from_dict(data)).exit_code == 2
