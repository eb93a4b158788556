from __future__ import annotations

import json
from pathlib import Path

import pytest

from jsonmaps.contracts.exceptions import SpecLoadError, SpecValidationError
from jsonmaps.contracts.spec import MapSpec
from jsonmaps.spec import format_spec_issues, get_palette, load_spec, read_spec_document, validate


def test_validate_returns_spec_for_valid_document(sample_document: dict) -> None:
    spec = validate(sample_document)

    assert isinstance(spec, MapSpec)
    assert list(spec.layers) == ["cafes"]


def test_validate_passes_spec_instances_through() -> None:
    spec = MapSpec()

    assert validate(spec) is spec


def test_validate_rejects_non_object_root() -> None:
    with pytest.raises(SpecValidationError) as exc_info:
        validate(["not", "a", "spec"])

    assert exc_info.value.errors == ["(root): spec must be a JSON object, got list"]


def test_validate_collects_every_issue_with_paths() -> None:
    raw = {
        "center": [1],
        "markers": {"m1": {"label": "no coordinates"}},
    }

    with pytest.raises(SpecValidationError) as exc_info:
        validate(raw)

    errors = exc_info.value.errors
    assert any(error.startswith("/center") for error in errors)
    assert any(error.startswith("/markers/m1/coordinates") for error in errors)
    assert "Map spec validation failed" in str(exc_info.value)


def test_validate_tolerates_dangling_legend_reference() -> None:
    spec = validate({"legend": {"l": {"layer": "missing"}}})

    assert spec.legend["l"].layer == "missing"


def test_format_spec_issues_is_none_for_valid_spec(sample_document: dict) -> None:
    assert format_spec_issues(sample_document) is None


def test_format_spec_issues_builds_repair_prompt() -> None:
    prompt = format_spec_issues({"bounds": [1, 2]})

    assert prompt is not None
    lines = prompt.splitlines()
    assert lines[0] == (
        "The generated map spec has the following errors. Output ONLY the patches needed to fix them:"
    )
    assert lines[1].startswith("- /bounds")


def test_load_spec_reads_and_validates(tmp_path: Path, sample_document: dict) -> None:
    path = tmp_path / "map.json"
    path.write_text(json.dumps(sample_document), encoding="utf-8")

    spec = load_spec(path)

    assert spec.basemap == "dark"


def test_load_spec_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SpecLoadError, match="missing spec file"):
        load_spec(tmp_path / "nope.json")


def test_load_spec_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "map.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SpecLoadError, match="invalid JSON"):
        load_spec(path)


def test_read_spec_document_does_not_validate(tmp_path: Path) -> None:
    path = tmp_path / "map.json"
    path.write_text(json.dumps({"center": [1]}), encoding="utf-8")

    assert read_spec_document(path) == {"center": [1]}
    with pytest.raises(SpecValidationError):
        load_spec(path)


def test_get_palette() -> None:
    assert get_palette("OrYel") is not None
    assert get_palette("NoSuchPalette") is None
    assert get_palette(None) is None
