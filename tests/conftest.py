"""Shared test fixtures for jsonmaps tests."""

from __future__ import annotations

from typing import Any

import pytest

from tests.fakes.renderer import RecordingRenderer


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def point_collection() -> dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [
            {"type": "Feature", "geometry": {"type": "Point", "coordinates": [2.35, 48.85]}, "properties": {"n": 1}},
        ],
    }


@pytest.fixture
def sample_document(point_collection: dict[str, Any]) -> dict[str, Any]:
    """A small valid spec document with one layer, marker, legend entry and widget."""
    return {
        "basemap": "dark",
        "center": [2.35, 48.85],
        "zoom": 11,
        "layers": {
            "cafes": {
                "type": "geojson",
                "data": point_collection,
                "style": {"pointColor": "#f97316"},
                "tooltip": ["n"],
            }
        },
        "markers": {"hq": {"coordinates": [2.35, 48.86], "label": "HQ"}},
        "legend": {"cafes-legend": {"layer": "cafes", "title": "Cafes"}},
        "widgets": {"count": {"title": "Cafes", "value": 1}},
    }
