from __future__ import annotations

from jsonmaps.contracts.layers import CategoricalColor, ContinuousColor, ContinuousSize
from jsonmaps.engine.styles import DEFAULT_NULL_COLOR, FALLBACK_COLOR, color_expression, heatmap_ramp, size_expression
from jsonmaps.spec.palettes import PALETTES


def test_fixed_color_passes_through() -> None:
    assert color_expression("#123456") == "#123456"


def test_continuous_color_interpolates_across_domain() -> None:
    palette = PALETTES["Sunset"]
    expression = color_expression(ContinuousColor(type="continuous", attr="pop", palette="Sunset", domain=(0, 60)))

    assert expression[:3] == ["interpolate", ["linear"], ["get", "pop"]]
    stops = expression[3:]
    assert stops[0::2][0] == 0
    assert stops[0::2][-1] == 60
    assert stops[1::2] == palette


def test_continuous_color_defaults_to_unit_domain() -> None:
    expression = color_expression(ContinuousColor(type="continuous", attr="v", palette="OrYel"))

    assert expression[3] == 0
    assert expression[-2] == 1


def test_categorical_color_matches_unique_categories() -> None:
    palette = PALETTES["Bold"]
    expression = color_expression(
        CategoricalColor(type="categorical", attr="kind", palette="Bold", categories=["a", "b", "a", "c"])
    )

    assert expression == [
        "match", ["get", "kind"], "a", palette[0], "b", palette[1], "c", palette[2], DEFAULT_NULL_COLOR
    ]


def test_categorical_color_uses_null_color_override() -> None:
    expression = color_expression(
        CategoricalColor(type="categorical", attr="kind", palette="Bold", categories=["a"], nullColor="#000000")
    )

    assert expression[-1] == "#000000"


def test_categorical_without_categories_uses_first_swatch() -> None:
    assert color_expression(CategoricalColor(type="categorical", attr="k", palette="Bold")) == PALETTES["Bold"][0]


def test_unknown_palette_falls_back_to_grey() -> None:
    assert color_expression(ContinuousColor(type="continuous", attr="v", palette="Nope")) == FALLBACK_COLOR


def test_size_expression() -> None:
    binding = ContinuousSize(type="continuous", attr="mag", domain=(1, 9), range=(2, 20))

    assert size_expression(binding, 5) == ["interpolate", ["linear"], ["get", "mag"], 1, 2, 9, 20]
    assert size_expression(8, 5) == 8


def test_heatmap_ramp_starts_transparent_and_ends_at_full_density() -> None:
    ramp = heatmap_ramp("Sunset")

    assert ramp[:5] == ["interpolate", ["linear"], ["heatmap-density"], 0, "rgba(0,0,0,0)"]
    assert ramp[-2] == 1
    assert ramp[-1] == PALETTES["Sunset"][-1]


def test_heatmap_ramp_unknown_palette_uses_default() -> None:
    assert heatmap_ramp("Nope") == heatmap_ramp("OrYel")
