"""Data-driven style expressions for the vector-tile renderer."""

from __future__ import annotations

from typing import Any

from jsonmaps.contracts.layers import CategoricalColor, ColorValue, ContinuousColor, ContinuousSize, SizeValue
from jsonmaps.spec.palettes import PALETTES, get_palette

FALLBACK_COLOR = "#888888"
DEFAULT_NULL_COLOR = "#cccccc"
TRANSPARENT = "rgba(0,0,0,0)"


def color_expression(color: ColorValue) -> Any:
    """Fixed colors pass through; bindings become ``interpolate``/``match`` expressions."""
    if isinstance(color, str):
        return color

    palette = get_palette(color.palette)
    if not palette:
        return FALLBACK_COLOR

    if isinstance(color, ContinuousColor):
        low, high = color.domain or (0.0, 1.0)
        steps = len(palette)
        expression: list[Any] = ["interpolate", ["linear"], ["get", color.attr]]
        for index, swatch in enumerate(palette):
            expression.extend([low + (high - low) * (index / max(steps - 1, 1)), swatch])
        return expression

    if isinstance(color, CategoricalColor):
        if not color.categories:
            return palette[0]
        # Branch labels must be unique.
        expression = ["match", ["get", color.attr]]
        seen: set[str] = set()
        for category in color.categories:
            if category in seen:
                continue
            seen.add(category)
            expression.extend([category, palette[(len(seen) - 1) % len(palette)]])
        expression.append(color.null_color or DEFAULT_NULL_COLOR)
        return expression

    return FALLBACK_COLOR


def size_expression(size: SizeValue, fallback: float) -> Any:
    if isinstance(size, ContinuousSize):
        (d_min, d_max), (r_min, r_max) = size.domain, size.range
        return ["interpolate", ["linear"], ["get", size.attr], d_min, r_min, d_max, r_max]
    if isinstance(size, (int, float)):
        return size
    return fallback


def heatmap_ramp(palette_name: str) -> list[Any]:
    """``heatmap-color`` ramp from transparent through the palette; unknown names use OrYel."""
    palette = get_palette(palette_name) or PALETTES["OrYel"]
    ramp: list[Any] = ["interpolate", ["linear"], ["heatmap-density"], 0, TRANSPARENT]
    for index, swatch in enumerate(palette):
        ramp.extend([(index + 1) / len(palette), swatch])
    return ramp
