"""Validate command formatting."""

from __future__ import annotations

import argparse

from jsonmaps import MapSpec, SpecValidationError
from jsonmaps.cli.common import format_comma_or_none, plural


def format_validate_summary(spec: MapSpec, path: str) -> str:
    lines = [
        "",
        "jsonmaps - spec valid",
        "",
        f"  File:      {path}",
        f"  Basemap:   {spec.basemap or 'light'}",
        f"  Layers:    {format_comma_or_none(list(spec.layers))}",
        f"  Markers:   {plural(len(spec.markers), 'marker')}",
        f"  Legend:    {plural(len(spec.legend), 'entry', 'entries')}",
        f"  Widgets:   {plural(len(spec.widgets), 'widget')}",
        "",
    ]
    return "\n".join(lines)


def run_validate(args: argparse.Namespace) -> MapSpec:
    import jsonmaps.cli as cli

    raw = cli.read_spec_document(args.spec)
    try:
        spec = cli.validate(raw)
    except SpecValidationError:
        if args.repair_prompt:
            print(cli.format_spec_issues(raw))
        raise

    print(cli._format_validate_summary(spec, args.spec))
    return spec


__all__ = ["format_validate_summary", "run_validate"]
