"""Load-table command: fetch a GeoParquet file and write GeoJSON."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from jsonmaps import TableFetcher, load_table
from jsonmaps.cli.common import plural


def format_table_summary(url: str, collection: dict[str, Any], output: str | None) -> str:
    features = collection.get("features", [])
    geometry_types = sorted({f["geometry"].get("type", "?") for f in features if f.get("geometry")})
    lines = [
        "",
        "jsonmaps - table loaded",
        "",
        f"  Source:    {url}",
        f"  Features:  {plural(len(features), 'feature')}",
        f"  Geometry:  {', '.join(geometry_types) or 'none'}",
        f"  Output:    {output or 'stdout'}",
        "",
    ]
    return "\n".join(lines)


async def run_load_table(args: argparse.Namespace) -> dict[str, Any]:
    import jsonmaps.cli as cli

    config = cli.load_config(args.config)
    async with TableFetcher.from_config(config) as fetcher:
        collection = await load_table(args.url, args.geometry_column, fetcher=fetcher)

    payload = json.dumps(collection)
    if args.output:
        Path(args.output).write_text(payload + "\n", encoding="utf-8")
    else:
        print(payload)
    print(cli._format_table_summary(args.url, collection, args.output), file=sys.stderr)
    return collection


__all__ = ["format_table_summary", "run_load_table"]
