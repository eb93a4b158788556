"""CLI parser construction."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version


def _package_version() -> str:
    try:
        return version("jsonmaps")
    except PackageNotFoundError:
        return "0.0.0"


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=None, help="Path to a jsonmaps config JSON file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jsonmaps")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser("validate", help="Validate a map spec file")
    validate_parser.add_argument("spec", help="Path to a map spec JSON file")
    validate_parser.add_argument(
        "--repair-prompt",
        action="store_true",
        help="Also print a repair prompt listing every issue when the map spec is invalid",
    )
    _add_common(validate_parser)

    stream_parser = subparsers.add_parser("stream", help="Apply a JSONL patch stream and reconcile each snapshot")
    stream_parser.add_argument("file", nargs="?", default="-", help="Patch stream file (default: stdin)")
    stream_parser.add_argument("--initial", default=None, help="Map spec file the stream starts from")
    stream_parser.add_argument("--ops", action="store_true", help="Print every render operation")
    stream_parser.add_argument("--output", "-o", default=None, help="Write the final spec document to this path")
    _add_common(stream_parser)

    table_parser = subparsers.add_parser("load-table", help="Fetch a GeoParquet file and emit GeoJSON")
    table_parser.add_argument("url", help="GeoParquet URL")
    table_parser.add_argument("--geometry-column", default=None, help="Geometry column name override")
    table_parser.add_argument("--output", "-o", default=None, help="Output file path (default: stdout)")
    _add_common(table_parser)

    serve_parser = subparsers.add_parser("serve", help="Run the proxy and tile-archive metadata API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    _add_common(serve_parser)

    return parser


__all__ = ["build_parser"]
