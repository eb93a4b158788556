"""Serve command: run the HTTP API under uvicorn."""

from __future__ import annotations

import argparse

import uvicorn

from jsonmaps.server import create_app


def run_serve(args: argparse.Namespace) -> None:
    import jsonmaps.cli as cli

    config = cli.load_config(args.config)
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level="debug" if args.verbose else "info")


__all__ = ["run_serve"]
