"""Stream command: fold a JSONL patch stream and reconcile a headless renderer."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import AsyncIterator
from pathlib import Path
from typing import BinaryIO

from jsonmaps import InMemoryRenderer, MapSession, SpecLoadError, StreamOutcome
from jsonmaps.cli.common import format_comma_or_none, plural
from jsonmaps.cli.progress.rich import RichReconcileListener

_CHUNK_SIZE = 4096


def format_stream_summary(outcome: StreamOutcome, renderer: InMemoryRenderer) -> str:
    stats = outcome.stats
    layers = list(outcome.spec.layers) if outcome.spec is not None else []
    lines = [
        "",
        "jsonmaps - stream complete",
        "",
        f"  Lines:      {stats.lines} ({stats.applied} applied, {stats.discarded} discarded, {stats.metadata} metadata)",
        f"  Snapshots:  {outcome.rendered} rendered, {outcome.rejected} rejected",
        f"  Operations: {outcome.operations}",
        f"  Layers:     {format_comma_or_none(layers)}",
        f"  Drawn:      {plural(len(renderer.layers), 'map layer')}, {plural(len(renderer.markers), 'marker')}",
    ]
    if outcome.usage is not None:
        usage = outcome.usage
        lines.append(
            f"  Usage:      {usage.total_tokens} tokens "
            f"({usage.prompt_tokens} prompt, {usage.completion_tokens} completion)"
        )
    for notice in outcome.notices:
        lines.append(f"  Notice:     {notice.meta} {json.dumps(notice.payload)}")

    if outcome.is_valid:
        lines.append("  Status:     spec valid")
    else:
        lines.append(f"  Status:     {plural(len(outcome.issues), 'issue')}")
        lines.extend(f"    - {issue}" for issue in outcome.issues)
    lines.append("")
    return "\n".join(lines)


def open_stream(path: str) -> BinaryIO:
    if path == "-":
        return sys.stdin.buffer
    try:
        return open(path, "rb")
    except OSError as exc:
        raise SpecLoadError(f"failed to read patch stream: {exc}") from exc


async def read_chunks(handle: BinaryIO, chunk_size: int = _CHUNK_SIZE) -> AsyncIterator[bytes]:
    """Yield chunks as they become readable; a pipe yields partial chunks without waiting to fill."""
    read = getattr(handle, "read1", handle.read)
    while True:
        chunk = await asyncio.to_thread(read, chunk_size)
        if not chunk:
            return
        yield chunk


async def run_stream(args: argparse.Namespace) -> StreamOutcome:
    import jsonmaps.cli as cli

    config = cli.load_config(args.config)
    initial = cli.read_spec_document(args.initial) if args.initial else None
    renderer = InMemoryRenderer()
    handle = open_stream(args.file)

    try:
        with RichReconcileListener(show_operations=args.ops, live=not args.verbose) as listener:
            async with MapSession.from_config(renderer, config, listener=listener) as session:
                outcome = await session.stream(read_chunks(handle), initial=initial)
    finally:
        if handle is not sys.stdin.buffer:
            handle.close()

    if args.output:
        Path(args.output).write_text(json.dumps(outcome.document, indent=2) + "\n", encoding="utf-8")
    print(cli._format_stream_summary(outcome, renderer))
    if outcome.repair_prompt is not None and args.verbose:
        print(outcome.repair_prompt, file=sys.stderr)
    return outcome


__all__ = ["format_stream_summary", "open_stream", "read_chunks", "run_stream"]
