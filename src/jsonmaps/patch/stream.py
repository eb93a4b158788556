"""Incremental NDJSON patch stream.

:class:`PatchStream` is a buffer-plus-cursor state machine: chunks are
appended to a text buffer, complete ``\\n``-terminated lines are parsed and
applied in arrival order, and an incomplete trailing line stays buffered
until the next chunk or :meth:`PatchStream.close`.
"""

from __future__ import annotations

import codecs
import json
import logging
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from jsonmaps.contracts.exceptions import PatchParseError
from jsonmaps.contracts.stream import (
    META_KEY,
    Patch,
    SpecSnapshot,
    StreamEvent,
    StreamNotice,
    StreamStats,
    TokenUsage,
    UsageReport,
)
from jsonmaps.patch.pointer import apply_patch

_LOG = logging.getLogger(__name__)

_PATCH_OPS = frozenset({"add", "replace", "remove"})


def _is_skippable(text: str) -> bool:
    return not text or text.startswith("//") or text.startswith("```")


def parse_line(text: str) -> Patch | UsageReport | StreamNotice:
    """Decode one stripped, non-empty stream line.

    Raises:
        PatchParseError: If the line is not JSON or not a recognized patch/metadata object.
    """
    try:
        payload: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PatchParseError(f"invalid JSON: {exc.msg}", line=text) from exc
    if not isinstance(payload, dict):
        raise PatchParseError("line is not a JSON object", line=text)

    if META_KEY in payload:
        kind = str(payload[META_KEY])
        if kind == "usage":
            try:
                return UsageReport(usage=TokenUsage.model_validate(payload))
            except ValidationError as exc:
                raise PatchParseError("malformed usage metadata", line=text) from exc
        return StreamNotice(meta=kind, payload={k: v for k, v in payload.items() if k != META_KEY})

    op = payload.get("op")
    path = payload.get("path")
    if op not in _PATCH_OPS:
        raise PatchParseError(f"unrecognized op {op!r}", line=text)
    if not isinstance(path, str):
        raise PatchParseError("patch path must be a string", line=text)
    if op != "remove" and "value" not in payload:
        raise PatchParseError(f"{op} patch without value", line=text)
    return Patch(op=op, path=path, value=payload.get("value"))


class PatchStream:
    """Folds streamed patch lines into a running spec document."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._document: dict[str, Any] = dict(initial or {})
        self._buffer = ""
        self._scan = 0
        self._sequence = 0
        self._closed = False
        self.stats = StreamStats()

    @property
    def document(self) -> dict[str, Any]:
        return self._document

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> str:
        """Buffered text not yet terminated by a newline."""
        return self._buffer

    def feed(self, chunk: str) -> list[StreamEvent]:
        if self._closed:
            raise RuntimeError("cannot feed a closed patch stream")
        self._buffer += chunk

        events: list[StreamEvent] = []
        start = 0
        scan = self._scan
        while True:
            newline = self._buffer.find("\n", scan)
            if newline < 0:
                break
            events.extend(self._consume(self._buffer[start:newline]))
            start = scan = newline + 1

        self._buffer = self._buffer[start:]
        self._scan = len(self._buffer)
        return events

    def close(self) -> list[StreamEvent]:
        """Flush a final unterminated line; an unparseable fragment is discarded."""
        if self._closed:
            return []
        self._closed = True
        tail, self._buffer, self._scan = self._buffer, "", 0
        return self._consume(tail)

    async def consume(self, chunks: AsyncIterable[str | bytes]) -> AsyncIterator[StreamEvent]:
        """Drive the stream from an async chunk source until it is exhausted."""
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        async for chunk in chunks:
            text = decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
            for event in self.feed(text):
                yield event
        tail = decoder.decode(b"", final=True)
        if tail:
            for event in self.feed(tail):
                yield event
        for event in self.close():
            yield event

    def _consume(self, line: str) -> list[StreamEvent]:
        text = line.strip()
        if _is_skippable(text):
            return []
        self.stats.lines += 1

        try:
            decoded = parse_line(text)
            if not isinstance(decoded, Patch):
                self.stats.metadata += 1
                return [decoded]
            self._document = apply_patch(self._document, decoded)
        except PatchParseError as exc:
            self.stats.discarded += 1
            _LOG.debug("Discarded stream line %r: %s", exc.line[:120], exc)
            return []

        self.stats.applied += 1
        self._sequence += 1
        return [SpecSnapshot(patch=decoded, document=self._document, sequence=self._sequence)]


def apply_stream(
    chunks: AsyncIterable[str | bytes],
    initial: Mapping[str, Any] | None = None,
) -> AsyncIterator[StreamEvent]:
    """Yield stream events for an async source of text or UTF-8 byte chunks."""
    return PatchStream(initial).consume(chunks)


def fold_patches(lines: Iterable[str], initial: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Apply complete patch lines synchronously and return the final document."""
    stream = PatchStream(initial)
    for line in lines:
        stream.feed(line if line.endswith("\n") else f"{line}\n")
    stream.close()
    return stream.document
