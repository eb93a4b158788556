"""Streaming patch contracts."""

from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, Field

PatchOp = Literal["add", "replace", "remove"]

META_KEY = "__meta"


class Patch(BaseModel):
    op: PatchOp
    path: str
    value: Any = None

    model_config = {"frozen": True}


class TokenUsage(BaseModel):
    prompt_tokens: int = Field(default=0, alias="promptTokens")
    completion_tokens: int = Field(default=0, alias="completionTokens")
    total_tokens: int = Field(default=0, alias="totalTokens")

    model_config = {"frozen": True, "populate_by_name": True}


class SpecSnapshot(BaseModel):
    """Spec document after one applied patch."""

    kind: Literal["snapshot"] = "snapshot"
    patch: Patch
    document: dict[str, Any]
    sequence: int


class UsageReport(BaseModel):
    kind: Literal["usage"] = "usage"
    usage: TokenUsage


class StreamNotice(BaseModel):
    """Out-of-band annotation other than usage (errors, tool calls)."""

    kind: Literal["notice"] = "notice"
    meta: str
    payload: dict[str, Any] = Field(default_factory=dict)


StreamEvent = Union[SpecSnapshot, UsageReport, StreamNotice]


class StreamStats(BaseModel):
    lines: int = 0
    applied: int = 0
    discarded: int = 0
    metadata: int = 0
