"""Shared CLI formatting helpers."""

from __future__ import annotations


def plural(count: int, noun: str, plural_noun: str | None = None) -> str:
    if count == 1:
        return f"1 {noun}"
    return f"{count} {plural_noun or noun + 's'}"


def format_comma_or_none(values: list[str]) -> str:
    if not values:
        return "none"
    return ", ".join(values)
