"""JSON Pointer addressing and copy-on-write patch application."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from jsonmaps.contracts.exceptions import PatchParseError
from jsonmaps.contracts.stream import Patch


def parse_pointer(path: str) -> list[str]:
    """Split a JSON Pointer into unescaped reference tokens.

    A missing leading ``/`` is tolerated since generated patches sometimes
    drop it. ``~1`` decodes to ``/`` and ``~0`` to ``~``, in that order.
    """
    if path in ("", "/"):
        return []
    body = path[1:] if path.startswith("/") else path
    return [token.replace("~1", "/").replace("~0", "~") for token in body.split("/")]


def _list_index(container: list[Any], token: str, *, allow_end: bool) -> int | None:
    if token == "-":
        return len(container) if allow_end else None
    if not (token.isascii() and token.isdigit()) or (len(token) > 1 and token.startswith("0")):
        return None
    return int(token)


def _child(container: dict[str, Any] | list[Any], token: str) -> Any:
    if isinstance(container, dict):
        return container.get(token)
    index = _list_index(container, token, allow_end=False)
    if index is None or index >= len(container):
        return None
    return container[index]


def _assign(container: dict[str, Any] | list[Any], token: str, value: Any, *, path: str) -> None:
    if isinstance(container, dict):
        container[token] = value
        return
    index = _list_index(container, token, allow_end=False)
    if index is None or index >= len(container):
        raise PatchParseError(f"array index '{token}' out of range", line=path)
    container[index] = value


def _writable_copy(value: Any) -> dict[str, Any] | list[Any] | None:
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, list):
        return list(value)
    return None


def _write_leaf(container: dict[str, Any] | list[Any], token: str, patch: Patch) -> None:
    if isinstance(container, dict):
        if patch.op == "remove":
            container.pop(token, None)
        else:
            container[token] = patch.value
        return

    if patch.op == "add":
        index = _list_index(container, token, allow_end=True)
        if index is None or index > len(container):
            raise PatchParseError(f"array index '{token}' out of range", line=patch.path)
        container.insert(index, patch.value)
        return

    index = _list_index(container, token, allow_end=False)
    if patch.op == "remove":
        if index is not None and index < len(container):
            del container[index]
        return
    if index is None or index >= len(container):
        raise PatchParseError(f"array index '{token}' out of range", line=patch.path)
    container[index] = patch.value


def apply_patch(document: Mapping[str, Any], patch: Patch) -> dict[str, Any]:
    """Apply one patch and return a new document; *document* is never mutated.

    Only the containers along the patch path are copied, so untouched
    branches are shared between the old and new document.

    Raises:
        PatchParseError: If the patch cannot address a location in *document*.
    """
    tokens = parse_pointer(patch.path)
    if not tokens:
        if patch.op == "remove":
            return {}
        if not isinstance(patch.value, Mapping):
            raise PatchParseError("root value must be an object", line=patch.path)
        return dict(patch.value)

    root: dict[str, Any] = dict(document)
    container: dict[str, Any] | list[Any] = root
    for token in tokens[:-1]:
        child = _writable_copy(_child(container, token))
        if child is None:
            if patch.op == "remove":
                return dict(document)
            child = {}
        _assign(container, token, child, path=patch.path)
        container = child

    _write_leaf(container, tokens[-1], patch)
    return root
