"""JSON → domain-model decoding for boundary responses.

Every function in this module is a **pure** transformation — no I/O,
no side effects, fully deterministic.

Rules
-----
* Unknown fields are ignored.
* ``isDir``, ``items``, ``numFiles``, ``numDirs`` default to
  ``False``, ``None``, ``0``, ``0`` when absent.
* ``name``, ``size``, ``extension``, ``path``, ``modified`` are required.
* Anything malformed raises :class:`~krfiles.exceptions.DecodeError` —
  values are never coerced silently.
"""

from __future__ import annotations

import json
from typing import Any

from krfiles.core.models import Resource, SearchResult
from krfiles.exceptions import DecodeError


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def decode_resource(text: str) -> Resource:
    """Decode a ``Resource`` JSON object (file info or directory listing)."""
    raw = _load(text)
    if not isinstance(raw, dict):
        raise DecodeError("Failed to parse response: expected a JSON object.")
    return _parse_resource(raw)


def decode_search_results(text: str) -> tuple[SearchResult, ...]:
    """Decode a JSON array of search hits."""
    raw = _load(text)
    if not isinstance(raw, list):
        raise DecodeError("Failed to parse response: expected a JSON array.")
    return tuple(_parse_search_result(entry) for entry in raw)


# ---------------------------------------------------------------------------
# Raw-dict → domain-model parsers
# ---------------------------------------------------------------------------

def _load(text: str) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"Failed to parse response: {exc}") from exc


def _parse_resource(raw: dict[str, Any]) -> Resource:
    is_dir = _optional(raw, "isDir", bool, False)
    raw_items = raw.get("items")

    if not is_dir:
        # Files never carry children or counts.
        return Resource(
            name=_required(raw, "name", str),
            size=_size(raw),
            extension=_required(raw, "extension", str),
            path=_required(raw, "path", str),
            modified=_required(raw, "modified", str),
        )

    items: tuple[Resource, ...] | None = None
    if raw_items is not None:
        if not isinstance(raw_items, list):
            raise DecodeError("Failed to parse response: 'items' must be an array.")
        items = tuple(_parse_child(entry) for entry in raw_items)

    return Resource(
        name=_required(raw, "name", str),
        size=_size(raw),
        extension=_required(raw, "extension", str),
        path=_required(raw, "path", str),
        modified=_required(raw, "modified", str),
        is_dir=True,
        items=items,
        num_files=_optional(raw, "numFiles", int, 0),
        num_dirs=_optional(raw, "numDirs", int, 0),
    )


def _parse_child(entry: object) -> Resource:
    if not isinstance(entry, dict):
        raise DecodeError("Failed to parse response: directory item is not an object.")
    return _parse_resource(entry)


def _parse_search_result(entry: object) -> SearchResult:
    if not isinstance(entry, dict):
        raise DecodeError("Failed to parse response: search result is not an object.")
    # The wire name is ``dir``; ``isDir`` is accepted for symmetry with Resource.
    key = "dir" if "dir" in entry else "isDir"
    return SearchResult(
        path=_required(entry, "path", str),
        is_dir=_optional(entry, key, bool, False),
    )


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _required(raw: dict[str, Any], key: str, kind: type) -> Any:
    if key not in raw:
        raise DecodeError(f"Failed to parse response: missing field '{key}'.")
    return _checked(raw[key], key, kind)


def _optional(raw: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = raw.get(key)
    if value is None:
        return default
    return _checked(value, key, kind)


def _checked(value: object, key: str, kind: type) -> Any:
    # bool is an int subclass; never accept it where a number is expected.
    if kind is not bool and isinstance(value, bool):
        raise DecodeError(f"Failed to parse response: invalid type for '{key}'.")
    if not isinstance(value, kind):
        raise DecodeError(f"Failed to parse response: invalid type for '{key}'.")
    return value


def _size(raw: dict[str, Any]) -> float:
    if "size" not in raw:
        raise DecodeError("Failed to parse response: missing field 'size'.")
    value = raw["size"]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError("Failed to parse response: invalid type for 'size'.")
    return float(value)
