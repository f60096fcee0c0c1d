"""Canonical JSON encoding of saved conversations."""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from .models import PairMap, Structured

INDENT = 2
MAP_KIND = "map"

# Top-level payload fields copied into the primary record, in output order.
RECORD_FIELDS = ("message_and_thread", "users", "channel", "team", "teams")


def canonical_record(structured: Structured) -> dict[str, Any]:
    """Whitelisted subset of a result that belongs in the primary record."""
    record = {
        key: structured.payload[key]
        for key in RECORD_FIELDS
        if structured.payload.get(key) is not None
    }
    record["file_name"] = structured.file_name
    return record


def serialize(value: Any) -> str:
    """Pretty-print ``value`` as JSON, encoding non-object mappings as map entries."""
    return json.dumps(encode(value), indent=INDENT, ensure_ascii=False)


def encode(value: Any) -> Any:
    """Convert ``value`` into plain JSON types."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if type(value) is dict and _is_plain_object(value):
        return {key: encode(item) for key, item in value.items()}
    if isinstance(value, Mapping):
        return {
            "kind": MAP_KIND,
            "entries": [[encode(key), encode(item)] for key, item in value.items()],
        }
    if isinstance(value, (list, tuple)):
        return [encode(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return sorted((encode(item) for item in value), key=repr)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            item.name: encode(getattr(value, item.name)) for item in dataclasses.fields(value)
        }
    if isinstance(value, (bytes, bytearray)):
        raise TypeError("Binary content cannot be embedded in a JSON record")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def decode_maps(value: Any) -> Any:
    """Inverse of the map encoding: rebuild ``PairMap`` objects from parsed JSON."""
    if isinstance(value, list):
        return [decode_maps(item) for item in value]
    if isinstance(value, dict):
        if _is_encoded_map(value):
            return PairMap(
                (_hashable(decode_maps(key)), decode_maps(item))
                for key, item in value["entries"]
            )
        return {key: decode_maps(item) for key, item in value.items()}
    return value


def deserialize(text: str) -> Any:
    return decode_maps(json.loads(text))


def _is_plain_object(value: dict) -> bool:
    """Dicts that survive as a JSON object: string keys, not shaped like an encoded map."""
    if not all(isinstance(key, str) for key in value):
        return False
    return set(value) != {"kind", "entries"}


def _is_encoded_map(value: dict) -> bool:
    if set(value) != {"kind", "entries"} or value["kind"] != MAP_KIND:
        return False
    entries = value["entries"]
    return isinstance(entries, list) and all(
        isinstance(entry, list) and len(entry) == 2 for entry in entries
    )


def _hashable(key: Any) -> Any:
    if isinstance(key, list):
        return tuple(_hashable(item) for item in key)
    return key
