# storefront/store/codec.py

"""Conversion between Python values and Firestore REST typed values.

The REST API wraps every field in a one-key object naming its type,
e.g. ``{"integerValue": "3"}`` or ``{"mapValue": {"fields": {...}}}``.
Integers travel as strings; doubles as JSON numbers.
"""

import base64
from datetime import datetime, timezone
from typing import Any


def encode_value(value: Any) -> dict[str, Any]:
    """Wrap a Python value in its Firestore typed-value object."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        stamp = value.astimezone(timezone.utc).isoformat()
        return {"timestampValue": stamp.replace("+00:00", "Z")}
    if isinstance(value, bytes):
        return {"bytesValue": base64.b64encode(value).decode("ascii")}
    if isinstance(value, (list, tuple)):
        return {
            "arrayValue": {"values": [encode_value(v) for v in value]}
        }
    if isinstance(value, dict):
        return {"mapValue": encode_fields(value)}
    raise TypeError(
        f"Cannot store value of type {type(value).__name__}"
    )


def encode_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Encode a mapping as a document/map ``fields`` object."""
    return {
        "fields": {str(k): encode_value(v) for k, v in data.items()}
    }


def decode_value(value: dict[str, Any]) -> Any:
    """Unwrap a Firestore typed-value object."""
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "stringValue" in value:
        return value["stringValue"]
    if "timestampValue" in value:
        return value["timestampValue"]
    if "referenceValue" in value:
        return value["referenceValue"]
    if "bytesValue" in value:
        return base64.b64decode(value["bytesValue"])
    if "geoPointValue" in value:
        point = value["geoPointValue"]
        return {
            "latitude": point.get("latitude", 0.0),
            "longitude": point.get("longitude", 0.0),
        }
    if "arrayValue" in value:
        return [
            decode_value(v)
            for v in value["arrayValue"].get("values", [])
        ]
    if "mapValue" in value:
        return decode_fields(value["mapValue"])
    raise ValueError(f"Unknown Firestore value: {value!r}")


def decode_fields(container: dict[str, Any]) -> dict[str, Any]:
    """Decode the ``fields`` object of a document or map value."""
    return {
        k: decode_value(v)
        for k, v in container.get("fields", {}).items()
    }


def document_id(name: str) -> str:
    """Last path segment of a document resource name."""
    return name.rsplit("/", 1)[-1]


def decode_document(
    document: dict[str, Any],
) -> tuple[str, dict[str, Any]]:
    """Return ``(document id, decoded fields)`` for a REST document."""
    return document_id(document["name"]), decode_fields(document)
