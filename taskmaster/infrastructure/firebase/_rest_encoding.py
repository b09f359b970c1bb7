"""Decode Firestore REST API values into plain Python data.

Predicates compare plain values, so timestamps stay ISO strings, references
stay resource names and geo points become {"latitude", "longitude"} dicts.
"""

import base64
from typing import Any


def decode_value(obj: dict) -> Any:
    """Convert one Firestore REST Value to a Python value."""
    if "nullValue" in obj:
        return None
    if "booleanValue" in obj:
        return obj["booleanValue"]
    if "integerValue" in obj:
        return int(obj["integerValue"])
    if "doubleValue" in obj:
        return float(obj["doubleValue"])
    if "timestampValue" in obj:
        return obj["timestampValue"]
    if "stringValue" in obj:
        return obj["stringValue"]
    if "bytesValue" in obj:
        return base64.standard_b64decode(obj["bytesValue"])
    if "referenceValue" in obj:
        return obj["referenceValue"]
    if "geoPointValue" in obj:
        point = obj["geoPointValue"]
        return {
            "latitude": point.get("latitude", 0.0),
            "longitude": point.get("longitude", 0.0),
        }
    if "arrayValue" in obj:
        vals = obj["arrayValue"].get("values") or []
        return [decode_value(x) for x in vals]
    if "mapValue" in obj:
        return decode_fields(obj["mapValue"].get("fields"))
    return None


def decode_fields(fields: dict | None) -> dict[str, Any]:
    """Convert a Firestore 'fields' map to a Python dict."""
    if not fields:
        return {}
    return {k: decode_value(v) for k, v in fields.items()}


def decode_document(document: dict | None) -> dict[str, Any]:
    """Convert a Firestore REST Document (with 'name' and 'fields') to its data."""
    if not document:
        return {}
    return decode_fields(document.get("fields"))
