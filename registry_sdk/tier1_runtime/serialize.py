"""
registry_sdk.tier1_runtime.serialize
───────────────────────────────────────
Schema document normalization. The registry hands schemas back as JSON
strings; callers hand them in as strings or already-decoded structures.
Everything past this module works on the structured form.
"""
from __future__ import annotations

import copy
import json
from typing import Any, Union

from registry_sdk.tier0_core.errors import SchemaParseError

# Structured form of a schema: record/enum/... objects, unions, or a bare
# type name such as "string".
SchemaDocument = Union[dict[str, Any], list[Any], str]


def decode_document(document: SchemaDocument | bytes) -> SchemaDocument:
    """
    Return the structured form of a schema document.

    Strings and bytes are decoded as JSON; dicts and lists are deep-copied
    so later mutation by the caller cannot leak into a resolved schema.

    Usage:
        decode_document('{"type": "string"}')   # → {"type": "string"}
        decode_document('"string"')             # → "string"
    """
    if isinstance(document, bytes):
        try:
            document = document.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SchemaParseError(f"schema document is not valid UTF-8: {exc}") from exc
    if isinstance(document, str):
        try:
            decoded = json.loads(document)
        except json.JSONDecodeError as exc:
            raise SchemaParseError(f"schema document is not valid JSON: {exc}") from exc
        if not isinstance(decoded, (dict, list, str)):
            raise SchemaParseError(
                f"schema document must decode to an object, array or string, "
                f"got {type(decoded).__name__}"
            )
        return decoded
    if isinstance(document, (dict, list)):
        return copy.deepcopy(document)
    raise SchemaParseError(
        f"unsupported schema document type: {type(document).__name__}"
    )


def encode_document(document: SchemaDocument) -> str:
    """Serialize a structured schema document to compact JSON."""
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False)


__all__ = ["SchemaDocument", "decode_document", "encode_document"]
