"""
registry_sdk.tier4_advanced.translate
───────────────────────────────────────
Maps transport results onto resolver results. The registry encodes error
semantics in the body-level ``error_code``, not the HTTP status, so error
kinds come from a static table keyed by request direction and code.
"""
from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, ValidationError as PydanticValidationError

from registry_sdk.tier0_core.errors import (
    ConflictError,
    RegistryError,
    SchemaParseError,
    TransportError,
    UnknownSubjectError,
    UnknownVersionError,
)
from registry_sdk.tier0_core.http import Result
from registry_sdk.tier1_runtime.keys import ByGlobalId, LookupKey, subject_of
from registry_sdk.tier1_runtime.serialize import SchemaDocument, decode_document
from registry_sdk.tier1_runtime.validate import validate_payload
from registry_sdk.tier4_advanced.schemas import ParsedSchema, ResolvedSchema, SchemaParser


class Direction(str, Enum):
    READ = "read"
    WRITE = "write"


_ERROR_KINDS: dict[tuple[Direction, int], type[RegistryError]] = {
    (Direction.READ, 40401): UnknownSubjectError,
    (Direction.READ, 40402): UnknownVersionError,
}

# Used when (direction, code) is not in _ERROR_KINDS.
_FALLBACK_KINDS: dict[Direction, type[RegistryError]] = {
    Direction.READ: RegistryError,
    Direction.WRITE: ConflictError,
}


# ── Wire payloads ──────────────────────────────────────────────────────────

class ErrorPayload(BaseModel):
    error_code: int
    message: str = ""


class SchemaPayload(BaseModel):
    """Body of a subject/version or schema-by-id lookup."""
    schema_: Any = Field(alias="schema")
    subject: str | None = Field(default=None, validation_alias=AliasChoices("subject", "name"))
    version: int | None = None
    id: int | None = None
    schema_type: str = Field(default="AVRO", alias="schemaType")


class RegisteredPayload(BaseModel):
    id: int


# ── Translators ────────────────────────────────────────────────────────────

def translate_error(response: Result[Any], direction: Direction) -> RegistryError:
    """Turn a failed transport result into a local error kind."""
    try:
        payload = ErrorPayload.model_validate(response.error)
    except PydanticValidationError:
        return TransportError(
            f"Schema registry request failed: {response.error}",
            status_code=response.status_code,
        )
    kind = _ERROR_KINDS.get((direction, payload.error_code), _FALLBACK_KINDS[direction])
    return kind(
        payload.message or f"Schema registry error {payload.error_code}",
        error_code=payload.error_code,
        status_code=response.status_code,
    )


def translate_read_success(
    payload: Any, key: LookupKey, parser: SchemaParser
) -> ResolvedSchema:
    """
    Build a ResolvedSchema from a lookup response. The id comes from the
    body when present, else from a global id key.
    """
    body = validate_payload(SchemaPayload, payload)
    if body.schema_type.upper() != "AVRO":
        raise SchemaParseError(
            f"unsupported schema type {body.schema_type!r}, only AVRO is supported"
        )
    raw = decode_document(body.schema_)
    schema_id = body.id
    if schema_id is None and isinstance(key, ByGlobalId):
        schema_id = key.id
    return ResolvedSchema(
        id=schema_id,
        parsed=parser.parse(raw),
        raw=raw,
        subject=body.subject or subject_of(key),
        version=body.version,
    )


def translate_write_success(
    payload: Any,
    document: SchemaDocument,
    parsed: ParsedSchema,
    subject: str,
) -> ResolvedSchema:
    """Pair the id the registry assigned with the document as submitted."""
    body = validate_payload(RegisteredPayload, payload)
    return ResolvedSchema(id=body.id, parsed=parsed, raw=document, subject=subject)


__all__ = [
    "Direction",
    "translate_error",
    "translate_read_success",
    "translate_write_success",
]
