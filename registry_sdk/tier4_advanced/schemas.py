"""
registry_sdk.tier4_advanced.schemas
─────────────────────────────────────
Avro schema capability. Turns a structured schema document into a
``ParsedSchema`` (validated, with qualified names and fields exposed) and
pairs it with its registry metadata as a ``ResolvedSchema``.

Backed by: fastavro (parse + validate). The parsed fastavro schema is kept
on ``ParsedSchema.schema`` so encoders can use it without re-parsing.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from fastavro import parse_schema
from fastavro.schema import SchemaParseException

from registry_sdk.tier0_core.errors import SchemaParseError
from registry_sdk.tier1_runtime.serialize import SchemaDocument, encode_document

_NAMED_TYPES = frozenset({"record", "error", "enum", "fixed"})


# ── Data models ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SchemaField:
    name: str
    type: Any
    default: Any = None
    doc: str | None = None


@dataclass(frozen=True)
class ParsedSchema:
    type: str  # record | enum | fixed | union | array | map | <primitive>
    full_name: str | None = None
    qualified_names: list[str] = field(default_factory=list)
    fields: list[SchemaField] = field(default_factory=list)
    schema: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class ResolvedSchema:
    """
    A schema as known to the registry: the parsed form, the structured raw
    document it came from, and whatever registry metadata is available.
    ``id`` is absent when the registry did not report one.
    """
    parsed: ParsedSchema
    raw: SchemaDocument
    id: int | None = None
    subject: str | None = None
    version: int | None = None

    @property
    def full_name(self) -> str | None:
        return self.parsed.full_name

    @property
    def raw_json(self) -> str:
        return encode_document(self.raw)


# ── Protocol ───────────────────────────────────────────────────────────────

@runtime_checkable
class SchemaParser(Protocol):
    def parse(self, document: SchemaDocument) -> ParsedSchema: ...


# ── fastavro parser ────────────────────────────────────────────────────────

def _qualify(name: str, namespace: str | None) -> str:
    if "." in name or not namespace:
        return name
    return f"{namespace}.{name}"


class AvroSchemaParser:
    """
    Validates documents with ``fastavro.parse_schema`` and derives the
    names and fields from the structured document.
    Raises SchemaParseError for anything fastavro rejects.
    """

    def parse(self, document: SchemaDocument) -> ParsedSchema:
        try:
            parsed = parse_schema(document)
        except (SchemaParseException, ValueError, TypeError, KeyError) as exc:
            raise SchemaParseError(f"invalid Avro schema: {exc}") from exc

        if isinstance(document, list):
            return ParsedSchema(
                type="union",
                qualified_names=[n for n in map(_full_name, document) if n],
                schema=parsed,
            )
        if isinstance(document, str):
            return ParsedSchema(type=document, schema=parsed)

        schema_type = document.get("type")
        if isinstance(schema_type, (dict, list)):
            inner = self.parse(schema_type)
            return ParsedSchema(
                type=inner.type,
                full_name=inner.full_name,
                qualified_names=inner.qualified_names,
                fields=inner.fields,
                schema=parsed,
            )
        full_name = _full_name(document)
        names: list[str] = []
        if full_name:
            namespace = full_name.rpartition(".")[0] or None
            names = [full_name] + [
                _qualify(alias, namespace) for alias in _aliases(document)
            ]
        fields = [
            SchemaField(
                name=f["name"],
                type=f["type"],
                default=f.get("default"),
                doc=f.get("doc"),
            )
            for f in _fields(document)
        ]
        return ParsedSchema(
            type=str(schema_type),
            full_name=full_name,
            qualified_names=names,
            fields=fields,
            schema=parsed,
        )


def _full_name(document: Any) -> str | None:
    if not isinstance(document, dict) or document.get("type") not in _NAMED_TYPES:
        return None
    name = document.get("name")
    namespace = document.get("namespace")
    if not isinstance(name, str) or not isinstance(namespace, (str, type(None))):
        raise SchemaParseError(f"invalid Avro schema: bad name or namespace in {document!r}")
    return _qualify(name, namespace)


def _aliases(document: dict[str, Any]) -> list[str]:
    aliases = document.get("aliases", [])
    if not isinstance(aliases, list) or not all(isinstance(a, str) for a in aliases):
        raise SchemaParseError(
            f"invalid Avro schema: aliases must be a list of strings, got {aliases!r}"
        )
    return aliases


def _fields(document: dict[str, Any]) -> list[dict[str, Any]]:
    fields = document.get("fields", [])
    if not isinstance(fields, list) or not all(
        isinstance(f, dict) and isinstance(f.get("name"), str) and "type" in f
        for f in fields
    ):
        raise SchemaParseError(
            "invalid Avro schema: fields must be a list of objects with name and type"
        )
    return fields


__all__ = [
    "SchemaField",
    "ParsedSchema",
    "ResolvedSchema",
    "SchemaParser",
    "AvroSchemaParser",
]
