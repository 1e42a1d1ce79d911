"""
registry_sdk.tier1_runtime.keys
─────────────────────────────────
Schema identifiers. A caller names a schema one of three ways:

    "io.confluent.Payment"      → BySubjectLatest
    "io.confluent.Payment:10"   → BySubjectVersion
    42                          → ByGlobalId

Subjects are split from their version at the FIRST colon, so
"a:b:3" is subject "a" with version "b:3", which is rejected.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from registry_sdk.tier0_core.errors import SchemaParseError

_VERSION_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class BySubjectLatest:
    subject: str


@dataclass(frozen=True)
class BySubjectVersion:
    subject: str
    version: int


@dataclass(frozen=True)
class ByGlobalId:
    id: int


LookupKey = BySubjectLatest | BySubjectVersion | ByGlobalId


def parse_key(identifier: str | int) -> LookupKey:
    """
    Turn a caller identifier into a LookupKey.
    Raises SchemaParseError for anything that is not a valid identifier.
    """
    if isinstance(identifier, bool):
        raise SchemaParseError(f"invalid schema identifier: {identifier!r}")
    if isinstance(identifier, int):
        if identifier <= 0:
            raise SchemaParseError(
                f"global schema id must be a positive integer, got {identifier}"
            )
        return ByGlobalId(identifier)
    if not isinstance(identifier, str):
        raise SchemaParseError(
            f"schema identifier must be a string or integer, got {type(identifier).__name__}"
        )

    subject, sep, suffix = identifier.partition(":")
    if not subject:
        raise SchemaParseError(f"schema identifier has an empty subject: {identifier!r}")
    if not sep:
        return BySubjectLatest(subject)
    if not _VERSION_RE.fullmatch(suffix) or int(suffix) == 0:
        raise SchemaParseError(
            f"version must be a positive integer, got {suffix!r} in {identifier!r}"
        )
    return BySubjectVersion(subject, int(suffix))


def subject_of(key: LookupKey) -> str | None:
    """Return the subject a key refers to, or None for global id keys."""
    if isinstance(key, (BySubjectLatest, BySubjectVersion)):
        return key.subject
    if isinstance(key, ByGlobalId):
        return None
    raise TypeError(f"unsupported lookup key: {key!r}")


__all__ = [
    "BySubjectLatest",
    "BySubjectVersion",
    "ByGlobalId",
    "LookupKey",
    "parse_key",
    "subject_of",
]
