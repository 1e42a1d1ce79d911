"""
registry_sdk.tier3_platform.endpoints
───────────────────────────────────────
Registry REST paths for each kind of lookup key.

    BySubjectLatest(s)     → {base}/subjects/{s}/versions/latest
    BySubjectVersion(s, v) → {base}/subjects/{s}/versions/{v}
    ByGlobalId(id)         → {base}/schemas/ids/{id}
    register(s)            → {base}/subjects/{s}/versions
"""
from __future__ import annotations

from urllib.parse import quote

from registry_sdk.tier0_core.errors import UnconfiguredRegistryError
from registry_sdk.tier1_runtime.keys import (
    ByGlobalId,
    BySubjectLatest,
    BySubjectVersion,
    LookupKey,
)


def require_base_url(base_url: str | None) -> str:
    """Return the base URL without trailing slashes, or raise if unset."""
    if not base_url or not base_url.strip():
        raise UnconfiguredRegistryError("Schema registry URL is not configured.")
    return base_url.strip().rstrip("/")


def _subject_path(subject: str) -> str:
    return f"subjects/{quote(subject, safe='')}/versions"


def build_read_url(key: LookupKey, base_url: str | None) -> str:
    base = require_base_url(base_url)
    if isinstance(key, BySubjectLatest):
        return f"{base}/{_subject_path(key.subject)}/latest"
    if isinstance(key, BySubjectVersion):
        return f"{base}/{_subject_path(key.subject)}/{key.version}"
    if isinstance(key, ByGlobalId):
        return f"{base}/schemas/ids/{key.id}"
    raise TypeError(f"unsupported lookup key: {key!r}")


def build_write_url(subject: str, base_url: str | None) -> str:
    base = require_base_url(base_url)
    return f"{base}/{_subject_path(subject)}"


__all__ = ["build_read_url", "build_write_url", "require_base_url"]
