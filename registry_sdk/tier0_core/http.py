"""
registry_sdk.tier0_core.http
─────────────────────────────
HTTP status constants and the typed ``Result`` envelope shared by the
transports and the resolver. Transports put the decoded response body in
``data`` or the raw error body in ``error``; the resolver puts a
``ResolvedSchema`` in ``data`` or a ``RegistryError`` in ``error``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


# ── Status code constants ──────────────────────────────────────────────────

class HTTP:
    """HTTP status codes produced by the registry and the in-memory transport."""

    OK = 200
    NOT_FOUND = 404
    CONFLICT = 409
    UNPROCESSABLE_ENTITY = 422
    INTERNAL_SERVER_ERROR = 500


# ── Result envelope ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class Result(Generic[T]):
    """Success value or failure, never both."""
    data: T | None = None
    error: Any = None
    status_code: int | None = None
    meta: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return ``data``, raising the carried error on failure."""
        if self.error is None:
            return self.data  # type: ignore[return-value]
        if isinstance(self.error, BaseException):
            raise self.error
        raise RuntimeError(f"request failed: {self.error!r}")


def ok(data: T, status_code: int | None = None, **meta: Any) -> Result[T]:
    """Return a successful Result."""
    return Result(data=data, status_code=status_code, meta=dict(meta))


def err(error: Any, status_code: int | None = None, **meta: Any) -> Result[Any]:
    """Return a failed Result."""
    return Result(error=error, status_code=status_code, meta=dict(meta))


__all__ = ["HTTP", "Result", "ok", "err"]
