"""
registry_sdk.tier0_core.errors
───────────────────────────────
Local error taxonomy for schema registry calls. Every failure the resolver
can produce maps onto exactly one of these kinds, identified by a stable
snake_case ``code``. Errors are returned inside a ``Result`` rather than
raised across the public API; ``Result.unwrap()`` re-raises them on demand.

Optional error capture: REGISTRY_ERROR_BACKEND=sentry|otel|none (via get_config())
"""
from __future__ import annotations

from typing import Any

from registry_sdk.tier0_core.config import get_config


# ── Base error ────────────────────────────────────────────────────────────────

class RegistryError(Exception):
    """
    Base class for all registry errors, and the generic ``registry_error``
    kind for read failures the registry reports with an unrecognized code.

    - code: stable local error kind (snake_case)
    - message: human-readable message, the registry's own when it sent one
    - error_code: numeric code from the registry error body, if any
    - status_code: HTTP status of the failed response, if any
    """

    code: str = "registry_error"

    def __init__(
        self,
        message: str = "Schema registry request failed.",
        *,
        error_code: int | None = None,
        status_code: int | None = None,
        **metadata: Any,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.metadata = metadata
        super().__init__(message)
        _capture(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RegistryError):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.message == other.message
            and self.error_code == other.error_code
        )

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.error_code))

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"error": {"code": self.code, "message": self.message}}
        if self.error_code is not None:
            d["error"]["error_code"] = self.error_code
        return d


# ── Typed error kinds ─────────────────────────────────────────────────────────

class UnconfiguredRegistryError(RegistryError):
    """No registry base URL is configured."""
    code = "unconfigured_registry_url"


class SchemaParseError(RegistryError):
    """Malformed identifier or malformed schema document."""
    code = "parse_error"


class UnknownSubjectError(RegistryError):
    """The registry does not know the requested subject."""
    code = "unknown_subject"


class UnknownVersionError(RegistryError):
    """The registry does not know the requested version or schema id."""
    code = "unknown_version"


class ConflictError(RegistryError):
    """The registry refused to register a schema."""
    code = "conflict"


class TransportError(RegistryError):
    """The request failed without a structured registry error body."""
    code = "transport_error"


# ── Error capture backend ─────────────────────────────────────────────────────

def _capture(error: RegistryError) -> None:
    """Send error to configured backend. Called automatically by RegistryError.__init__."""
    backend = get_config().error_backend
    if backend == "none":
        return
    if backend == "sentry":
        _capture_sentry(error)
    elif backend == "otel":
        _capture_otel(error)


def _capture_sentry(error: RegistryError) -> None:
    try:
        import sentry_sdk
    except ImportError:
        return
    sentry_sdk.capture_message(
        str(error),
        level="error" if isinstance(error, TransportError) else "warning",
        extras={"code": error.code, "error_code": error.error_code, **error.metadata},
    )


def _capture_otel(error: RegistryError) -> None:
    try:
        from opentelemetry import trace
    except ImportError:
        return
    span = trace.get_current_span()
    span.record_exception(error)
    span.set_status(trace.StatusCode.ERROR, str(error))


__all__ = [
    "RegistryError",
    "UnconfiguredRegistryError",
    "SchemaParseError",
    "UnknownSubjectError",
    "UnknownVersionError",
    "ConflictError",
    "TransportError",
]
