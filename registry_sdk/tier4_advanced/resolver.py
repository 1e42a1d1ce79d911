"""
registry_sdk.tier4_advanced.resolver
──────────────────────────────────────
Resolve schemas from, and register schemas with, a Confluent-compatible
schema registry. Both operations return a ``Result`` and never raise:

    result = await resolve("io.confluent.Payment:3")
    if result.ok:
        print(result.data.parsed.full_name, result.data.id)
    else:
        print(result.error.code)     # e.g. "unknown_subject"

The registry URL is read on every call, never cached here, so a resolver
observes reconfiguration immediately. No retries: one transport failure
yields one translated error. Callers wanting a cache layer it on top.
"""
from __future__ import annotations

import time
from typing import Any, Callable

from registry_sdk.tier0_core.config import get_config
from registry_sdk.tier0_core.errors import RegistryError, SchemaParseError, TransportError
from registry_sdk.tier0_core.http import Result, err, ok
from registry_sdk.tier0_core.logging import bound_context, get_logger
from registry_sdk.tier0_core.metrics import registry_request_duration, registry_requests
from registry_sdk.tier1_runtime.keys import BySubjectVersion, parse_key, subject_of
from registry_sdk.tier1_runtime.serialize import SchemaDocument, decode_document
from registry_sdk.tier3_platform.endpoints import (
    build_read_url,
    build_write_url,
    require_base_url,
)
from registry_sdk.tier3_platform.transport import (
    CONTENT_TYPE,
    RegistryTransport,
    get_transport,
)
from registry_sdk.tier4_advanced.schemas import AvroSchemaParser, ResolvedSchema, SchemaParser
from registry_sdk.tier4_advanced.translate import (
    Direction,
    translate_error,
    translate_read_success,
    translate_write_success,
)

logger = get_logger(__name__)


class SchemaResolver:
    """
    Stateless resolver over an injected transport and schema parser.
    Safe for concurrent use as long as the transport is.

    ``registry_url`` may be a fixed string, a zero-argument callable read
    on every call, or None to read ``REGISTRY_URL`` from the config.
    """

    def __init__(
        self,
        transport: RegistryTransport | None = None,
        *,
        registry_url: str | Callable[[], str | None] | None = None,
        parser: SchemaParser | None = None,
    ) -> None:
        self._transport = transport
        self._registry_url = registry_url
        self._parser = parser or AvroSchemaParser()

    @property
    def transport(self) -> RegistryTransport:
        return self._transport or get_transport()

    def _base_url(self) -> str:
        source = self._registry_url
        if source is None:
            url = get_config().registry_url
        elif callable(source):
            url = source()
        else:
            url = source
        return require_base_url(url)

    async def resolve(self, identifier: str | int) -> Result[ResolvedSchema]:
        """Look up a schema by subject, subject:version, or global id."""
        started = time.monotonic()
        with bound_context(operation="resolve", identifier=identifier):
            result = await self._resolve(identifier)
            _observe("resolve", result, started)
        return result

    async def register(
        self, identifier: str, document: SchemaDocument | bytes
    ) -> Result[ResolvedSchema]:
        """
        Register ``document`` under the subject named by ``identifier``.

        A version suffix ("subject:3") is ignored with a warning: the
        registry assigns versions itself.
        """
        started = time.monotonic()
        with bound_context(operation="register", identifier=identifier):
            result = await self._register(identifier, document)
            _observe("register", result, started)
        return result

    async def _resolve(self, identifier: str | int) -> Result[ResolvedSchema]:
        try:
            base_url = self._base_url()
            key = parse_key(identifier)
            url = build_read_url(key, base_url)
        except RegistryError as exc:
            return err(exc)

        logger.debug("registry.resolve", key=repr(key), url=url)
        response = await self._call(self.transport.get, url)
        if not response.ok:
            return err(translate_error(response, Direction.READ))
        try:
            return ok(translate_read_success(response.data, key, self._parser))
        except RegistryError as exc:
            return err(exc)

    async def _register(
        self, identifier: str, document: SchemaDocument | bytes
    ) -> Result[ResolvedSchema]:
        try:
            base_url = self._base_url()
            key = parse_key(identifier)
            subject = subject_of(key)
            if subject is None:
                raise SchemaParseError(
                    f"cannot register a schema under a global id: {identifier!r}"
                )
            if isinstance(key, BySubjectVersion):
                logger.warning(
                    "schema with version is not allowed, version will be ignored",
                    subject=subject,
                    version=key.version,
                )
            raw = decode_document(document)
            parsed = self._parser.parse(raw)
            url = build_write_url(subject, base_url)
        except RegistryError as exc:
            return err(exc)

        logger.debug("registry.register", subject=subject, url=url)
        response = await self._call(
            self.transport.post, url, raw, {"Content-Type": CONTENT_TYPE}
        )
        if not response.ok:
            return err(translate_error(response, Direction.WRITE))
        try:
            return ok(translate_write_success(response.data, raw, parsed, subject))
        except RegistryError as exc:
            return err(exc)

    async def _call(self, method: Callable[..., Any], *args: Any) -> Result[Any]:
        try:
            return await method(*args)
        except Exception as exc:
            logger.warning("registry.transport_raised", error=f"{type(exc).__name__}: {exc}")
            return err(TransportError(f"Schema registry transport failed: {exc}"))


def _observe(operation: str, result: Result[Any], started: float) -> None:
    outcome = "ok" if result.ok else result.error.code
    registry_requests(operation=operation, outcome=outcome).inc()
    registry_request_duration(operation=operation).observe(time.monotonic() - started)
    if not result.ok:
        logger.info(f"registry.{operation}_failed", code=outcome, message=result.error.message)


# ── Public API ────────────────────────────────────────────────────────────────

_resolver: SchemaResolver | None = None


def get_resolver() -> SchemaResolver:
    """Return the process-wide resolver (config URL, configured transport)."""
    global _resolver
    if _resolver is None:
        _resolver = SchemaResolver()
    return _resolver


def _reset_resolver() -> None:
    """For tests: drop the cached resolver."""
    global _resolver
    _resolver = None


async def resolve(identifier: str | int) -> Result[ResolvedSchema]:
    """
    Resolve a schema with the default resolver.

    Usage:
        result = await resolve("io.confluent.Payment")
        result = await resolve("io.confluent.Payment:10")
        result = await resolve(42)
    """
    return await get_resolver().resolve(identifier)


async def register(identifier: str, document: SchemaDocument | bytes) -> Result[ResolvedSchema]:
    """
    Register a schema with the default resolver.

    Usage:
        result = await register("io.confluent.Payment", payment_schema)
        schema_id = result.unwrap().id
    """
    return await get_resolver().register(identifier, document)


__all__ = ["SchemaResolver", "get_resolver", "resolve", "register"]
