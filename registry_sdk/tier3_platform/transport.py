"""
registry_sdk.tier3_platform.transport
───────────────────────────────────────
Transports carry one request to the schema registry and hand back a
``Result``: the decoded JSON body on 2xx, the raw error body (plus status)
otherwise, or a plain failure string when no response arrived at all.
Transports never retry and never raise for HTTP-level failures.

Backends:
  REGISTRY_TRANSPORT=httpx    : HttpxRegistryTransport (default)
  REGISTRY_TRANSPORT=memory   : InMemoryRegistryTransport (tests, local dev)

MockRegistryTransport is a scripted transport for unit tests.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol, runtime_checkable
from urllib.parse import unquote, urlsplit

import httpx

from registry_sdk.tier0_core.config import get_config
from registry_sdk.tier0_core.http import HTTP, Result, err, ok
from registry_sdk.tier0_core.logging import get_logger
from registry_sdk.tier1_runtime.serialize import SchemaDocument, encode_document

logger = get_logger(__name__)

CONTENT_TYPE = "application/vnd.schemaregistry.v1+json"
ACCEPT = (
    "application/vnd.schemaregistry.v1+json, "
    "application/vnd.schemaregistry+json, "
    "application/json"
)


# ── Protocol ───────────────────────────────────────────────────────────────

@runtime_checkable
class RegistryTransport(Protocol):
    async def get(self, url: str) -> Result[Any]: ...
    async def post(
        self, url: str, body: Any, headers: dict[str, str] | None = None
    ) -> Result[Any]: ...


# ── httpx transport ────────────────────────────────────────────────────────

class HttpxRegistryTransport:
    """
    Async HTTP transport for a Confluent-compatible registry.

    POST bodies are wrapped in the registry envelope ``{"schema": "<json>"}``,
    the document itself serialized as compact JSON.

    Usage::

        transport = HttpxRegistryTransport(timeout=10.0, auth=("user", "pass"))
        result = await transport.get("http://registry:8081/schemas/ids/1")
    """

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        auth: tuple[str, str] | None = None,
        user_agent: str | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._auth = auth
        self._user_agent = user_agent
        self._http_transport = http_transport

    def _build_headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers: dict[str, str] = {"Accept": ACCEPT}
        if self._user_agent:
            headers["User-Agent"] = self._user_agent
        return {**headers, **(extra or {})}

    async def get(self, url: str) -> Result[Any]:
        return await self._request("GET", url)

    async def post(
        self, url: str, body: Any, headers: dict[str, str] | None = None
    ) -> Result[Any]:
        return await self._request(
            "POST",
            url,
            content=json.dumps({"schema": encode_document(body)}),
            headers={"Content-Type": CONTENT_TYPE, **(headers or {})},
        )

    async def _request(
        self,
        method: str,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> Result[Any]:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                auth=self._auth,
                transport=self._http_transport,
            ) as client:
                response = await client.request(
                    method, url, headers=self._build_headers(headers), **kwargs
                )
        except httpx.HTTPError as exc:
            logger.warning(
                "registry.transport_failed",
                method=method,
                url=url,
                error=f"{type(exc).__name__}: {exc}",
            )
            return err(f"{type(exc).__name__}: {exc}")

        body = _decode_body(response)
        if response.is_success:
            return ok(body, status_code=response.status_code)
        logger.debug(
            "registry.request_rejected",
            method=method,
            url=url,
            status_code=response.status_code,
        )
        if body is None:
            body = f"HTTP {response.status_code} {response.reason_phrase}".strip()
        return err(body, status_code=response.status_code)


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


# ── In-memory transport (zero deps, deterministic) ─────────────────────────

_VERSION_PATH = re.compile(r"/subjects/(?P<subject>[^/]+)/versions/(?P<version>latest|[0-9]+)$")
_REGISTER_PATH = re.compile(r"/subjects/(?P<subject>[^/]+)/versions$")
_ID_PATH = re.compile(r"/schemas/ids/(?P<id>[0-9]+)$")


@dataclass
class StoredSchema:
    subject: str
    version: int
    schema_id: int
    document: SchemaDocument


def _registry_error(status_code: int, error_code: int, message: str) -> Result[Any]:
    return err({"error_code": error_code, "message": message}, status_code=status_code)


class InMemoryRegistryTransport:
    """
    In-process registry for tests and local dev. Answers the same wire
    shapes as a Confluent-compatible registry. No network calls made.

    Identical documents share one global id across subjects, and
    re-registering a document under the same subject returns its id
    without creating a new version.
    """

    def __init__(self) -> None:
        self._subjects: dict[str, list[StoredSchema]] = {}
        self._documents: dict[int, SchemaDocument] = {}
        self._ids: dict[str, int] = {}
        self._id_counter = 1

    async def get(self, url: str) -> Result[Any]:
        path = urlsplit(url).path
        match = _VERSION_PATH.search(path)
        if match:
            return self._get_version(unquote(match["subject"]), match["version"])
        match = _ID_PATH.search(path)
        if match:
            return self._get_by_id(int(match["id"]))
        return _registry_error(HTTP.NOT_FOUND, HTTP.NOT_FOUND, f"HTTP 404 Not Found: {path}")

    async def post(
        self, url: str, body: Any, headers: dict[str, str] | None = None
    ) -> Result[Any]:
        path = urlsplit(url).path
        match = _REGISTER_PATH.search(path)
        if not match:
            return _registry_error(HTTP.NOT_FOUND, HTTP.NOT_FOUND, f"HTTP 404 Not Found: {path}")
        if not isinstance(body, (dict, list, str)):
            return _registry_error(HTTP.UNPROCESSABLE_ENTITY, 42201, "Invalid schema")
        return ok({"id": self.register(unquote(match["subject"]), body).schema_id})

    def register(self, subject: str, document: SchemaDocument) -> StoredSchema:
        canonical = json.dumps(document, sort_keys=True, separators=(",", ":"))
        schema_id = self._ids.get(canonical)
        versions = self._subjects.setdefault(subject, [])
        existing = next((s for s in versions if s.schema_id == schema_id), None)
        if existing is not None:
            return existing
        if schema_id is None:
            schema_id = self._id_counter
            self._id_counter += 1
            self._ids[canonical] = schema_id
            self._documents[schema_id] = document
        stored = StoredSchema(
            subject=subject,
            version=len(versions) + 1,
            schema_id=schema_id,
            document=document,
        )
        versions.append(stored)
        return stored

    def _get_version(self, subject: str, version: str) -> Result[Any]:
        versions = self._subjects.get(subject)
        if not versions:
            return _registry_error(
                HTTP.NOT_FOUND, 40401, f"Subject '{subject}' not found."
            )
        if version == "latest":
            stored = versions[-1]
        else:
            stored = next((s for s in versions if s.version == int(version)), None)
            if stored is None:
                return _registry_error(
                    HTTP.NOT_FOUND, 40402, f"Version {version} not found."
                )
        return ok({
            "subject": stored.subject,
            "version": stored.version,
            "id": stored.schema_id,
            "schema": encode_document(stored.document),
        })

    def _get_by_id(self, schema_id: int) -> Result[Any]:
        document = self._documents.get(schema_id)
        if document is None:
            return _registry_error(
                HTTP.NOT_FOUND, 40403, f"Schema {schema_id} not found"
            )
        return ok({"schema": encode_document(document)})


# ── Scripted mock transport ────────────────────────────────────────────────

@dataclass
class TransportCall:
    method: str
    url: str
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)


Handler = Callable[[TransportCall], Result[Any]]


class MockRegistryTransport:
    """
    Answers every request with ``handler(call)`` and records each call.

    Usage::

        transport = MockRegistryTransport(lambda call: ok({"id": 1}))
        ...
        assert transport.calls[0].url.endswith("/versions")
    """

    def __init__(self, handler: Handler | None = None) -> None:
        self._handler = handler or (
            lambda call: _registry_error(HTTP.NOT_FOUND, 40401, "Subject not found.")
        )
        self.calls: list[TransportCall] = []

    async def get(self, url: str) -> Result[Any]:
        return self._dispatch(TransportCall("GET", url))

    async def post(
        self, url: str, body: Any, headers: dict[str, str] | None = None
    ) -> Result[Any]:
        return self._dispatch(TransportCall("POST", url, body, dict(headers or {})))

    def _dispatch(self, call: TransportCall) -> Result[Any]:
        self.calls.append(call)
        return self._handler(call)


# ── Public API ────────────────────────────────────────────────────────────────

_transport: RegistryTransport | None = None


def get_transport() -> RegistryTransport:
    """Return the process-wide transport chosen by REGISTRY_TRANSPORT."""
    global _transport
    if _transport is None:
        cfg = get_config()
        if cfg.registry_transport == "memory":
            _transport = InMemoryRegistryTransport()
        else:
            _transport = HttpxRegistryTransport(
                timeout=cfg.registry_timeout,
                auth=cfg.registry_auth,
                user_agent=cfg.registry_user_agent,
            )
        logger.debug("registry.transport_selected", backend=cfg.registry_transport)
    return _transport


def _reset_transport() -> None:
    """For tests: drop the cached transport."""
    global _transport
    _transport = None


__all__ = [
    "RegistryTransport",
    "HttpxRegistryTransport",
    "InMemoryRegistryTransport",
    "MockRegistryTransport",
    "TransportCall",
    "get_transport",
]
