"""Tests for tier3_platform modules (endpoints, transport)."""
from __future__ import annotations

import json

import httpx
import pytest

from registry_sdk.tier0_core.errors import UnconfiguredRegistryError
from registry_sdk.tier0_core.http import ok
from registry_sdk.tier1_runtime.keys import ByGlobalId, BySubjectLatest, BySubjectVersion
from registry_sdk.tier3_platform.endpoints import build_read_url, build_write_url
from registry_sdk.tier3_platform.transport import (
    ACCEPT,
    CONTENT_TYPE,
    HttpxRegistryTransport,
    InMemoryRegistryTransport,
    MockRegistryTransport,
    RegistryTransport,
    get_transport,
)

REGISTRY_URL = "http://reg.loc"


# ── endpoints ──────────────────────────────────────────────────────────────

class TestEndpoints:
    def test_latest(self):
        url = build_read_url(BySubjectLatest("io.confluent.Payment"), REGISTRY_URL)
        assert url == "http://reg.loc/subjects/io.confluent.Payment/versions/latest"

    def test_version(self):
        url = build_read_url(BySubjectVersion("io.confluent.Payment", 10), REGISTRY_URL)
        assert url == "http://reg.loc/subjects/io.confluent.Payment/versions/10"

    def test_global_id(self):
        assert build_read_url(ByGlobalId(1), REGISTRY_URL) == "http://reg.loc/schemas/ids/1"

    def test_write(self):
        url = build_write_url("io.confluent.Payment", REGISTRY_URL)
        assert url == "http://reg.loc/subjects/io.confluent.Payment/versions"

    def test_trailing_slash_stripped(self):
        assert build_read_url(ByGlobalId(2), "http://reg.loc/") == "http://reg.loc/schemas/ids/2"

    def test_base_path_kept(self):
        url = build_write_url("orders-value", "https://proxy.example/registry")
        assert url == "https://proxy.example/registry/subjects/orders-value/versions"

    def test_subject_is_percent_encoded(self):
        url = build_read_url(BySubjectLatest("team/orders value"), REGISTRY_URL)
        assert url == "http://reg.loc/subjects/team%2Forders%20value/versions/latest"

    @pytest.mark.parametrize("base_url", [None, "", "   "])
    def test_unconfigured_base_url(self, base_url):
        with pytest.raises(UnconfiguredRegistryError):
            build_read_url(BySubjectLatest("s"), base_url)
        with pytest.raises(UnconfiguredRegistryError):
            build_write_url("s", base_url)


# ── httpx transport ────────────────────────────────────────────────────────

def _transport(handler, **kwargs) -> HttpxRegistryTransport:
    return HttpxRegistryTransport(http_transport=httpx.MockTransport(handler), **kwargs)


class TestHttpxTransport:
    @pytest.mark.asyncio
    async def test_get_success(self, payment_schema_json):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"schema": payment_schema_json})

        result = await _transport(handler).get("http://reg.loc/schemas/ids/1")
        assert result.ok
        assert result.status_code == 200
        assert result.data == {"schema": payment_schema_json}
        assert seen[0].method == "GET"
        assert seen[0].headers["Accept"] == ACCEPT

    @pytest.mark.asyncio
    async def test_post_wraps_document_in_envelope(self, payment_schema, payment_schema_json):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": 1})

        result = await _transport(handler).post(
            "http://reg.loc/subjects/io.confluent.Payment/versions", payment_schema
        )
        assert result.data == {"id": 1}
        assert json.loads(seen[0].content) == {"schema": payment_schema_json}
        assert seen[0].headers["Content-Type"] == CONTENT_TYPE

    @pytest.mark.asyncio
    async def test_error_body_returned_with_status(self, subject_not_found):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json=subject_not_found)

        result = await _transport(handler).get("http://reg.loc/subjects/x/versions/latest")
        assert not result.ok
        assert result.error == subject_not_found
        assert result.status_code == 404

    @pytest.mark.asyncio
    async def test_non_json_error_body_returned_as_text(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(502, text="Bad Gateway")

        result = await _transport(handler).get("http://reg.loc/schemas/ids/1")
        assert result.error == "Bad Gateway"
        assert result.status_code == 502

    @pytest.mark.asyncio
    async def test_empty_error_body_still_fails(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        result = await _transport(handler).get("http://reg.loc/schemas/ids/1")
        assert not result.ok
        assert "500" in result.error

    @pytest.mark.asyncio
    async def test_network_failure_is_unstructured_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        result = await _transport(handler).get("http://reg.loc/schemas/ids/1")
        assert not result.ok
        assert result.status_code is None
        assert "ConnectError" in result.error

    @pytest.mark.asyncio
    async def test_auth_and_user_agent(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"schema": '"string"'})

        transport = _transport(handler, auth=("alice", "s3cr3t"), user_agent="billing/1.2")
        await transport.get("http://reg.loc/schemas/ids/1")
        assert seen[0].headers["Authorization"].startswith("Basic ")
        assert seen[0].headers["User-Agent"] == "billing/1.2"

    def test_satisfies_protocol(self):
        assert isinstance(HttpxRegistryTransport(), RegistryTransport)


# ── in-memory transport ────────────────────────────────────────────────────

class TestInMemoryTransport:
    @pytest.mark.asyncio
    async def test_register_then_get_latest(self, payment_schema, payment_schema_json):
        transport = InMemoryRegistryTransport()
        posted = await transport.post(
            "http://reg.loc/subjects/io.confluent.Payment/versions", payment_schema
        )
        assert posted.data == {"id": 1}

        result = await transport.get("http://reg.loc/subjects/io.confluent.Payment/versions/latest")
        assert result.data == {
            "subject": "io.confluent.Payment",
            "version": 1,
            "id": 1,
            "schema": payment_schema_json,
        }

    @pytest.mark.asyncio
    async def test_versions_and_ids(self, payment_schema):
        transport = InMemoryRegistryTransport()
        url = "http://reg.loc/subjects/s/versions"
        await transport.post(url, payment_schema)
        await transport.post(url, {"type": "string"})

        second = await transport.get(f"{url}/2")
        assert second.data["version"] == 2
        assert second.data["id"] == 2
        by_id = await transport.get("http://reg.loc/schemas/ids/2")
        assert by_id.data == {"schema": '{"type":"string"}'}

    @pytest.mark.asyncio
    async def test_identical_document_reuses_id_and_version(self, payment_schema):
        transport = InMemoryRegistryTransport()
        first = await transport.post("http://reg.loc/subjects/a/versions", payment_schema)
        again = await transport.post("http://reg.loc/subjects/a/versions", payment_schema)
        other = await transport.post("http://reg.loc/subjects/b/versions", payment_schema)
        assert first.data == again.data == other.data == {"id": 1}

        missing = await transport.get("http://reg.loc/subjects/a/versions/2")
        assert missing.error["error_code"] == 40402

    @pytest.mark.asyncio
    async def test_unknown_subject(self):
        result = await InMemoryRegistryTransport().get("http://reg.loc/subjects/nope/versions/latest")
        assert result.error["error_code"] == 40401
        assert result.status_code == 404

    @pytest.mark.asyncio
    async def test_unknown_schema_id(self):
        result = await InMemoryRegistryTransport().get("http://reg.loc/schemas/ids/9")
        assert result.error["error_code"] == 40403

    @pytest.mark.asyncio
    async def test_encoded_subject_round_trips(self):
        transport = InMemoryRegistryTransport()
        await transport.post("http://reg.loc/subjects/team%2Forders/versions", {"type": "int"})
        result = await transport.get("http://reg.loc/subjects/team%2Forders/versions/1")
        assert result.data["subject"] == "team/orders"

    @pytest.mark.asyncio
    async def test_invalid_body_rejected(self):
        result = await InMemoryRegistryTransport().post("http://reg.loc/subjects/s/versions", 42)
        assert result.error["error_code"] == 42201


# ── mock transport / selection ─────────────────────────────────────────────

class TestMockTransport:
    @pytest.mark.asyncio
    async def test_records_calls(self):
        transport = MockRegistryTransport(lambda call: ok({"id": 5}))
        await transport.post("http://reg.loc/subjects/s/versions", {"type": "int"}, {"X-Test": "1"})
        await transport.get("http://reg.loc/schemas/ids/5")
        assert [c.method for c in transport.calls] == ["POST", "GET"]
        assert transport.calls[0].body == {"type": "int"}
        assert transport.calls[0].headers == {"X-Test": "1"}

    @pytest.mark.asyncio
    async def test_default_handler_reports_unknown_subject(self):
        result = await MockRegistryTransport().get("http://reg.loc/subjects/s/versions/latest")
        assert result.error["error_code"] == 40401


class TestGetTransport:
    def test_memory_backend_from_env(self):
        assert isinstance(get_transport(), InMemoryRegistryTransport)
        assert get_transport() is get_transport()

    def test_httpx_backend_from_env(self, monkeypatch):
        from registry_sdk.tier0_core.config import _reset_config
        from registry_sdk.tier3_platform.transport import _reset_transport

        monkeypatch.setenv("REGISTRY_TRANSPORT", "httpx")
        _reset_config()
        _reset_transport()
        assert isinstance(get_transport(), HttpxRegistryTransport)
