"""
registry_sdk test configuration.

All tests run against the in-memory transport by default, no registry
required. Override by setting environment variables before running pytest.
"""
from __future__ import annotations

import os

import pytest

# ── Force local providers for all tests ───────────────────────────────────
# These must be set before any registry_sdk modules are imported.

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("REGISTRY_URL", "http://reg.loc")
os.environ.setdefault("REGISTRY_TRANSPORT", "memory")
os.environ.setdefault("REGISTRY_ERROR_BACKEND", "none")


# ── Fixtures ───────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def reset_module_singletons():
    """
    Reset cached config, transport and resolver between tests.
    This ensures each test gets a fresh in-memory registry with no state bleed.
    """
    from registry_sdk.tier0_core.config import _reset_config
    from registry_sdk.tier3_platform.transport import _reset_transport
    from registry_sdk.tier4_advanced.resolver import _reset_resolver

    yield

    _reset_config()
    _reset_transport()
    _reset_resolver()


@pytest.fixture
def payment_schema() -> dict:
    """Structured Payment record schema."""
    return {
        "namespace": "io.confluent",
        "type": "record",
        "name": "Payment",
        "fields": [
            {"name": "id", "type": "string"},
            {"name": "amount", "type": "double"},
        ],
    }


@pytest.fixture
def payment_schema_json() -> str:
    """The same Payment schema, serialized the way the registry returns it."""
    return (
        '{"namespace":"io.confluent","type":"record","name":"Payment",'
        '"fields":[{"name":"id","type":"string"},{"name":"amount","type":"double"}]}'
    )


@pytest.fixture
def subject_not_found() -> dict:
    return {"error_code": 40401, "message": "Subject not found!"}


@pytest.fixture
def version_not_found() -> dict:
    return {"error_code": 40402, "message": "Subject version not found!"}


@pytest.fixture
def schema_incompatible() -> dict:
    return {"error_code": 409, "message": "Schema is incompatible!"}


@pytest.fixture
def registry_log(caplog):
    """caplog attached to the registry_sdk logger, which does not propagate to root."""
    import logging

    from registry_sdk.tier0_core.logging import get_logger

    get_logger()
    package_logger = logging.getLogger("registry_sdk")
    package_logger.addHandler(caplog.handler)
    yield caplog
    package_logger.removeHandler(caplog.handler)
