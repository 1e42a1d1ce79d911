"""
registry_sdk
────────────
Stable top-level exports. Import from here, not from sub-modules directly.
Every name exported here is part of the public API and subject to semver.
"""
from registry_sdk.tier0_core.logging import get_logger
from registry_sdk.tier0_core.errors import (
    RegistryError,
    UnconfiguredRegistryError,
    SchemaParseError,
    UnknownSubjectError,
    UnknownVersionError,
    ConflictError,
    TransportError,
)
from registry_sdk.tier0_core.config import get_config, RegistryConfig
from registry_sdk.tier0_core.http import Result

from registry_sdk.tier1_runtime.keys import (
    BySubjectLatest,
    BySubjectVersion,
    ByGlobalId,
    LookupKey,
    parse_key,
)

from registry_sdk.tier3_platform.transport import (
    RegistryTransport,
    HttpxRegistryTransport,
    InMemoryRegistryTransport,
    MockRegistryTransport,
    get_transport,
)

from registry_sdk.tier4_advanced.schemas import (
    AvroSchemaParser,
    ParsedSchema,
    ResolvedSchema,
    SchemaField,
    SchemaParser,
)
from registry_sdk.tier4_advanced.resolver import (
    SchemaResolver,
    get_resolver,
    resolve,
    register,
)

__version__ = "0.1.0"
__all__ = [
    # logging
    "get_logger",
    # errors
    "RegistryError", "UnconfiguredRegistryError", "SchemaParseError",
    "UnknownSubjectError", "UnknownVersionError", "ConflictError", "TransportError",
    # config
    "get_config", "RegistryConfig",
    # result
    "Result",
    # keys
    "BySubjectLatest", "BySubjectVersion", "ByGlobalId", "LookupKey", "parse_key",
    # transport
    "RegistryTransport", "HttpxRegistryTransport", "InMemoryRegistryTransport",
    "MockRegistryTransport", "get_transport",
    # schemas
    "AvroSchemaParser", "ParsedSchema", "ResolvedSchema", "SchemaField", "SchemaParser",
    # resolver
    "SchemaResolver", "get_resolver", "resolve", "register",
]
