"""async-cassandra-topology - Endpoint resolution for Cassandra cluster topology rows."""

from importlib.metadata import PackageNotFoundError, version

from .discovery import discover_endpoints, fetch_peer_rows
from .events import BindAllAddressEvent
from .exceptions import AsyncCassandraTopologyError, ConfigurationError
from .extractors import (
    DEFAULT_EXTRACTORS,
    ContactAddress,
    ContactExtractor,
    LegacyPeerExtractor,
    NativeAddressExtractor,
    NativeTransportExtractor,
)
from .resolver import EndpointResolver, TranslatedEndPoint, resolve_rows
from .rows import TopologyRow
from .security import SecurityConfiguration
from .translation import (
    AddressTranslator,
    DriverAddressTranslator,
    IdentityAddressTranslator,
    StaticAddressTranslator,
)

try:
    __version__ = version("async-cassandra-topology")
except PackageNotFoundError:
    # Package is not installed
    __version__ = "0.0.0+unknown"


__all__ = [
    "EndpointResolver",
    "TranslatedEndPoint",
    "resolve_rows",
    "discover_endpoints",
    "fetch_peer_rows",
    "TopologyRow",
    "ContactAddress",
    "ContactExtractor",
    "NativeAddressExtractor",
    "NativeTransportExtractor",
    "LegacyPeerExtractor",
    "DEFAULT_EXTRACTORS",
    "AddressTranslator",
    "IdentityAddressTranslator",
    "StaticAddressTranslator",
    "DriverAddressTranslator",
    "SecurityConfiguration",
    "BindAllAddressEvent",
    "AsyncCassandraTopologyError",
    "ConfigurationError",
    "__version__",
]
