"""
Contact address extraction, one strategy per node-listing schema.

The layout of Cassandra's node-listing tables changed across server
versions. Each extractor knows one layout: which columns select it and
how to read a contact address from it. The resolver tries them in
priority order (newest layout first) and uses the first one whose
selector columns are present in the row. Once an extractor is selected
there is no fallthrough to older layouts, even if extraction fails.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from .constants import (
    BIND_ALL_ADDRESS,
    NATIVE_ADDRESS,
    NATIVE_PORT,
    NATIVE_TRANSPORT_ADDRESS,
    NATIVE_TRANSPORT_PORT,
    NATIVE_TRANSPORT_PORT_SSL,
    PEER,
    RPC_ADDRESS,
)
from .rows import TopologyRow
from .security import SecurityConfiguration


@dataclass(frozen=True)
class ContactAddress:
    """
    Untranslated (address, port) pair read from a topology row.

    ``bind_all_rpc_address`` is set when the row advertised the bind-all
    address and ``address`` is the broadcast address substituted for it.
    """

    address: str
    port: int
    schema: str
    bind_all_rpc_address: Optional[str] = None

    @property
    def substituted(self) -> bool:
        return self.bind_all_rpc_address is not None

    def __str__(self) -> str:
        return f"{self.address}:{self.port}"


class ContactExtractor(ABC):
    """
    Abstract base class for schema-specific contact extractors.

    Subclasses declare ``selector_columns`` (presence of all of them
    selects this extractor; an empty set always applies) and
    ``required_columns`` (non-null values needed to build a contact).
    """

    name: str = "abstract"
    selector_columns: FrozenSet[str] = frozenset()
    required_columns: FrozenSet[str] = frozenset()

    def applies_to(self, row: TopologyRow) -> bool:
        """Check whether this extractor's schema describes the row."""
        return all(row.has_column(column) for column in self.selector_columns)

    def missing_columns(self, row: TopologyRow) -> Tuple[str, ...]:
        """Required columns that are absent or null in the row."""
        return tuple(sorted(c for c in self.required_columns if row.is_null(c)))

    @abstractmethod
    def extract(
        self, row: TopologyRow, security: SecurityConfiguration, default_port: int
    ) -> Optional[ContactAddress]:
        """
        Read the contact address from a row this extractor applies to.

        Args:
            row: Topology row
            security: Active transport security settings
            default_port: Port to use when the row carries none

        Returns:
            ContactAddress, or None if the row cannot describe a usable peer
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class NativeAddressExtractor(ContactExtractor):
    """
    ``native_address`` / ``native_port`` (system.peers_v2).

    This layout has no SSL-specific port column, so the advertised port
    is used whatever the encryption setting.
    """

    name = "native_address"
    selector_columns = frozenset({NATIVE_ADDRESS})
    required_columns = frozenset({NATIVE_ADDRESS})

    def extract(
        self, row: TopologyRow, security: SecurityConfiguration, default_port: int
    ) -> Optional[ContactAddress]:
        address = row.get_inet(NATIVE_ADDRESS)
        if address is None:
            return None

        port = row.get_int(NATIVE_PORT)
        return ContactAddress(
            address=address,
            port=default_port if port is None else port,
            schema=self.name,
        )


class NativeTransportExtractor(ContactExtractor):
    """
    ``native_transport_address`` / ``native_transport_port[_ssl]``.

    When encryption is enabled and the row advertises an SSL port, that
    port replaces the plain one.
    """

    name = "native_transport_address"
    selector_columns = frozenset({NATIVE_TRANSPORT_ADDRESS})
    required_columns = frozenset({NATIVE_TRANSPORT_ADDRESS})

    def extract(
        self, row: TopologyRow, security: SecurityConfiguration, default_port: int
    ) -> Optional[ContactAddress]:
        address = row.get_inet(NATIVE_TRANSPORT_ADDRESS)
        if address is None:
            return None

        port = row.get_int(NATIVE_TRANSPORT_PORT)
        if security.encryption_enabled and not row.is_null(NATIVE_TRANSPORT_PORT_SSL):
            port = row.get_int(NATIVE_TRANSPORT_PORT_SSL)

        return ContactAddress(
            address=address,
            port=default_port if port is None else port,
            schema=self.name,
        )


class LegacyPeerExtractor(ContactExtractor):
    """
    ``peer`` / ``rpc_address`` (system.peers before 4.0).

    Always applies, so it must come last. These tables carry no native
    port, so the configured default port is used. A node advertising
    the bind-all address is contacted through its broadcast address.
    """

    name = "peer"
    required_columns = frozenset({PEER, RPC_ADDRESS})

    def extract(
        self, row: TopologyRow, security: SecurityConfiguration, default_port: int
    ) -> Optional[ContactAddress]:
        broadcast_address = row.get_inet(PEER)
        rpc_address = row.get_inet(RPC_ADDRESS)
        if broadcast_address is None or rpc_address is None:
            return None

        if rpc_address == BIND_ALL_ADDRESS:
            return ContactAddress(
                address=broadcast_address,
                port=default_port,
                schema=self.name,
                bind_all_rpc_address=rpc_address,
            )

        return ContactAddress(address=rpc_address, port=default_port, schema=self.name)


DEFAULT_EXTRACTORS: Tuple[ContactExtractor, ...] = (
    NativeAddressExtractor(),
    NativeTransportExtractor(),
    LegacyPeerExtractor(),
)


def select_extractor(
    row: TopologyRow, extractors: Tuple[ContactExtractor, ...] = DEFAULT_EXTRACTORS
) -> Optional[ContactExtractor]:
    """Return the first extractor that applies to the row, in priority order."""
    for extractor in extractors:
        if extractor.applies_to(row):
            return extractor
    return None
