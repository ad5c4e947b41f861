"""
Endpoint resolution for discovered cluster members.

Turns one row of a node-listing table into the endpoint the driver
should connect to, or None when the row does not describe a usable peer.
``EndpointResolver`` is a drop-in ``EndPointFactory`` for the DataStax
driver, so it can be handed to ``Cluster(endpoint_factory=...)``.
"""

import logging
from typing import Any, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from cassandra.connection import DefaultEndPoint, EndPointFactory

from .constants import DEFAULT_NATIVE_PORT
from .events import BindAllAddressEvent, EventListener
from .exceptions import ConfigurationError
from .extractors import DEFAULT_EXTRACTORS, ContactAddress, ContactExtractor, select_extractor
from .rows import TopologyRow
from .security import SecurityConfiguration
from .translation import AddressTranslator, DriverAddressTranslator, as_address_translator

logger = logging.getLogger(__name__)


class TranslatedEndPoint(DefaultEndPoint):
    """
    Endpoint built from a translated contact address.

    Identity (equality, hash, ``str()``) is the translated address and
    port only. The untranslated contact is kept for diagnostics.
    """

    def __init__(self, address: str, port: int, contact: Optional[ContactAddress] = None):
        super().__init__(address, port)
        self.contact = contact

    def __repr__(self) -> str:
        if self.contact is None or (self.contact.address, self.contact.port) == (
            self.address,
            self.port,
        ):
            return f"<TranslatedEndPoint: {self.address}:{self.port}>"
        return f"<TranslatedEndPoint: {self.address}:{self.port} (advertised {self.contact})>"


class _Binding(NamedTuple):
    """Everything ``resolve`` reads, swapped in as one object."""

    port: int
    translator: Optional[AddressTranslator] = None
    security: Optional[SecurityConfiguration] = None
    cluster: Any = None


class EndpointResolver(EndPointFactory):
    """
    Resolves topology rows into connectable endpoints.

    Collaborators come either from the constructor or from the driver
    ``Cluster`` passed to ``configure``. Constructor-supplied ones take
    precedence. A cluster-bound resolver reads the cluster's address
    translator, SSL settings and port on every call, since the driver
    calls ``configure`` before it has assigned them. State is replaced
    with a single assignment, so the resolver may be shared freely
    between threads and coroutines.
    """

    def __init__(
        self,
        translator: Any = None,
        security: Optional[SecurityConfiguration] = None,
        port: int = DEFAULT_NATIVE_PORT,
        extractors: Sequence[ContactExtractor] = DEFAULT_EXTRACTORS,
        event_listener: Optional[EventListener] = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            translator: AddressTranslator or driver ``cassandra.policies.AddressTranslator``
            security: Transport security settings
            port: Port used for rows that carry no native port
            extractors: Schema extractors in priority order
            event_listener: Called with structured events (e.g. bind-all substitution)

        Raises:
            ConfigurationError: If port, extractors or collaborators are invalid
        """
        self.extractors: Tuple[ContactExtractor, ...] = tuple(extractors)
        if not self.extractors:
            raise ConfigurationError("At least one contact extractor is required")

        self.event_listener = event_listener

        port = _validate_port(port)
        if translator is None and security is None:
            self._binding = _Binding(port=port)
        else:
            if translator is None:
                raise ConfigurationError("Address translator is required")
            if security is None:
                raise ConfigurationError("Security configuration is required")
            self._binding = _Binding(
                port=port, translator=as_address_translator(translator), security=security
            )

    @property
    def cluster(self) -> Any:
        return self._binding.cluster

    @property
    def is_configured(self) -> bool:
        return self._is_bound(self._binding)

    @property
    def port(self) -> int:
        return self._current(self._binding)[2]

    @property
    def translator(self) -> Optional[AddressTranslator]:
        binding = self._binding
        return self._current(binding)[0] if self._is_bound(binding) else None

    @property
    def security(self) -> Optional[SecurityConfiguration]:
        binding = self._binding
        return self._current(binding)[1] if self._is_bound(binding) else None

    def configure(self, cluster: Any) -> "EndpointResolver":
        """
        Bind the resolver to a driver ``Cluster``.

        Called by the driver when the resolver is passed as
        ``endpoint_factory``; may be called again after a configuration
        reload. Only the cluster reference is kept; its translator, SSL
        settings and port are read when rows are resolved.

        Returns:
            This resolver

        Raises:
            ConfigurationError: If cluster is None
        """
        if cluster is None:
            raise ConfigurationError("Cannot configure EndpointResolver with a None cluster")
        self._binding = self._binding._replace(cluster=cluster)
        return self

    def create(self, row: Any) -> Optional[TranslatedEndPoint]:
        return self.resolve(row)

    def resolve(self, row: Any) -> Optional[TranslatedEndPoint]:
        """
        Resolve one node-listing row.

        Args:
            row: Row from system.peers_v2 / system.peers in any driver row shape

        Returns:
            TranslatedEndPoint, or None if the row must be skipped

        Raises:
            ConfigurationError: If the resolver has not been configured
        """
        binding = self._binding
        if not self._is_bound(binding):
            raise ConfigurationError(
                "EndpointResolver has no translator/security configuration; "
                "pass them to the constructor or call configure(cluster) first"
            )
        translator, security, default_port = self._current(binding)

        topology_row = TopologyRow.wrap(row)
        extractor = select_extractor(topology_row, self.extractors)
        if extractor is None:
            logger.debug(f"No contact extractor applies to topology row {topology_row!r}")
            return None

        contact = extractor.extract(topology_row, security, default_port)
        if contact is None:
            missing = ", ".join(extractor.missing_columns(topology_row))
            logger.debug(
                f"Skipping topology row with no usable {extractor.name} address "
                f"(missing or malformed: {missing or 'none'})"
            )
            return None

        if contact.substituted:
            self._report_bind_all(contact)

        address, port = translator.translate(contact.address, contact.port)
        return TranslatedEndPoint(address, port, contact=contact)

    @staticmethod
    def _is_bound(binding: _Binding) -> bool:
        return binding.translator is not None or binding.cluster is not None

    @staticmethod
    def _current(binding: _Binding) -> Tuple[Any, Any, int]:
        if binding.translator is not None or binding.cluster is None:
            return binding.translator, binding.security, binding.port

        cluster = binding.cluster
        return (
            DriverAddressTranslator(cluster.address_translator),
            SecurityConfiguration.from_cluster(cluster),
            _validate_port(getattr(cluster, "port", None) or binding.port),
        )

    def _report_bind_all(self, contact: ContactAddress) -> None:
        event = BindAllAddressEvent(
            broadcast_address=contact.address,
            rpc_address=contact.bind_all_rpc_address or "",
        )
        logger.warning(event.message, extra={"broadcast_address": contact.address})

        if self.event_listener:
            try:
                self.event_listener(event)
            except Exception as e:
                logger.warning(f"Topology event listener failed: {e}", exc_info=True)

    def __repr__(self) -> str:
        return (
            f"EndpointResolver(translator={self.translator!r}, "
            f"security={self.security!r}, port={self.port})"
        )


def resolve_rows(resolver: EndpointResolver, rows: Iterable[Any]) -> List[TranslatedEndPoint]:
    """
    Resolve every row, skipping those that do not describe a usable peer.

    Endpoints are returned in row order. No deduplication is done.
    """
    endpoints = []
    skipped = 0
    for row in rows:
        endpoint = resolver.resolve(row)
        if endpoint is None:
            skipped += 1
            continue
        endpoints.append(endpoint)

    if skipped:
        logger.debug(f"Skipped {skipped} topology row(s) without a usable contact address")
    return endpoints


def _validate_port(port: Any) -> int:
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise ConfigurationError(f"Invalid native port: {port!r}")
    return port
