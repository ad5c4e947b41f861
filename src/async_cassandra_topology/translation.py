"""
Address translation for discovered cluster members.

Nodes advertise the addresses they bind to, which are not always the
addresses a client can reach (NAT, cloud private networks, multi-region
deployments). An address translator rewrites the advertised
``(address, port)`` pair into the one the client actually dials.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Tuple

from cassandra.policies import AddressTranslator as DriverPolicyTranslator

from .exceptions import ConfigurationError
from .rows import normalize_inet

SocketAddress = Tuple[str, int]


class AddressTranslator(ABC):
    """
    Abstract base class for address translators.

    Implementations must be safe to call concurrently; the resolver
    shares a single translator across all resolution calls.
    """

    @abstractmethod
    def translate(self, address: str, port: int) -> SocketAddress:
        """
        Translate an advertised socket address.

        Args:
            address: IP address advertised by the node
            port: Native transport port advertised by (or assumed for) the node

        Returns:
            The (address, port) pair to connect to
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class IdentityAddressTranslator(AddressTranslator):
    """Returns every address unchanged."""

    def translate(self, address: str, port: int) -> SocketAddress:
        return address, port


class StaticAddressTranslator(AddressTranslator):
    """
    Translates addresses from a fixed operator-supplied mapping.

    Keys are either ``"host"`` or ``"host:port"``; an exact ``host:port``
    entry takes precedence over a host-only one. Values are ``"host"``
    (the port is kept) or ``"host:port"``. Addresses with no entry are
    returned unchanged.

    Example:
        translator = StaticAddressTranslator({
            "10.0.0.5": "203.0.113.5",
            "10.0.0.6:9042": "203.0.113.6:19042",
        })
    """

    def __init__(self, mapping: Mapping[str, str]) -> None:
        """
        Initialize translator from a mapping.

        Raises:
            ConfigurationError: If a key or value cannot be parsed
        """
        self._by_host: Dict[str, Tuple[str, Optional[int]]] = {}
        self._by_socket: Dict[SocketAddress, Tuple[str, Optional[int]]] = {}

        for source, target in mapping.items():
            source_host, source_port = _parse_host_port(source)
            parsed_target = _parse_host_port(target)
            if source_port is None:
                self._by_host[source_host] = parsed_target
            else:
                self._by_socket[(source_host, source_port)] = parsed_target

    def translate(self, address: str, port: int) -> SocketAddress:
        target = self._by_socket.get((address, port))
        if target is None:
            target = self._by_host.get(address)
        if target is None:
            return address, port

        target_host, target_port = target
        return target_host, port if target_port is None else target_port

    def __len__(self) -> int:
        return len(self._by_host) + len(self._by_socket)

    def __repr__(self) -> str:
        return f"StaticAddressTranslator(entries={len(self)})"


class DriverAddressTranslator(AddressTranslator):
    """
    Adapts a ``cassandra.policies.AddressTranslator`` to this interface.

    Driver policies (``IdentityTranslator``, ``EC2MultiRegionTranslator``
    or user subclasses) translate the address only, so the port passes
    through untouched.
    """

    def __init__(self, policy: DriverPolicyTranslator) -> None:
        if policy is None:
            raise ConfigurationError("Driver address translator cannot be None")
        self.policy = policy

    def translate(self, address: str, port: int) -> SocketAddress:
        return self.policy.translate(address), port

    def __repr__(self) -> str:
        return f"DriverAddressTranslator({self.policy.__class__.__name__})"


def as_address_translator(translator: Any) -> AddressTranslator:
    """
    Coerce a user-supplied translator into an ``AddressTranslator``.

    Args:
        translator: None (identity), an ``AddressTranslator``, or a driver
            ``cassandra.policies.AddressTranslator``

    Returns:
        AddressTranslator instance

    Raises:
        ConfigurationError: If the object cannot translate addresses
    """
    if translator is None:
        return IdentityAddressTranslator()
    if isinstance(translator, AddressTranslator):
        return translator
    if isinstance(translator, DriverPolicyTranslator):
        return DriverAddressTranslator(translator)
    raise ConfigurationError(
        f"Unsupported address translator type: {type(translator).__name__}"
    )


def _parse_host_port(value: str) -> Tuple[str, Optional[int]]:
    """Split ``host``, ``host:port`` or ``[v6]:port`` into its parts."""
    text = str(value).strip()
    if not text:
        raise ConfigurationError("Address mapping entries cannot be empty")

    host, port_text = text, None
    if text.startswith("["):
        end = text.find("]")
        if end < 0:
            raise ConfigurationError(f"Unterminated IPv6 literal in address mapping: {value}")
        host = text[1:end]
        rest = text[end + 1 :]
        if rest.startswith(":"):
            port_text = rest[1:]
        elif rest:
            raise ConfigurationError(f"Invalid address mapping entry: {value}")
    elif text.count(":") == 1:
        host, port_text = text.split(":", 1)

    port = None
    if port_text is not None:
        try:
            port = int(port_text)
        except ValueError:
            raise ConfigurationError(f"Invalid port in address mapping entry: {value}") from None
        if not 0 < port < 65536:
            raise ConfigurationError(f"Port out of range in address mapping entry: {value}")

    return normalize_inet(host), port
