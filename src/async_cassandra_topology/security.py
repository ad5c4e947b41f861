"""
Transport security settings consumed by the endpoint resolver.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SecurityConfiguration:
    """
    Whether client connections are encrypted.

    Decides which port column is authoritative for rows that advertise
    a separate SSL native port.
    """

    encryption_enabled: bool = False

    @classmethod
    def from_cluster(cls, cluster: Any) -> "SecurityConfiguration":
        """
        Derive the security configuration from a driver ``Cluster``.

        Encryption counts as enabled when either ``ssl_context`` or the
        legacy ``ssl_options`` is set on the cluster.
        """
        ssl_context = getattr(cluster, "ssl_context", None)
        ssl_options = getattr(cluster, "ssl_options", None)
        return cls(encryption_enabled=ssl_context is not None or ssl_options is not None)
