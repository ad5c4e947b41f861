"""
Structured events emitted while resolving topology rows.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable


@dataclass(frozen=True)
class BindAllAddressEvent:
    """
    A node advertised the bind-all address as its rpc_address.

    The resolver recovered by contacting the broadcast address instead;
    the server-side configuration should still be fixed.
    """

    broadcast_address: str
    rpc_address: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def message(self) -> str:
        return (
            f"Found host with {self.rpc_address} as rpc_address, "
            f"using broadcast_address ({self.broadcast_address}) to contact it instead. "
            f"If this is incorrect you should avoid the use of {self.rpc_address} server side."
        )


EventListener = Callable[[BindAllAddressEvent], None]
