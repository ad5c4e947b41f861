"""
Uniform view over node-listing rows.

The driver hands back rows in different shapes depending on the row
factory in use: plain dicts (``dict_factory``, used by the control
connection), named tuples (the default ``named_tuple_factory``) or
``OrderedDict`` instances. ``TopologyRow`` hides those differences behind
a small column-presence/lookup interface.
"""

import ipaddress
from typing import Any, Iterator, Mapping, Optional


class TopologyRow(Mapping[str, Any]):
    """
    Read-only view of one record from a node-listing table.

    Columns may be absent entirely (older schema) or present with a
    ``None`` value (column exists but was never written). Both cases are
    expected and are reported separately by ``has_column`` and ``is_null``.
    """

    def __init__(self, columns: Mapping[str, Any]) -> None:
        self._columns = dict(columns)

    @classmethod
    def wrap(cls, row: Any) -> "TopologyRow":
        """
        Build a view from any row shape the driver produces.

        Args:
            row: A mapping, a named tuple, or an object exposing ``_asdict()``

        Returns:
            TopologyRow over the row's columns

        Raises:
            TypeError: If the row shape is not recognised
        """
        if isinstance(row, TopologyRow):
            return row
        if isinstance(row, Mapping):
            return cls(row)
        if hasattr(row, "_asdict"):
            return cls(row._asdict())
        raise TypeError(f"Unsupported topology row type: {type(row).__name__}")

    def __getitem__(self, name: str) -> Any:
        return self._columns[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._columns)

    def __len__(self) -> int:
        return len(self._columns)

    def __repr__(self) -> str:
        return f"TopologyRow({self._columns!r})"

    def has_column(self, name: str) -> bool:
        """Check whether the column exists in this row, null or not."""
        return name in self._columns

    def is_null(self, name: str) -> bool:
        """Check whether the column is absent or holds no value."""
        return self._columns.get(name) is None

    def get_inet(self, name: str) -> Optional[str]:
        """
        Fetch an INET column as a normalised IP address string.

        Accepts the textual form the driver returns as well as
        ``ipaddress`` objects and packed 4/16-byte values.

        Returns:
            Canonical address string, or None if the column is absent, null,
            empty or not a valid IP address
        """
        return parse_inet(self._columns.get(name))

    def get_int(self, name: str) -> Optional[int]:
        """Fetch an INT column, or None if absent/null."""
        value = self._columns.get(name)
        if value is None:
            return None
        return int(value)


def normalize_inet(value: Any) -> str:
    """
    Convert an INET value to its canonical string form.

    Hostnames and anything else that is not an IP literal are returned
    as-is so translators can still act on them.
    """
    if isinstance(value, (bytes, bytearray)):
        return str(ipaddress.ip_address(bytes(value)))
    if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return str(value)
    text = str(value)
    try:
        return str(ipaddress.ip_address(text))
    except ValueError:
        return text


def parse_inet(value: Any) -> Optional[str]:
    """
    Parse an INET column value strictly.

    Returns:
        Canonical address string, or None for null, empty or malformed
        values (wrong-length packed bytes, non-IP text)
    """
    if value is None:
        return None
    if isinstance(value, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        value = bytes(value)
    else:
        value = str(value).strip()
    if not value:
        return None
    try:
        return str(ipaddress.ip_address(value))
    except ValueError:
        return None
