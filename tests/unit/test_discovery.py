"""
Test endpoint discovery through an async session.

What this tests:
---------------
1. peers_v2 is queried first
2. Fallback to system.peers on servers without peers_v2
3. Undeterminable rows are skipped
4. Other driver errors propagate

Why this matters:
----------------
- Discovery must work against every supported server version
- A single bad row must not abort a topology refresh
"""

from collections import namedtuple
from unittest.mock import AsyncMock, Mock

import pytest
from cassandra import InvalidRequest, OperationTimedOut

from async_cassandra_topology.constants import PEERS_QUERY, PEERS_V2_QUERY
from async_cassandra_topology.discovery import discover_endpoints, fetch_peer_rows
from async_cassandra_topology.resolver import EndpointResolver
from async_cassandra_topology.security import SecurityConfiguration
from async_cassandra_topology.translation import IdentityAddressTranslator


@pytest.fixture
def resolver():
    return EndpointResolver(
        translator=IdentityAddressTranslator(),
        security=SecurityConfiguration(encryption_enabled=True),
    )


@pytest.fixture
def mock_session():
    session = Mock()
    session.execute = AsyncMock()
    return session


class TestFetchPeerRows:
    """Test node-listing queries."""

    @pytest.mark.asyncio
    async def test_uses_peers_v2(self, mock_session):
        """Test system.peers_v2 is queried when available."""
        rows = [{"native_address": "10.0.0.1", "native_port": 9042}]
        mock_session.execute.return_value = iter(rows)

        result = await fetch_peer_rows(mock_session)

        assert result == rows
        mock_session.execute.assert_awaited_once_with(PEERS_V2_QUERY)

    @pytest.mark.asyncio
    async def test_falls_back_to_peers(self, mock_session):
        """
        Test fallback to system.peers when peers_v2 does not exist.

        What this tests:
        ---------------
        1. InvalidRequest from peers_v2 is caught
        2. system.peers is queried next
        3. Its rows are returned

        Why this matters:
        ----------------
        - Cassandra 3.x has no peers_v2 table
        - Mixed-version clusters must still be discoverable
        """
        rows = [{"peer": "10.0.0.3", "rpc_address": "10.0.0.3"}]
        mock_session.execute.side_effect = [
            InvalidRequest("unconfigured table peers_v2"),
            rows,
        ]

        result = await fetch_peer_rows(mock_session)

        assert result == rows
        assert [c.args[0] for c in mock_session.execute.await_args_list] == [
            PEERS_V2_QUERY,
            PEERS_QUERY,
        ]

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, mock_session):
        """Test non-InvalidRequest errors are not swallowed."""
        mock_session.execute.side_effect = OperationTimedOut("timed out")

        with pytest.raises(OperationTimedOut):
            await fetch_peer_rows(mock_session)

        mock_session.execute.assert_awaited_once_with(PEERS_V2_QUERY)


class TestDiscoverEndpoints:
    """Test full discovery."""

    @pytest.mark.asyncio
    async def test_resolves_and_skips(self, mock_session, resolver):
        """Test usable rows become endpoints and the rest are skipped."""
        mock_session.execute.return_value = [
            {"native_address": "10.0.0.1", "native_port": 9042},
            {"native_address": None, "native_port": 9042},
            {"native_address": "10.0.0.2", "native_port": 9043},
        ]

        endpoints = await discover_endpoints(mock_session, resolver)

        assert [str(e) for e in endpoints] == ["10.0.0.1:9042", "10.0.0.2:9043"]

    @pytest.mark.asyncio
    async def test_legacy_cluster(self, mock_session, resolver):
        """Test discovery against a pre-4.0 cluster with named tuple rows."""
        Row = namedtuple("Row", ["peer", "rpc_address", "data_center"])
        mock_session.execute.side_effect = [
            InvalidRequest("unconfigured table peers_v2"),
            [
                Row("192.168.1.10", "0.0.0.0", "dc1"),
                Row("192.168.1.11", "10.1.1.11", "dc1"),
                Row("192.168.1.12", None, "dc2"),
            ],
        ]

        endpoints = await discover_endpoints(mock_session, resolver)

        assert [str(e) for e in endpoints] == ["192.168.1.10:9042", "10.1.1.11:9042"]

    @pytest.mark.asyncio
    async def test_ssl_ports(self, mock_session, resolver):
        """Test SSL ports are selected for native_transport rows."""
        mock_session.execute.return_value = [
            {
                "native_transport_address": "10.0.0.5",
                "native_transport_port": 9042,
                "native_transport_port_ssl": 9142,
            }
        ]

        endpoints = await discover_endpoints(mock_session, resolver)

        assert [(e.address, e.port) for e in endpoints] == [("10.0.0.5", 9142)]

    @pytest.mark.asyncio
    async def test_empty_cluster(self, mock_session, resolver):
        """Test a single-node cluster yields no peers."""
        mock_session.execute.return_value = []

        assert await discover_endpoints(mock_session, resolver) == []
