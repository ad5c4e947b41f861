"""
Endpoint discovery through an async session.

Reads the node-listing table of the connected node and resolves each
row into an endpoint, the same way the driver's control connection does
during a topology refresh.
"""

import logging
from typing import TYPE_CHECKING, Any, List

from cassandra import InvalidRequest

from .constants import PEERS_QUERY, PEERS_V2_QUERY
from .resolver import EndpointResolver, TranslatedEndPoint, resolve_rows

if TYPE_CHECKING:
    from async_cassandra import AsyncCassandraSession

logger = logging.getLogger(__name__)


async def fetch_peer_rows(session: "AsyncCassandraSession") -> List[Any]:
    """
    Read all rows describing the other cluster members.

    Tries ``system.peers_v2`` first and falls back to ``system.peers``
    on servers that predate it.

    Args:
        session: AsyncCassandraSession instance

    Returns:
        List of rows in the session's row shape

    Raises:
        Any driver error other than InvalidRequest from the peers_v2 query
    """
    try:
        result = await session.execute(PEERS_V2_QUERY)
    except InvalidRequest:
        logger.debug("system.peers_v2 not available, falling back to system.peers")
        result = await session.execute(PEERS_QUERY)

    return list(result)


async def discover_endpoints(
    session: "AsyncCassandraSession", resolver: EndpointResolver
) -> List[TranslatedEndPoint]:
    """
    Discover the endpoints of all peers of the connected node.

    Rows that do not describe a usable peer are skipped.

    Args:
        session: AsyncCassandraSession instance
        resolver: Configured EndpointResolver

    Returns:
        Endpoints in row order
    """
    rows = await fetch_peer_rows(session)
    endpoints = resolve_rows(resolver, rows)
    logger.debug(f"Resolved {len(endpoints)} of {len(rows)} peer row(s) into endpoints")
    return endpoints
