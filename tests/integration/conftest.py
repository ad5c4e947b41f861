"""
Pytest configuration for integration tests.
"""

import os
import socket

import pytest
import pytest_asyncio
from async_cassandra import AsyncCluster


def _contact_points():
    contact_points = os.environ.get("CASSANDRA_CONTACT_POINTS", "localhost").split(",")
    return [cp.strip() for cp in contact_points]


def _cassandra_port():
    return int(os.environ.get("CASSANDRA_PORT", "9042"))


def _cassandra_available(contact_points, port):
    for contact_point in contact_points:
        try:
            with socket.create_connection((contact_point, port), timeout=2):
                return True
        except OSError:
            continue
    return False


@pytest.fixture(scope="session")
def cassandra_contact_points():
    """Contact points of a running Cassandra, or skip."""
    if os.environ.get("SKIP_INTEGRATION_TESTS", "").lower() in ("1", "true", "yes"):
        pytest.skip("Skipping integration tests (SKIP_INTEGRATION_TESTS is set)")

    contact_points = _contact_points()
    if not _cassandra_available(contact_points, _cassandra_port()):
        pytest.skip(
            f"Cassandra is not available on {contact_points}:{_cassandra_port()}; "
            f"set CASSANDRA_CONTACT_POINTS to point to your Cassandra instance"
        )
    return contact_points


@pytest_asyncio.fixture(scope="function")
async def cassandra_cluster(cassandra_contact_points):
    """Create an async Cassandra cluster for testing."""
    cluster = AsyncCluster(
        contact_points=cassandra_contact_points,
        port=_cassandra_port(),
        protocol_version=5,
        connect_timeout=10.0,
    )
    yield cluster
    await cluster.shutdown()


@pytest_asyncio.fixture(scope="function")
async def cassandra_session(cassandra_cluster):
    """Create an async Cassandra session."""
    session = await cassandra_cluster.connect()
    yield session
    await session.close()
