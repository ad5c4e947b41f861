"""
Exception classes for async-cassandra-topology.
"""


class AsyncCassandraTopologyError(Exception):
    """Base exception for async-cassandra-topology."""

    pass


class ConfigurationError(AsyncCassandraTopologyError):
    """Raised when the resolver or one of its collaborators is misconfigured."""

    pass
