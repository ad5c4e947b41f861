"""
Constants used throughout the async-cassandra-topology library.
"""

# Port used when a row does not carry an authoritative native port
DEFAULT_NATIVE_PORT = 9042

# "Listen on every interface" address, never a valid dial target
BIND_ALL_ADDRESS = "0.0.0.0"

# system.peers_v2 (Cassandra 4.0+)
NATIVE_ADDRESS = "native_address"
NATIVE_PORT = "native_port"

# DSE 6 / ScyllaDB style columns
NATIVE_TRANSPORT_ADDRESS = "native_transport_address"
NATIVE_TRANSPORT_PORT = "native_transport_port"
NATIVE_TRANSPORT_PORT_SSL = "native_transport_port_ssl"

# Legacy system.peers
PEER = "peer"
RPC_ADDRESS = "rpc_address"

# Node-listing queries
PEERS_V2_QUERY = "SELECT * FROM system.peers_v2"
PEERS_QUERY = "SELECT * FROM system.peers"
