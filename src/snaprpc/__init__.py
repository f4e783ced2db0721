"""
snaprpc: client for the local companion RPC server.
HttpTransport finds the server on one of a range of ports, then sends JSON method calls to it.
"""
from loguru import logger

from snaprpc.core import TransportConfig, configure_logging
from snaprpc.discovery import PortDiscovery, RangeDiscovery, candidate_port
from snaprpc.rpc import (
    ConnectionState,
    HttpTransport,
    RpcClient,
    Transport,
    TransportError,
    TransportErrorCode,
)

logger.disable("snaprpc")

__all__ = [
    "ConnectionState",
    "HttpTransport",
    "PortDiscovery",
    "RangeDiscovery",
    "RpcClient",
    "Transport",
    "TransportConfig",
    "TransportError",
    "TransportErrorCode",
    "candidate_port",
    "configure_logging",
]
