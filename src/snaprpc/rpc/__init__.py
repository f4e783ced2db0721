from snaprpc.rpc.protocol import Transport, TransportError, TransportErrorCode
from snaprpc.rpc.state import ConnectionState
from snaprpc.rpc.http_transport import HttpTransport
from snaprpc.rpc.client import RpcClient

__all__ = [
    "ConnectionState",
    "HttpTransport",
    "RpcClient",
    "Transport",
    "TransportError",
    "TransportErrorCode",
]
