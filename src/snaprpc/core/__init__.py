from snaprpc.core.config import DEFAULT_BASE_PORT, TransportConfig
from snaprpc.core.logging import configure_logging

__all__ = [
    "DEFAULT_BASE_PORT",
    "TransportConfig",
    "configure_logging",
]
