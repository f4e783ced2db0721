"""RPC transport protocol and the error taxonomy raised at its boundary."""
from __future__ import annotations

from enum import Enum
from typing import Any, Protocol, runtime_checkable


class TransportErrorCode(str, Enum):
    """The only two failure kinds a transport reports."""

    CONNECTION_ERROR = "CONNECTION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class TransportError(Exception):
    """Transport failed: not connected, server went away, or the call itself failed."""

    def __init__(self, message: str, code: TransportErrorCode) -> None:
        self.message = message
        self.code = code
        super().__init__(f"[{code.value}] {message}")

    @property
    def is_connection_error(self) -> bool:
        """True when reconnecting may help."""
        return self.code is TransportErrorCode.CONNECTION_ERROR


@runtime_checkable
class Transport(Protocol):
    """RPC transport: find the server, then send request and get decoded response."""

    async def connect(self) -> None:
        ...

    async def send(self, method: str, params: Any = None) -> Any:
        ...
