"""
RpcClient: facade over a Transport: call(method, params) -> decoded result.
Reconnects once when the transport reports the server went away.
"""
from __future__ import annotations

from typing import Any

from loguru import logger

from snaprpc.rpc.protocol import Transport, TransportError


class RpcClient:
    """
    Facade: call(method, params) -> result.
    With reconnect=True a CONNECTION_ERROR triggers one connect() and one retry;
    INTERNAL_ERROR is raised as is (reconnecting would not fix it).
    """

    def __init__(self, transport: Transport, *, reconnect: bool = True) -> None:
        self._transport = transport
        self._reconnect = reconnect

    @property
    def transport(self) -> Transport:
        return self._transport

    async def ensure_connected(self) -> None:
        """Connect unless the transport says it already is."""
        if getattr(self._transport, "is_connected", False):
            return
        await self._transport.connect()

    async def call(self, method: str, params: Any = None) -> Any:
        try:
            return await self._transport.send(method, params)
        except TransportError as e:
            if not (self._reconnect and e.is_connection_error):
                raise
            logger.debug(f"RPC {method!r} lost the connection, reconnecting: {e.message}")
        await self._transport.connect()
        return await self._transport.send(method, params)

    async def __aenter__(self) -> RpcClient:
        await self.ensure_connected()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        return None
