"""
HttpTransport: HTTP + JSON transport to the local companion server.
connect() probes candidate ports until one answers GET /connect; send() POSTs {"method", "params"} to /rpc.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Union

import httpx
from loguru import logger

from snaprpc.core.config import TransportConfig
from snaprpc.discovery.protocol import PortDiscovery, RangeDiscovery
from snaprpc.rpc.protocol import TransportError, TransportErrorCode
from snaprpc.rpc.state import ConnectionState

CONNECT_PATH = "/connect"
RPC_PATH = "/rpc"

# Refused, reset or dropped mid-response: the server is not there (any more).
_UNREACHABLE = (httpx.NetworkError, httpx.RemoteProtocolError)


@dataclass(frozen=True)
class Delivered:
    response: httpx.Response


@dataclass(frozen=True)
class Unreachable:
    detail: str
    error: BaseException | None = None


@dataclass(frozen=True)
class Failed:
    detail: str
    error: BaseException | None = None


Delivery = Union[Delivered, Unreachable, Failed]


class HttpTransport:
    """
    Transport bound to one port in [base_port, base_port + range_size).
    Not connected until connect() succeeds; a refused, reset or dropped send() drops back to unbound.
    http_transport: optional httpx transport (tests mount a stub server here); it is closed after
    every request, so it must stay usable after aclose() (ASGITransport and MockTransport do).
    """

    def __init__(
        self,
        config: TransportConfig | None = None,
        *,
        discovery: PortDiscovery | None = None,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config or TransportConfig()
        self._discovery = discovery or RangeDiscovery(self._config.base_port, self._config.range_size)
        self._http_transport = http_transport
        self._state = ConnectionState()
        self._connect_lock = asyncio.Lock()

    @property
    def config(self) -> TransportConfig:
        return self._config

    @property
    def bound_port(self) -> int | None:
        return self._state.bound_port

    @property
    def retry_count(self) -> int:
        return self._state.retry_count

    @property
    def is_connected(self) -> bool:
        return self._state.is_bound

    def _url(self, port: int, path: str) -> str:
        return f"http://{self._config.host}:{port}{path}"

    async def connect(self) -> None:
        """
        Probe candidate ports one at a time until a server acknowledges.
        Raises TransportError(CONNECTION_ERROR) after max_retries failed probes; the counter is reset either way.
        Already bound: probes again and may rebind (server restarted elsewhere in the range).
        """
        async with self._connect_lock:
            while True:
                port = self._discovery.candidate(self._state.retry_count)
                outcome = await self._deliver("GET", self._url(port, CONNECT_PATH), timeout=self._config.probe_timeout)
                if isinstance(outcome, Delivered) and outcome.response.is_success:
                    self._state.bind(port)
                    logger.info(f"Connected to RPC server on port {port}")
                    return

                detail = (
                    f"status {outcome.response.status_code}" if isinstance(outcome, Delivered) else outcome.detail
                )
                tries = self._state.record_failure()
                logger.debug(f"Probe {tries}/{self._config.max_retries} on port {port} failed: {detail}")
                if tries >= self._config.max_retries:
                    self._state.reset_retries()
                    logger.warning(f"No RPC server answered after {tries} probes")
                    raise TransportError(
                        "Could not connect to RPC server.",
                        TransportErrorCode.CONNECTION_ERROR,
                    ) from getattr(outcome, "error", None)

    async def send(self, method: str, params: Any = None) -> Any:
        """
        One remote call: POST {"method", "params"} to the bound port, return the decoded JSON body.
        CONNECTION_ERROR when unbound or the server went away (port is unbound then);
        INTERNAL_ERROR for anything else, port kept.
        """
        if not isinstance(method, str) or not method:
            raise ValueError("method must be a non-empty string")
        port = self._state.bound_port
        if port is None:
            raise TransportError("Not connected to RPC server.", TransportErrorCode.CONNECTION_ERROR)

        outcome = await self._deliver(
            "POST",
            self._url(port, RPC_PATH),
            json={"method": method, "params": params},
            timeout=self._config.request_timeout,
        )
        if isinstance(outcome, Unreachable):
            # A concurrent connect() may already have moved to another port.
            if self._state.bound_port == port:
                self._state.unbind()
            logger.info(f"RPC server on port {port} went away: {outcome.detail}")
            raise TransportError(
                "Could not connect to RPC server.",
                TransportErrorCode.CONNECTION_ERROR,
            ) from outcome.error
        if isinstance(outcome, Failed):
            logger.warning(f"Could not send RPC request {method!r}: {outcome.detail}")
            raise TransportError("Could not send RPC request.", TransportErrorCode.INTERNAL_ERROR) from outcome.error

        response = outcome.response
        if not response.is_success:
            logger.warning(f"RPC request {method!r} returned status {response.status_code}")
            raise TransportError("Could not send RPC request.", TransportErrorCode.INTERNAL_ERROR)
        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"RPC request {method!r} returned a non-JSON body: {e}")
            raise TransportError("Could not send RPC request.", TransportErrorCode.INTERNAL_ERROR) from e

    async def _deliver(self, method: str, url: str, *, timeout: float, json: Any = None) -> Delivery:
        """Run one HTTP request under a deadline and classify the result."""
        try:
            response = await asyncio.wait_for(self._request(method, url, timeout=timeout, json=json), timeout)
        except asyncio.TimeoutError as e:
            return Failed(f"timed out after {timeout}s", e)
        except _UNREACHABLE as e:
            return Unreachable(str(e) or type(e).__name__, e)
        except Exception as e:
            return Failed(str(e) or type(e).__name__, e)
        return Delivered(response)

    async def _request(self, method: str, url: str, *, timeout: float, json: Any = None) -> httpx.Response:
        kwargs: dict[str, Any] = {"timeout": timeout}
        if self._http_transport is not None:
            kwargs["transport"] = self._http_transport
        async with httpx.AsyncClient(**kwargs) as client:
            return await client.request(method, url, json=json)

    def __repr__(self) -> str:
        return f"HttpTransport(host={self._config.host!r}, {self._state!r})"
