"""Pytest fixtures: a stub companion server reachable on chosen ports only."""
from __future__ import annotations

import asyncio
from typing import Any, Callable

import httpx
import pytest
from loguru import logger
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

BASE_PORT = 9000


def companion_app(
    handler: Callable[[str, Any], Any] | None = None,
    *,
    connect_status: int = 200,
    connect_delay: float = 0.0,
) -> Starlette:
    """GET /connect acknowledges; POST /rpc answers handler(method, params) (echoes params by default)."""

    async def connect(request: Request) -> Response:
        if connect_delay:
            await asyncio.sleep(connect_delay)
        return PlainTextResponse("ok", status_code=connect_status)

    async def rpc(request: Request) -> Response:
        body = await request.json()
        if handler is None:
            return JSONResponse(body["params"])
        result = handler(body["method"], body["params"])
        if hasattr(result, "__await__"):
            result = await result
        if isinstance(result, Response):
            return result
        return JSONResponse(result)

    return Starlette(routes=[Route("/connect", connect), Route("/rpc", rpc, methods=["POST"])])


class PortRouter(httpx.AsyncBaseTransport):
    """Dispatches by URL port to ASGI apps; a port without an app refuses the connection."""

    def __init__(self) -> None:
        self._apps: dict[int, httpx.ASGITransport] = {}
        self.requests: list[tuple[str, int, str]] = []

    def serve(self, port: int, app: Starlette) -> None:
        self._apps[port] = httpx.ASGITransport(app=app)

    def stop(self, port: int) -> None:
        self._apps.pop(port, None)

    @property
    def probed_ports(self) -> list[int]:
        return [port for method, port, path in self.requests if path == "/connect"]

    @property
    def rpc_calls(self) -> int:
        return sum(1 for method, port, path in self.requests if path == "/rpc")

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        port = request.url.port
        self.requests.append((request.method, port, request.url.path))
        target = self._apps.get(port)
        if target is None:
            raise httpx.ConnectError("[Errno 111] Connection refused", request=request)
        return await target.handle_async_request(request)


@pytest.fixture
def router() -> PortRouter:
    return PortRouter()


@pytest.fixture
def log_messages():
    """Collect snaprpc log records as (level, message)."""
    records: list[tuple[str, str]] = []
    sink_id = logger.add(lambda m: records.append((m.record["level"].name, m.record["message"])), level="DEBUG")
    logger.enable("snaprpc")
    yield records
    logger.remove(sink_id)
    logger.disable("snaprpc")
