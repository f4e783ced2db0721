import pytest

from conftest import BASE_PORT, companion_app
from snaprpc import HttpTransport, RpcClient, TransportConfig, TransportError, TransportErrorCode


class FakeTransport:
    def __init__(self, outcomes):
        self._outcomes = list(outcomes)
        self.connects = 0
        self.sends: list[tuple[str, object]] = []
        self.is_connected = False

    async def connect(self) -> None:
        self.connects += 1
        self.is_connected = True

    async def send(self, method, params=None):
        self.sends.append((method, params))
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def connection_error() -> TransportError:
    return TransportError("Could not connect to RPC server.", TransportErrorCode.CONNECTION_ERROR)


def internal_error() -> TransportError:
    return TransportError("Could not send RPC request.", TransportErrorCode.INTERNAL_ERROR)


@pytest.mark.asyncio
async def test_call_returns_result() -> None:
    transport = FakeTransport([{"ok": True}])
    client = RpcClient(transport)
    assert client.transport is transport
    assert await client.call("status") == {"ok": True}
    assert transport.sends == [("status", None)]
    assert transport.connects == 0


@pytest.mark.asyncio
async def test_call_reconnects_once_on_connection_error() -> None:
    transport = FakeTransport([connection_error(), 42])
    client = RpcClient(transport)
    assert await client.call("answer", {"q": 1}) == 42
    assert transport.connects == 1
    assert transport.sends == [("answer", {"q": 1}), ("answer", {"q": 1})]


@pytest.mark.asyncio
async def test_call_gives_up_after_second_connection_error() -> None:
    transport = FakeTransport([connection_error(), connection_error()])
    client = RpcClient(transport)
    with pytest.raises(TransportError) as err:
        await client.call("answer")
    assert err.value.is_connection_error
    assert transport.connects == 1


@pytest.mark.asyncio
async def test_call_does_not_retry_internal_error() -> None:
    transport = FakeTransport([internal_error()])
    client = RpcClient(transport)
    with pytest.raises(TransportError) as err:
        await client.call("answer")
    assert err.value.code is TransportErrorCode.INTERNAL_ERROR
    assert transport.connects == 0
    assert len(transport.sends) == 1


@pytest.mark.asyncio
async def test_call_without_reconnect_raises_connection_error() -> None:
    transport = FakeTransport([connection_error()])
    client = RpcClient(transport, reconnect=False)
    with pytest.raises(TransportError):
        await client.call("answer")
    assert transport.connects == 0


@pytest.mark.asyncio
async def test_context_manager_connects_only_when_needed() -> None:
    transport = FakeTransport([1])
    async with RpcClient(transport) as client:
        assert await client.call("one") == 1
    assert transport.connects == 1

    async with RpcClient(transport):
        pass
    assert transport.connects == 1


@pytest.mark.asyncio
async def test_client_follows_server_restart_on_another_port(router) -> None:
    router.serve(9001, companion_app())
    transport = HttpTransport(TransportConfig(base_port=BASE_PORT), http_transport=router)

    async with RpcClient(transport) as client:
        assert await client.call("echo", {"n": 1}) == {"n": 1}
        router.stop(9001)
        router.serve(9007, companion_app())
        assert await client.call("echo", {"n": 2}) == {"n": 2}

    assert transport.bound_port == 9007


@pytest.mark.asyncio
async def test_client_surfaces_failed_reconnect(router) -> None:
    router.serve(9000, companion_app())
    transport = HttpTransport(TransportConfig(base_port=BASE_PORT, max_retries=3), http_transport=router)
    client = RpcClient(transport)
    await client.ensure_connected()
    router.stop(9000)

    with pytest.raises(TransportError) as err:
        await client.call("echo", {})

    assert err.value.is_connection_error
    assert transport.bound_port is None
