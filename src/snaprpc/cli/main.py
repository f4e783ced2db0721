"""
CLI for checking a running companion server: probe, call.
Defaults come from SNAPRPC_* environment variables; options override them.
"""
from __future__ import annotations

import asyncio
import dataclasses
import json
from typing import Any, Optional

import typer

from snaprpc.core.config import TransportConfig
from snaprpc.core.logging import configure_logging
from snaprpc.rpc.client import RpcClient
from snaprpc.rpc.http_transport import HttpTransport
from snaprpc.rpc.protocol import TransportError

app = typer.Typer(help="snaprpc CLI: find the companion RPC server and call it.")


def _config(host: Optional[str], base_port: Optional[int]) -> TransportConfig:
    try:
        config = TransportConfig.load_from_env()
        overrides: dict[str, Any] = {}
        if host is not None:
            overrides["host"] = host
        if base_port is not None:
            overrides["base_port"] = base_port
        return dataclasses.replace(config, **overrides) if overrides else config
    except ValueError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(2)


def _setup_logging(debug: bool) -> None:
    configure_logging("DEBUG" if debug else "WARNING")


@app.command()
def probe(
    host: Optional[str] = typer.Option(None, "--host", help="Server host (default: localhost)"),
    base_port: Optional[int] = typer.Option(None, "--base-port", "-p", help="First candidate port"),
    debug: bool = typer.Option(False, "--debug", help="Log every probe"),
) -> None:
    """Find the server and print the port it answers on."""
    _setup_logging(debug)
    transport = HttpTransport(_config(host, base_port))
    try:
        asyncio.run(transport.connect())
    except TransportError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(1)
    typer.echo(f"RPC server on port {transport.bound_port}")


@app.command()
def call(
    method: str = typer.Argument(..., help="RPC method name"),
    params: str = typer.Argument("null", help="Params as JSON"),
    host: Optional[str] = typer.Option(None, "--host", help="Server host (default: localhost)"),
    base_port: Optional[int] = typer.Option(None, "--base-port", "-p", help="First candidate port"),
    debug: bool = typer.Option(False, "--debug", help="Log transport activity"),
) -> None:
    """Connect, call METHOD with PARAMS and print the JSON result."""
    _setup_logging(debug)
    try:
        decoded = json.loads(params)
    except json.JSONDecodeError as e:
        typer.echo(f"PARAMS is not valid JSON: {e}", err=True)
        raise typer.Exit(2)
    if not method:
        typer.echo("METHOD must not be empty", err=True)
        raise typer.Exit(2)

    config = _config(host, base_port)

    async def run() -> Any:
        async with RpcClient(HttpTransport(config)) as client:
            return await client.call(method, decoded)

    try:
        result = asyncio.run(run())
    except TransportError as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(1)
    typer.echo(json.dumps(result, indent=2, ensure_ascii=False))


def main() -> None:
    """Entry point for the snaprpc console command."""
    app()


if __name__ == "__main__":
    main()
