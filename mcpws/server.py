"""HTTP/WebSocket application, process entry point and CLI."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
import signal
import sys
from pathlib import Path
from typing import Any, Iterator

import uvicorn
import websockets
from fastapi import FastAPI, WebSocket
from fastapi.staticfiles import StaticFiles

from .config import Config, load_config
from .connection import ConnectionHandler, ConnectionRegistry
from .dispatcher import Dispatcher
from .exceptions import BadConfig
from .log import configure_logging
from .messages import SERVER_NAME, SERVER_VERSION, Envelope
from .tools import format_timestamp, utc_now
from .types import Metrics

logger = logging.getLogger("mcpws.server")


def create_app(
    config: Config | None = None,
    *,
    dispatcher: Dispatcher | None = None,
    registry: ConnectionRegistry | None = None,
    metrics: Metrics | None = None,
) -> FastAPI:
    config = config or Config()
    registry = registry or ConnectionRegistry()
    metrics = metrics or Metrics()
    handler = ConnectionHandler(dispatcher or Dispatcher(), registry, metrics)

    app = FastAPI(title=SERVER_NAME, version=SERVER_VERSION)
    app.state.registry = registry
    app.state.metrics = metrics

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {
            "status": "healthy",
            "timestamp": format_timestamp(utc_now()),
            "clients": await registry.count(),
        }

    @app.get("/metrics")
    async def metrics_endpoint() -> dict[str, Any]:
        return {**metrics.to_dict(), "clients": await registry.count()}

    @app.websocket("/mcp")
    async def mcp_endpoint(ws: WebSocket) -> None:
        await handler.handle(ws)

    static_dir = Path(config.server.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.warning("Static directory not found", extra={"fields": {"static_dir": str(static_dir)}})

    return app


@contextlib.contextmanager
def _stop_on_signals(server: uvicorn.Server) -> Iterator[None]:
    # uvicorn re-raises caught signals after it stops; these loop handlers absorb them.
    loop = asyncio.get_running_loop()
    installed = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, setattr, server, "should_exit", True)
        except (NotImplementedError, RuntimeError):
            continue
        installed.append(sig)
    try:
        yield
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)


async def run_server(config: Config) -> int:
    configure_logging(config.logging)
    app = create_app(config)
    uv_config = uvicorn.Config(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level.lower(),
        timeout_graceful_shutdown=config.server.shutdown_grace_sec,
    )
    server = uvicorn.Server(uv_config)
    logger.info(
        "Starting MCP server",
        extra={"fields": {"address": f"{config.server.host}:{config.server.port}"}},
    )
    with _stop_on_signals(server):
        await server.serve()
    if not server.started:
        logger.error("Server failed to start")
        return 1
    logger.info("Server stopped")
    return 0


def run_call(args: argparse.Namespace) -> int:
    request = Envelope(
        id=args.id,
        method="tools/call",
        params={"name": args.tool, "arguments": args.arguments or {}},
    )
    response = Dispatcher().handle(request)
    print(response.to_wire())
    return 1 if response.error is not None else 0


async def run_request(args: argparse.Namespace) -> int:
    request = Envelope(id=args.id, method=args.method, params=args.params)
    async with websockets.connect(args.url) as upstream:
        await upstream.send(request.to_wire())
        reply = await upstream.recv()
    if isinstance(reply, bytes):
        reply = reply.decode("utf-8")
    print(reply)
    return 1 if Envelope.from_wire(reply).error is not None else 0


def _json_arg(value: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid JSON: {exc}") from exc


def _request_id(value: str) -> int | str:
    try:
        return int(value)
    except ValueError:
        return value


def _resolve_config(args: argparse.Namespace) -> Config:
    config = load_config(args.config) if args.config else Config()
    overrides = {
        key: getattr(args, key)
        for key in ("host", "port", "static_dir")
        if getattr(args, key) is not None
    }
    if not overrides:
        return config
    data = config.model_dump()
    data["server"].update(overrides)
    return Config.from_dict(data)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mcpws", description="MCP WebSocket server")
    sub = parser.add_subparsers(dest="command")

    serve_cmd = sub.add_parser("serve", help="Run the MCP server")
    serve_cmd.add_argument("--config", help="YAML config file")
    serve_cmd.add_argument("--host")
    serve_cmd.add_argument("--port", type=int)
    serve_cmd.add_argument("--static-dir", dest="static_dir")

    call_cmd = sub.add_parser("call", help="Invoke a tool in-process")
    call_cmd.add_argument("--tool", required=True)
    call_cmd.add_argument("--arguments", type=_json_arg, help="JSON object of tool arguments")
    call_cmd.add_argument("--id", type=_request_id, default=1)

    request_cmd = sub.add_parser("request", help="Send one request to a running server")
    request_cmd.add_argument("--url", default="ws://localhost:8080/mcp")
    request_cmd.add_argument("--method", required=True)
    request_cmd.add_argument("--params", type=_json_arg, help="JSON request params")
    request_cmd.add_argument("--id", type=_request_id, default=1)

    return parser


def cli_main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "serve":
        try:
            config = _resolve_config(args)
        except BadConfig as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        return asyncio.run(run_server(config))
    if args.command == "call":
        return run_call(args)
    if args.command == "request":
        return asyncio.run(run_request(args))
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(cli_main())
