"""FastAPI application wiring the Stacks MCP tools to an HTTP JSON-RPC gateway."""

from __future__ import annotations

import json
import logging
import os
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from stacks_mcp import __version__
from stacks_mcp.config import StacksConfig, resolve_config
from stacks_mcp.mcp import ToolRegistry
from stacks_mcp.metrics import MetricsRecorder
from stacks_mcp.networks import NetworkRegistry
from stacks_mcp.prompts import UnknownPromptError, get_prompt, list_prompts
from stacks_mcp.resources import ResourceReadError, UnknownResourceError, list_resources, read_resource
from stacks_mcp.stacks_api import StacksApiClient

logger = logging.getLogger(__name__)

HEALTH_STATUS = {"status": "ok"}
MCP_SERVER_NAME = "Stacks MCP Server"
MCP_SERVER_VERSION = __version__


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "message": record.getMessage(),
            "name": record.name,
        }
        for key in ("tool", "request_id", "error"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(config: StacksConfig) -> None:
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    handler = logging.StreamHandler()
    if config.log_format.lower() == "json":
        handler.setFormatter(JsonFormatter())
    logging.basicConfig(level=level, handlers=[handler])


def _jsonrpc_success_payload(rpc_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def _jsonrpc_error_payload(rpc_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message}}


def create_app(config: Optional[StacksConfig] = None, *, client: Optional[StacksApiClient] = None) -> FastAPI:
    """
    Build the application and its collaborators.

    Config is resolved from the environment once, here, and handed to the
    network registry, API client, and tool registry; nothing reads it globally.
    """
    config = config or resolve_config()
    configure_logging(config)
    metrics = MetricsRecorder()
    networks = NetworkRegistry.from_config(config)
    api_client = client or StacksApiClient(config, networks, metrics=metrics)
    tools = ToolRegistry(api_client, config, metrics=metrics)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        logger.info(
            "Stacks MCP server starting default_network=%s api_key=%s",
            config.default_network.value,
            "configured" if config.api_key else "not set",
        )
        yield
        await api_client.aclose()

    app = FastAPI(
        title=MCP_SERVER_NAME,
        description="Read-only Stacks blockchain tool surface for LLM agents.",
        version=MCP_SERVER_VERSION,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.metrics = metrics
    app.state.api_client = api_client
    app.state.tools = tools

    @app.middleware("http")
    async def add_request_context(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.time()
        metrics.incr_request()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000
        metrics.record_duration(request_id, duration_ms)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.get("/health")
    async def health() -> JSONResponse:
        """Lightweight health endpoint for monitoring."""
        return JSONResponse(content=HEALTH_STATUS)

    @app.get("/metrics")
    async def metrics_route() -> JSONResponse:
        """Return in-process metrics snapshot."""
        return JSONResponse(content=metrics.snapshot())

    @app.get("/tools")
    async def tools_catalog() -> JSONResponse:
        return JSONResponse(content={"tools": [tool.to_dict() for tool in tools.list_tools()]})

    @app.post("/tools/{tool_name}")
    async def tool_route(tool_name: str, request: Request) -> JSONResponse:
        """Invoke a tool with a JSON object body as its arguments."""
        try:
            arguments = await request.json() if await request.body() else {}
        except ValueError:
            return JSONResponse(status_code=400, content={"error": "Request body must be JSON"})
        result = await tools.invoke(tool_name, arguments)
        return JSONResponse(content=result.to_dict())

    @app.post("/mcp")
    async def mcp_gateway(request: Request) -> Response:
        """
        Minimal JSON-RPC gateway for MCP integrations.

        Supported methods:
          - initialize
          - tools/list, tools/call (and list_tools / call_tool aliases)
          - prompts/list, prompts/get
          - resources/list, resources/read
        """
        request_id = getattr(request.state, "request_id", None)
        start_time = time.time()

        def _respond(
            payload: Dict[str, Any],
            status_code: int = 200,
            *,
            outcome: str,
            method_label: Optional[str] = None,
            tool_label: Optional[str] = None,
            error_code: Optional[int] = None,
        ) -> JSONResponse:
            duration_ms = (time.time() - start_time) * 1000
            logger.debug(
                "mcp outcome=%s method=%s tool=%s id=%s status=%s duration_ms=%.2f error_code=%s",
                outcome,
                method_label,
                tool_label,
                payload.get("id"),
                status_code,
                duration_ms,
                error_code,
                extra={"request_id": request_id, "tool": tool_label, "error": error_code},
            )
            return JSONResponse(status_code=status_code, content=payload)

        def _error(rpc_id: Any, code: int, message: str, method_label: Optional[str], status_code: int = 200) -> JSONResponse:
            return _respond(
                _jsonrpc_error_payload(rpc_id, code, message),
                status_code,
                outcome="error",
                method_label=method_label,
                error_code=code,
            )

        def _success(rpc_id: Any, result: Any, method_label: str, tool_label: Optional[str] = None) -> JSONResponse:
            return _respond(
                _jsonrpc_success_payload(rpc_id, result),
                outcome="success",
                method_label=method_label,
                tool_label=tool_label,
            )

        try:
            body = await request.json()
        except ValueError:
            return _error(None, -32700, "Parse error", None, status_code=400)

        if not isinstance(body, dict):
            return _error(None, -32600, "Invalid request", None, status_code=400)

        method = body.get("method")
        rpc_id = body.get("id")
        raw_params = body.get("params")
        if raw_params is None:
            params: Dict[str, Any] = {}
        elif isinstance(raw_params, dict):
            params = raw_params
        else:
            return _error(rpc_id, -32602, "Invalid params", method)

        if not method or not isinstance(method, str):
            return _error(rpc_id, -32600, "Invalid request", None)

        if method == "initialize":
            protocol_version = params.get("protocolVersion")
            if not isinstance(protocol_version, str) or not protocol_version:
                return _error(rpc_id, -32602, "Invalid params", method)
            result = {
                "protocolVersion": protocol_version,
                "serverInfo": {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION},
                "capabilities": {
                    "tools": {"listChanged": False},
                    "prompts": {"listChanged": False},
                    "resources": {"listChanged": False},
                },
            }
            return _success(rpc_id, result, method)

        if method in ("list_tools", "tools/list"):
            return _success(rpc_id, {"tools": [tool.to_dict() for tool in tools.list_tools()]}, method)

        if method in ("call_tool", "tools/call"):
            tool_name = params.get("name") or params.get("tool")
            arguments = params.get("arguments")
            if arguments is None:
                arguments = params.get("params") or {}
            if not isinstance(tool_name, str) or not tool_name.strip():
                return _error(rpc_id, -32602, "Invalid params", method)
            if not isinstance(arguments, dict):
                return _error(rpc_id, -32602, "Invalid params", method)
            result = await tools.invoke(tool_name, arguments)
            return _success(rpc_id, result.to_dict(), method, tool_label=tool_name)

        if method == "prompts/list":
            return _success(rpc_id, {"prompts": list_prompts()}, method)

        if method == "prompts/get":
            name = params.get("name")
            if not isinstance(name, str):
                return _error(rpc_id, -32602, "Invalid params", method)
            try:
                return _success(rpc_id, get_prompt(name), method)
            except UnknownPromptError as exc:
                return _error(rpc_id, -32602, str(exc), method)

        if method == "resources/list":
            return _success(rpc_id, {"resources": list_resources()}, method)

        if method == "resources/read":
            uri = params.get("uri")
            if not isinstance(uri, str):
                return _error(rpc_id, -32602, "Invalid params", method)
            try:
                return _success(rpc_id, await read_resource(uri, client=api_client), method)
            except UnknownResourceError as exc:
                return _error(rpc_id, -32602, str(exc), method)
            except ResourceReadError as exc:
                return _error(rpc_id, -32603, str(exc), method)

        if method in ("notifications/initialized", "initialized"):
            # Notifications should not return a JSON-RPC response body.
            logger.debug(
                "mcp initialized notification received request_id=%s",
                request_id,
                extra={"request_id": request_id},
            )
            return Response(status_code=204)

        return _error(rpc_id, -32601, "Method not found", method)

    return app


def main() -> None:
    """Console entry point: serve the module-level app with uvicorn."""
    import uvicorn

    uvicorn.run(
        app,
        host=os.getenv("STACKS_MCP_HOST", "127.0.0.1"),
        port=int(os.getenv("STACKS_MCP_PORT", "8000")),
        log_config=None,
    )


# Run with: uvicorn stacks_mcp.server:app --reload
app = create_app()
