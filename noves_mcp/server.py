"""FastAPI application wiring Noves MCP tools to HTTP routes."""

from __future__ import annotations

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from noves_mcp import mcp
from noves_mcp.config import NovesConfig, default_config
from noves_mcp.metrics import default_metrics
from noves_mcp.models import ToolResponse
from noves_mcp.noves_api import default_client
from noves_mcp.rate_limiter import PerKeyRateLimiter
from noves_mcp.tools.common import is_error_response, response_text

logger = logging.getLogger(__name__)


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


def configure_logging(config: NovesConfig = default_config) -> None:
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    if config.log_format.lower() == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logging.basicConfig(level=level, handlers=[handler])
    else:
        logging.basicConfig(level=level)


configure_logging()
rate_limiter = PerKeyRateLimiter(
    rate_per_sec=default_config.rate_limit_qps,
    per_tool=default_config.per_tool_rate_limits,
)
HEALTH_STATUS = {"status": "ok"}
APP_VERSION = "0.1.0"
MCP_SERVER_NAME = "noves-mcp-server"
MCP_SERVER_VERSION = APP_VERSION
# Limiter and metrics key for names that are not registered tools.
UNKNOWN_TOOL_KEY = "unknown_tool"


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Startup
    yield
    # Shutdown
    await default_client.aclose()


app = FastAPI(
    title="Noves MCP Server",
    description="Wallet, transaction, and token price tools for LLM agents.",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_request_context(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    start = time.time()
    default_metrics.incr_request()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000
    default_metrics.record_duration(request_id, duration_ms)
    response.headers["X-Request-ID"] = request_id
    return response


def _log_tool_result(
    tool_name: str,
    result: ToolResponse,
    request_id: Optional[str] = None,
    duration_ms: float = 0.0,
) -> None:
    if not isinstance(result, dict) or is_error_response(result):
        error = response_text(result) if isinstance(result, dict) else "Malformed tool response"
        logger.warning(
            "tool=%s outcome=error error=%s request_id=%s",
            tool_name,
            error,
            request_id,
            extra={"tool": tool_name, "request_id": request_id, "error": error},
        )
        default_metrics.record_tool(tool_name, success=False, duration_ms=duration_ms)
    else:
        logger.info(
            "tool=%s outcome=success request_id=%s",
            tool_name,
            request_id,
            extra={"tool": tool_name, "request_id": request_id},
        )
        default_metrics.record_tool(tool_name, success=True, duration_ms=duration_ms)


def _tool_key(tool_name: str) -> str:
    return tool_name if tool_name in mcp.TOOL_REGISTRY else UNKNOWN_TOOL_KEY


async def _enforce_rate_limit(tool_name: str, rpc_id: Any = None) -> Optional[JSONResponse]:
    allowed = await rate_limiter.allow(tool_name)
    if not allowed:
        logger.warning("tool=%s outcome=rate_limited", tool_name, extra={"tool": tool_name})
        default_metrics.incr_rate_limited()
        # Return a JSON-RPC style error envelope for MCP clients.
        return JSONResponse(
            status_code=429,
            content={"jsonrpc": "2.0", "id": rpc_id, "error": {"code": 429, "message": "Rate limit exceeded"}},
        )
    return None


async def _run_tool(tool_name: str, arguments: Dict[str, Any], request_id: Optional[str]) -> ToolResponse:
    start = time.monotonic()
    result = await mcp.call_tool(tool_name, arguments)
    duration_ms = (time.monotonic() - start) * 1000
    _log_tool_result(_tool_key(tool_name), result, request_id, duration_ms=duration_ms)
    return result


@app.get("/health")
async def health() -> JSONResponse:
    """Lightweight health endpoint for monitoring."""
    return JSONResponse(content=HEALTH_STATUS)


@app.get("/metrics")
async def metrics() -> JSONResponse:
    """Return in-process metrics snapshot."""
    return JSONResponse(content=default_metrics.snapshot())


@app.get("/tools")
async def tools_catalog() -> JSONResponse:
    """Return the tool catalog."""
    return JSONResponse(content={"tools": mcp.list_tools()})


@app.post("/tools/{tool_name}")
async def tool_route(tool_name: str, request: Request) -> JSONResponse:
    """Invoke a tool with a JSON object body of arguments."""
    limited = await _enforce_rate_limit(_tool_key(tool_name))
    if limited:
        return limited
    try:
        raw_body = await request.body()
        arguments = json.loads(raw_body) if raw_body else {}
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "Request body must be JSON."})
    if not isinstance(arguments, dict):
        return JSONResponse(status_code=400, content={"error": "Request body must be a JSON object."})
    request_id = getattr(request.state, "request_id", None)
    result = await _run_tool(tool_name, arguments, request_id)
    return JSONResponse(content=result)


@app.post("/mcp")
async def mcp_gateway(request: Request) -> Response:
    """
    Minimal JSON-RPC-like gateway for MCP-style integrations.

    Supported methods:
      - initialize
      - list_tools / tools/list
      - call_tool / tools/call
      - notifications/initialized
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

    try:
        body = await request.json()
    except Exception:
        payload = _jsonrpc_error_payload(None, -32700, "Parse error")
        return _respond(payload, status_code=400, outcome="error", error_code=-32700)

    if not isinstance(body, dict):
        payload = _jsonrpc_error_payload(None, -32600, "Invalid request")
        return _respond(payload, status_code=400, outcome="error", error_code=-32600)

    method = body.get("method")
    rpc_id = body.get("id")
    raw_params = body.get("params")
    if raw_params is None:
        params: Dict[str, Any] = {}
    elif isinstance(raw_params, dict):
        params = raw_params
    else:
        payload = _jsonrpc_error_payload(rpc_id, -32602, "Invalid params")
        return _respond(payload, outcome="error", method_label=method, error_code=-32602)

    if not method or not isinstance(method, str):
        payload = _jsonrpc_error_payload(rpc_id, -32600, "Invalid request")
        return _respond(payload, outcome="error", error_code=-32600)

    if method == "initialize":
        protocol_version = params.get("protocolVersion")
        if not isinstance(protocol_version, str) or not protocol_version:
            payload = _jsonrpc_error_payload(rpc_id, -32602, "Invalid params")
            return _respond(payload, outcome="error", method_label=method, error_code=-32602)

        logger.debug(
            "mcp initialize requested protocol=%s request_id=%s",
            protocol_version,
            request_id,
            extra={"request_id": request_id},
        )
        result = {
            "protocolVersion": protocol_version,
            "serverInfo": {"name": MCP_SERVER_NAME, "version": MCP_SERVER_VERSION},
            "capabilities": {"tools": {"listChanged": False}},
        }
        return _respond(_jsonrpc_success_payload(rpc_id, result), outcome="success", method_label=method)

    if method in ("list_tools", "tools/list"):
        limited = await _enforce_rate_limit("list_tools", rpc_id)
        if limited:
            return limited
        result = {"tools": mcp.list_tools()}
        return _respond(_jsonrpc_success_payload(rpc_id, result), outcome="success", method_label=method)

    if method in ("call_tool", "tools/call"):
        tool_name = params.get("name") or params.get("tool")
        tool_arguments = params.get("arguments")
        if tool_arguments is None:
            tool_arguments = params.get("params") or {}
        if not isinstance(tool_name, str) or not tool_name.strip():
            payload = _jsonrpc_error_payload(rpc_id, -32602, "Invalid params")
            return _respond(payload, outcome="error", method_label=method, error_code=-32602)
        if not isinstance(tool_arguments, dict):
            payload = _jsonrpc_error_payload(rpc_id, -32602, "Invalid params")
            return _respond(
                payload, outcome="error", method_label=method, tool_label=tool_name, error_code=-32602
            )
        limited = await _enforce_rate_limit(_tool_key(tool_name), rpc_id)
        if limited:
            return limited
        result = await _run_tool(tool_name, tool_arguments, request_id)
        return _respond(
            _jsonrpc_success_payload(rpc_id, result),
            outcome="success",
            method_label=method,
            tool_label=tool_name,
        )

    if method in ("notifications/initialized", "initialized"):
        # Notifications should not return a JSON-RPC response body.
        logger.debug(
            "mcp initialized notification received request_id=%s",
            request_id,
            extra={"request_id": request_id},
        )
        return Response(status_code=204)

    payload = _jsonrpc_error_payload(rpc_id, -32601, "Method not found")
    return _respond(payload, outcome="error", method_label=method, error_code=-32601)


# Run with: uvicorn noves_mcp.server:app --reload


def _jsonrpc_success_payload(rpc_id: Any, result: Any) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "result": result}


def _jsonrpc_error_payload(rpc_id: Any, code: int, message: str) -> Dict[str, Any]:
    return {"jsonrpc": "2.0", "id": rpc_id, "error": {"code": code, "message": message}}
