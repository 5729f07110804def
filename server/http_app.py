# server/http_app.py
from __future__ import annotations

import logging
from typing import Any, Dict
from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from sandbox_io.config import Settings
from sandbox_io.di import Container, build_container
from sandbox_io.errors import SandboxError
from server.registry import build_tool_registry, list_tools_payload, dispatch_tool_call

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2025-03-26"  # aligns with current spec draft dates


# ---------- Security: Origin validation & Bearer token ----------

def _origin_allowed(settings: Settings, req: Request) -> bool:
    origin = req.headers.get("origin")
    if not origin:
        return settings.MCP_HTTP_ALLOW_NO_ORIGIN
    allowed = {o.strip().lower() for o in settings.MCP_HTTP_ALLOWED_ORIGINS.split(",") if o.strip()}
    return origin.lower() in allowed

def _require_auth(settings: Settings, req: Request):
    auth = req.headers.get("authorization", "")
    if not auth.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing Bearer token")
    token = auth.split(" ", 1)[1]
    if token != settings.MCP_HTTP_BEARER_TOKEN:
        raise HTTPException(status_code=401, detail="Invalid Bearer token")


def _jsonrpc_error(id_: Any, code: int, message: str, data: Any | None = None) -> JSONResponse:
    body: Dict[str, Any] = {"jsonrpc": "2.0", "id": id_, "error": {"code": code, "message": message}}
    if data is not None:
        body["error"]["data"] = data
    return JSONResponse(body)

def _jsonrpc_result(id_: Any, result: Any) -> JSONResponse:
    return JSONResponse({"jsonrpc": "2.0", "id": id_, "result": result})

def _tool_result(content: Any, is_error: bool = False) -> Dict[str, Any]:
    content_block = (
        {"type": "json", "json": content}
        if isinstance(content, (dict, list))
        else {"type": "text", "text": str(content)}
    )
    return {"content": [content_block], "isError": is_error}


def create_http_app(container: Container | None = None) -> FastAPI:
    container = container or build_container()
    settings = container.settings
    registry = build_tool_registry(container)

    app = FastAPI(title="Sandbox IO MCP HTTP Server", version="0.1.0")

    @app.middleware("http")
    async def origin_validation_mw(request: Request, call_next):
        # MCP spec requires Origin validation to prevent DNS rebinding
        # If provided and not allowed → 403
        if not _origin_allowed(settings, request):
            return JSONResponse({"error": {"code": 403, "message": "Forbidden origin"}}, status_code=403)
        return await call_next(request)

    # ---------- MCP JSON-RPC endpoint (Streamable HTTP) ----------

    @app.post(settings.MCP_HTTP_PATH)
    async def mcp_endpoint(request: Request):
        _require_auth(settings, request)

        try:
            payload = await request.json()
        except Exception:
            return _jsonrpc_error(None, -32700, "Parse error")

        id_ = payload.get("id")
        method = payload.get("method")
        params = payload.get("params", {})

        if method == "initialize":
            return _jsonrpc_result(id_, {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {"listChanged": False}},
                "serverInfo": {"name": "sandbox-io-http", "version": "0.1.0"},
            })

        if method == "tools/list":
            return _jsonrpc_result(id_, list_tools_payload(registry))

        if method == "tools/call":
            name = params.get("name")
            args = params.get("arguments", {})
            try:
                result = dispatch_tool_call(registry, name, args)
            except KeyError as ke:
                return _jsonrpc_error(id_, -32601, str(ke))
            except ValidationError as ve:
                return _jsonrpc_error(id_, -32602, "Invalid params", ve.errors(include_url=False, include_context=False))
            except SandboxError as se:
                # sandbox refusals are tool errors the caller can act on, not server faults
                logger.info("tool %s failed: %s", name, se)
                return _jsonrpc_result(id_, _tool_result({"error": se.kind, "message": str(se)}, is_error=True))
            except Exception as e:
                logger.exception("tool %s crashed", name)
                return _jsonrpc_error(id_, -32603, "Internal error", str(e))

            return _jsonrpc_result(id_, _tool_result(result))

        return _jsonrpc_error(id_, -32601, f"Method not found: {method}")

    return app


app = create_http_app()

if __name__ == "__main__":
    import uvicorn
    from sandbox_io.logging import configure_logging

    settings = Settings()
    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(
        "server.http_app:app",
        host=settings.MCP_HTTP_HOST,
        port=settings.MCP_HTTP_PORT,
        reload=False,
    )
