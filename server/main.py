# server/main.py
from fastmcp import FastMCP
from sandbox_io.di import build_container
from sandbox_io.logging import configure_logging
from server.registry import build_tool_registry, register_into_fastmcp

def create_app() -> FastMCP:
    """
    Build DI container, create FastMCP host, and register tools.
    Keep the server (protocol) separate from tool/service logic.
    """
    container = build_container()
    configure_logging(container.settings.LOG_LEVEL)

    mcp = FastMCP("SandboxIO", version="0.1.0")

    # Register tools (thin adapters over the sandbox authority)
    register_into_fastmcp(mcp, build_tool_registry(container))

    return mcp


if __name__ == "__main__":
    app = create_app()
    # stdio transport: the host launches this process and speaks JSON-RPC on stdin/stdout
    app.run(transport="stdio")
