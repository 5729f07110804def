# server/registry.py
from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Type
from pydantic import BaseModel

from sandbox_io.di import Container, build_container
from sandbox_io.logging import log_tool_call
from sandbox_io.services.file_handle import FileHandle

from server.tools.files import FilePathIn, FileWriteTextIn, FileWriteBytesIn, FileTransferIn
from server.tools.directories import DirPathIn, DirRelativizeIn, SaveDataIn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: Type[BaseModel]
    handler: Callable[[BaseModel], Any]


class ToolHandlers:
    """
    Named handlers for each tool (no lambdas).
    Every handler goes through the sandbox authority; paths are strings in and out.
    """
    def __init__(self, container: Container | None = None):
        self.container = container or build_container()

    @property
    def sandbox(self):
        return self.container.sandbox

    # ---- Files
    def file_info(self, args: FilePathIn) -> dict:
        f = self.sandbox.file(args.path)
        parent = f.parent()
        return {
            "path": f.path(),
            "name": f.name(),
            "name_without_extension": f.name_without_extension(),
            "extension": f.extension(),
            "exists": f.exists(),
            "parent": parent.path() if parent is not None else None,
        }

    def file_read_text(self, args: FilePathIn) -> str:
        return self.sandbox.file(args.path).read_text()

    def file_read_bytes(self, args: FilePathIn) -> str:
        data = self.sandbox.file(args.path).read_bytes()
        return base64.b64encode(data).decode("ascii")

    def file_write_text(self, args: FileWriteTextIn) -> str:
        self.sandbox.file(args.path).write_text(args.content)
        return "OK"

    def file_write_bytes(self, args: FileWriteBytesIn) -> str:
        self.sandbox.file(args.path).write_bytes(args.data())
        return "OK"

    def file_copy(self, args: FileTransferIn) -> str:
        return self.sandbox.file(args.path).copy(args.destination).path()

    def file_move(self, args: FileTransferIn) -> str:
        return self.sandbox.file(args.path).move(args.destination).path()

    def file_delete(self, args: FilePathIn) -> str:
        self.sandbox.file(args.path).delete()
        return "OK"

    # ---- Directories
    def dir_info(self, args: DirPathIn) -> dict:
        d = self.sandbox.directory(args.path)
        parent = d.parent()
        return {
            "path": d.path(),
            "name": d.name(),
            "exists": d.exists(),
            "parent": parent.path() if parent is not None else None,
        }

    def dir_list(self, args: DirPathIn) -> dict:
        d = self.sandbox.directory(args.path)
        return {
            "path": d.path(),
            "files": [_name_and_path(f) for f in d.files()],
            "directories": [{"name": c.name(), "path": c.path()} for c in d.directories()],
        }

    def dir_make(self, args: DirPathIn) -> str:
        return self.sandbox.directory(args.path).make_directories().path()

    def dir_delete(self, args: DirPathIn) -> str:
        self.sandbox.directory(args.path).delete()
        return "OK"

    def dir_relativize(self, args: DirRelativizeIn) -> dict:
        return {"relative": self.sandbox.directory(args.path).relativize(args.target)}

    def save_data_directory(self, args: SaveDataIn) -> str:
        return self.sandbox.save_data_directory().path()


def _name_and_path(f: FileHandle) -> Dict[str, str]:
    return {"name": f.name(), "path": f.path()}


def _schema_from_model(model: Type[BaseModel]) -> Dict[str, Any]:
    return model.model_json_schema()


def build_tool_registry(container: Container | None = None) -> Dict[str, ToolSpec]:
    """
    Build a registry once at startup using DI.
    Transport layers (stdio/HTTP) read from this registry to expose tools.
    """
    handlers = ToolHandlers(container)

    specs = [
        ToolSpec("file_info", "Describe a file path inside the sandbox (name, extension, parent, existence)",
                 FilePathIn, handlers.file_info),
        ToolSpec("file_read_text", "Read a UTF-8 text file inside the sandbox",
                 FilePathIn, handlers.file_read_text),
        ToolSpec("file_read_bytes", "Read a file inside the sandbox as base64",
                 FilePathIn, handlers.file_read_bytes),
        ToolSpec("file_write_text", "Write a UTF-8 text file inside the sandbox, creating parent directories",
                 FileWriteTextIn, handlers.file_write_text),
        ToolSpec("file_write_bytes", "Write base64-encoded bytes to a file inside the sandbox",
                 FileWriteBytesIn, handlers.file_write_bytes),
        ToolSpec("file_copy", "Copy a file to a destination inside the sandbox",
                 FileTransferIn, handlers.file_copy),
        ToolSpec("file_move", "Move a file to a destination inside the sandbox",
                 FileTransferIn, handlers.file_move),
        ToolSpec("file_delete", "Delete a file (succeeds if it is already gone)",
                 FilePathIn, handlers.file_delete),
        ToolSpec("dir_info", "Describe a directory path inside the sandbox (name, parent, existence)",
                 DirPathIn, handlers.dir_info),
        ToolSpec("dir_list", "List the files and subdirectories directly inside a directory",
                 DirPathIn, handlers.dir_list),
        ToolSpec("dir_make", "Create a directory and any missing parents",
                 DirPathIn, handlers.dir_make),
        ToolSpec("dir_delete", "Recursively delete a directory (succeeds if it is already gone)",
                 DirPathIn, handlers.dir_delete),
        ToolSpec("dir_relativize", "Express a path relative to a directory",
                 DirRelativizeIn, handlers.dir_relativize),
        ToolSpec("save_data_directory", "Return the user's save data directory",
                 SaveDataIn, handlers.save_data_directory),
    ]
    return {spec.name: spec for spec in specs}


def list_tools_payload(registry: Dict[str, ToolSpec]) -> Dict[str, Any]:
    """
    Produce the `tools/list` payload body as per MCP Tools spec.
    """
    tools = []
    for spec in registry.values():
        tools.append({
            "name": spec.name,
            "description": spec.description,
            "inputSchema": _schema_from_model(spec.input_model),
        })
    return {"tools": tools}


def dispatch_tool_call(registry: Dict[str, ToolSpec], name: str, arguments: Dict[str, Any]) -> Any:
    """
    Validate args with the tool's Pydantic model, then invoke the named handler.
    """
    if name not in registry:
        raise KeyError(f"Tool not found: {name}")
    spec = registry[name]
    log_tool_call(logger, name, arguments)
    args_obj = spec.input_model(**arguments)
    return spec.handler(args_obj)


def register_into_fastmcp(mcp, registry: Dict[str, ToolSpec]) -> None:
    """
    Register all registry tools into a FastMCP stdio host.
    This keeps stdio and HTTP transports in sync without duplication.
    """
    for spec in registry.values():
        # Create a local closure so each handler binds to its spec
        def make_tool(spec: ToolSpec):
            def tool_handler(input):
                log_tool_call(logger, spec.name, input.model_dump())
                return spec.handler(input)
            # real classes, not strings: FastMCP builds the schema from these
            tool_handler.__annotations__ = {"input": spec.input_model, "return": Any}
            return tool_handler

        # FastMCP's decorator returns a decorator we can call dynamically.
        mcp.tool(name=spec.name, description=spec.description)(make_tool(spec))
