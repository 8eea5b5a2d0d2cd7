"""MCP tool handlers for filegate."""
import json
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from mcp.types import TextContent

from filegate.core.batch_loader import load_directory, load_many
from filegate.core.config import DirectoryReadOptions
from filegate.core.errors import ReadError, SecurityError
from filegate.core.file_loader import load_file
from filegate.core.file_scanner import BatchResult
from filegate.core.path_validator import validate_path
from filegate.mcp.context import MCPContext

logger = logging.getLogger(__name__)

# Handler type: takes arguments dict and MCPContext, returns list of TextContent
_HANDLERS: dict[str, Callable[[dict, MCPContext], Awaitable[list[TextContent]]]] = {}


def _register(name: str):
    def decorator(fn):
        _HANDLERS[name] = fn
        return fn
    return decorator


def _text(text: str) -> list[TextContent]:
    return [TextContent(type="text", text=text)]


def _json(payload: Any) -> list[TextContent]:
    return _text(json.dumps(payload, indent=2))


def _security_message(error: SecurityError) -> str:
    # The underlying OS error is never echoed back to the client
    return f"Access denied: {error.path or '<unknown>'} ({error.code.value})"


def _batch_payload(result: BatchResult) -> dict[str, Any]:
    return {
        "files": [f.to_dict() for f in result.files],
        "diagnostics": [d.to_dict() for d in result.diagnostics],
        "total_files": len(result.files),
        "skipped_files": len(result.diagnostics),
    }


def _string_list(arguments: dict, key: str) -> list[str] | None:
    value = arguments.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"'{key}' must be a list of strings")
    return value


async def call_tool(name: str, arguments: Any, ctx: MCPContext) -> list[TextContent]:
    """
    Handle tool calls from MCP clients.

    Args:
        name: The tool name to invoke.
        arguments: Tool arguments as a dictionary.
        ctx: MCPContext containing the configuration and services.

    Returns:
        List of TextContent with the tool result.
    """
    if ctx is None:
        return _text("Error: MCPContext not initialized")
    handler = _HANDLERS.get(name)
    if handler is None:
        return _text(f"Unknown tool: {name}")
    try:
        return await handler(arguments or {}, ctx)
    except SecurityError as e:
        logger.info(f"{name} rejected: {e.code.value}")
        return _text(_security_message(e))
    except ReadError as e:
        return _text(f"Error: {e}")
    except Exception as e:
        logger.exception(f"Error executing {name}")
        return _text(f"Error executing {name}: {str(e)}")


@_register("read_file")
async def _handle_read_file(arguments: dict, ctx: MCPContext) -> list[TextContent]:
    path = arguments["path"]
    file_content = load_file(path, ctx.config.security, ctx.registry)
    return _json(file_content.to_dict())


@_register("read_files")
async def _handle_read_files(arguments: dict, ctx: MCPContext) -> list[TextContent]:
    paths = _string_list(arguments, "paths")
    if not paths:
        return _text("Error: 'paths' must contain at least one path")

    result = await load_many(
        paths,
        ctx.config.security,
        max_workers=ctx.config.reader.max_workers,
        registry=ctx.registry,
    )
    if not result.files:
        details = "; ".join(f"{d.path}: {d.message}" for d in result.diagnostics)
        return _text(f"Error: None of the requested files could be read. {details}".rstrip())
    return _json(_batch_payload(result))


@_register("read_directory")
async def _handle_read_directory(arguments: dict, ctx: MCPContext) -> list[TextContent]:
    directory = arguments["directory"]
    include = _string_list(arguments, "include") or list(ctx.config.reader.default_include)
    exclude = _string_list(arguments, "exclude")

    max_files = arguments.get("max_files")
    if max_files is not None:
        try:
            max_files = int(max_files)
        except (TypeError, ValueError):
            return _text("Error: 'max_files' must be an integer")
        if max_files < 1:
            return _text("Error: 'max_files' must be >= 1")

    options = DirectoryReadOptions(
        include=include,
        exclude=exclude,
        max_files=max_files,
        security_config=ctx.config.security,
    )
    result = await load_directory(
        directory,
        options,
        max_workers=ctx.config.reader.max_workers,
        scanner=ctx.scanner,
        registry=ctx.registry,
    )
    if not result.files:
        return _text(f"Error: No matching files found in directory: {directory}")

    payload = {"directory": directory, **_batch_payload(result)}
    return _json(payload)


@_register("validate_path")
async def _handle_validate_path(arguments: dict, ctx: MCPContext) -> list[TextContent]:
    path = arguments["path"]
    outcome = validate_path(path, ctx.config.security)
    response = {
        "path": path,
        "valid": outcome.ok,
        "code": outcome.code.value if outcome.code else None,
        "message": outcome.message,
    }
    return _json(response)
