"""
MCP tool definitions for filegate.

Defines the available tools and their schemas for the MCP interface.
"""

from mcp.types import Tool


def list_tools() -> list[Tool]:
    """List available MCP tools."""
    return [
        Tool(
            name="read_file",
            description="Read a single text file after validating it against the security policy (path traversal, sensitive files, allowed directories, symlinks, size limit).",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "Path to the file, relative to the server's working directory",
                    },
                },
                "required": ["path"],
            },
        ),
        Tool(
            name="read_files",
            description="Read several text files at once. Files that fail validation or cannot be read are reported as diagnostics instead of failing the whole call.",
            inputSchema={
                "type": "object",
                "properties": {
                    "paths": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Paths to read, relative to the server's working directory",
                        "minItems": 1,
                    },
                },
                "required": ["paths"],
            },
        ),
        Tool(
            name="read_directory",
            description="Recursively read the text files in a directory. Dependency, build and VCS directories, hidden entries, binary files and symlinks are skipped.",
            inputSchema={
                "type": "object",
                "properties": {
                    "directory": {
                        "type": "string",
                        "description": "Directory to read, relative to the server's working directory",
                    },
                    "include": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Glob patterns files must match (e.g., '**/*.py')",
                    },
                    "exclude": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Extra glob patterns to exclude, added to the defaults",
                    },
                    "max_files": {
                        "type": "integer",
                        "description": "Maximum number of files (optional, defaults to config)",
                        "minimum": 1,
                    },
                },
                "required": ["directory"],
            },
        ),
        Tool(
            name="validate_path",
            description="Check whether a path would be allowed by the security policy without reading it.",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "Path to check",
                    },
                },
                "required": ["path"],
            },
        ),
    ]
