"""
MCP Context module for dependency injection.

Provides MCPContext, the dataclass holding everything the tool handlers
need, created once at server startup.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from filegate.core.config import FilegateConfig, load_config
from filegate.core.file_scanner import DirectoryScanner, LanguageRegistry, get_default_registry
from filegate.core.patterns import DEFAULT_EXCLUDE_PATTERNS


@dataclass
class MCPContext:
    """
    Container for the services used by MCP handlers.

    Attributes:
        config: Application configuration
        scanner: Directory scanner used by read_directory
        registry: Language registry used for detection
    """

    config: FilegateConfig
    scanner: DirectoryScanner = field(default_factory=DirectoryScanner)
    registry: LanguageRegistry = field(default_factory=get_default_registry)


def create_mcp_context(config_path: Optional[Path | str] = None) -> MCPContext:
    """
    Create MCPContext from configuration.

    Args:
        config_path: Optional YAML/JSON config file. Environment overrides
            are always applied.

    Raises:
        FileNotFoundError: If config_path is given but does not exist.
        ValueError: If the config file format or contents are invalid.
    """
    config = load_config(config_path)
    scanner = DirectoryScanner(
        default_excludes=[*DEFAULT_EXCLUDE_PATTERNS, *config.reader.default_exclude]
    )
    return MCPContext(config=config, scanner=scanner)
