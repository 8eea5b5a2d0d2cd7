"""
Configuration module for filegate.

Supports loading from YAML/JSON files with environment variable overrides.
Default values are loaded from defaults.yaml for maintainability.
"""

import json
import logging
import os
import sys
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from filegate.core.patterns import DEFAULT_SENSITIVE_PATTERNS

logger = logging.getLogger(__name__)

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

# Cache for default values
_defaults_cache: dict[str, Any] | None = None


def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    global _defaults_cache

    if _defaults_cache is not None:
        return _defaults_cache

    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        _defaults_cache = {}
        return _defaults_cache

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        _defaults_cache = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        _defaults_cache = {}

    return _defaults_cache


def _get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section) or {}
    return section_defaults.get(key, fallback)


def _merge_patterns(extra: Iterable[str]) -> tuple[str, ...]:
    """Built-in sensitive patterns followed by extra ones, duplicates dropped."""
    merged: list[str] = []
    for pattern in (*DEFAULT_SENSITIVE_PATTERNS, *extra):
        if pattern not in merged:
            merged.append(pattern)
    return tuple(merged)


@dataclass(frozen=True)
class SecurityConfig:
    """
    Security policy applied to every read.

    ``sensitive_patterns`` is always the built-in list extended by whatever
    the caller passes; the built-in patterns cannot be removed.

    Attributes:
        allowed_directories: Directories reads must stay inside (empty = unrestricted)
        sensitive_patterns: Glob patterns for credential-like files
        max_file_size: Per-file size ceiling in bytes
        max_files: Ceiling on files enumerated by a directory scan
        allow_symlinks: Whether symbolic links may be read
    """

    allowed_directories: tuple[str, ...] = field(
        default_factory=lambda: tuple(_get_default("security", "allowed_directories", []) or [])
    )
    sensitive_patterns: tuple[str, ...] = field(
        default_factory=lambda: tuple(_get_default("security", "sensitive_patterns", []) or [])
    )
    max_file_size: int = field(
        default_factory=lambda: _get_default("security", "max_file_size", 1024 * 1024)
    )
    max_files: int = field(default_factory=lambda: _get_default("security", "max_files", 500))
    allow_symlinks: bool = field(
        default_factory=lambda: _get_default("security", "allow_symlinks", False)
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "allowed_directories", tuple(str(d) for d in self.allowed_directories)
        )
        object.__setattr__(self, "sensitive_patterns", _merge_patterns(self.sensitive_patterns))


def merge_security_config(
    overrides: Mapping[str, Any] | SecurityConfig | None = None,
) -> SecurityConfig:
    """
    Merge user settings with the defaults.

    Scalar fields override the defaults; ``sensitive_patterns`` extends them.

    Args:
        overrides: Mapping of SecurityConfig field names, an existing
            SecurityConfig (returned as-is) or None for pure defaults.

    Raises:
        ValueError: If the mapping contains unknown keys
    """
    if overrides is None:
        return SecurityConfig()
    if isinstance(overrides, SecurityConfig):
        return overrides

    known = SecurityConfig.__dataclass_fields__.keys()
    unknown = set(overrides) - set(known)
    if unknown:
        raise ValueError(f"Unknown security config keys: {', '.join(sorted(unknown))}")
    return SecurityConfig(**dict(overrides))


@dataclass
class DirectoryReadOptions:
    """
    Options for reading a whole directory.

    Attributes:
        include: Glob patterns files must match (None = everything)
        exclude: Extra exclude globs, merged with the default excludes
        max_files: File-count ceiling (None = security_config.max_files)
        security_config: Security settings (None = defaults)
    """

    include: Optional[list[str]] = None
    exclude: Optional[list[str]] = None
    max_files: Optional[int] = None
    security_config: Optional[SecurityConfig] = None


@dataclass
class ReaderConfig:
    """Configuration for batch and directory reads."""

    max_workers: int = field(default_factory=lambda: _get_default("reader", "max_workers", 8))
    default_include: list[str] = field(
        default_factory=lambda: list(_get_default("reader", "default_include", ["**/*"]))
    )
    default_exclude: list[str] = field(
        default_factory=lambda: list(_get_default("reader", "default_exclude", []) or [])
    )


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = field(default_factory=lambda: _get_default("logging", "level", "INFO"))
    format: str = field(
        default_factory=lambda: _get_default(
            "logging", "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    )


@dataclass
class FilegateConfig:
    """Main configuration class for filegate."""

    security: SecurityConfig = field(default_factory=SecurityConfig)
    reader: ReaderConfig = field(default_factory=ReaderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> "FilegateConfig":
        """
        Load configuration from a YAML or JSON file.

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the file format is unsupported
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        content = path.read_text(encoding="utf-8")

        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content) or {}
        elif path.suffix == ".json":
            data = json.loads(content) if content.strip() else {}
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "FilegateConfig":
        """Create FilegateConfig from a dictionary."""
        config = cls()

        if "security" in data:
            config.security = merge_security_config(data["security"] or {})
        if "reader" in data:
            config.reader = ReaderConfig(**(data["reader"] or {}))
        if "logging" in data:
            config.logging = LoggingConfig(**(data["logging"] or {}))

        return config

    def apply_env_overrides(self) -> "FilegateConfig":
        """
        Apply environment variable overrides to the configuration.

        Environment variables follow the pattern: FILEGATE_<SECTION>_<KEY>
        Examples:
            - FILEGATE_SECURITY_MAX_FILE_SIZE
            - FILEGATE_SECURITY_ALLOWED_DIRECTORIES (os.pathsep separated)
            - FILEGATE_READER_MAX_WORKERS
            - FILEGATE_LOGGING_LEVEL

        Returns:
            Self with environment overrides applied
        """
        env_mappings = {
            "FILEGATE_SECURITY_MAX_FILE_SIZE": ("security", "max_file_size", int),
            "FILEGATE_SECURITY_MAX_FILES": ("security", "max_files", int),
            "FILEGATE_SECURITY_ALLOW_SYMLINKS": ("security", "allow_symlinks", _parse_bool),
            "FILEGATE_SECURITY_ALLOWED_DIRECTORIES": (
                "security",
                "allowed_directories",
                _parse_path_list,
            ),
            "FILEGATE_READER_MAX_WORKERS": ("reader", "max_workers", int),
            "FILEGATE_LOGGING_LEVEL": ("logging", "level", str),
        }

        for env_var, (section, key, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is None:
                continue
            if section == "security":
                # SecurityConfig is frozen; rebuild it with the new value
                self.security = replace(self.security, **{key: converter(value)})
            else:
                setattr(getattr(self, section), key, converter(value))

        return self

    def to_dict(self) -> dict:
        """Convert configuration to a dictionary."""
        data = asdict(self)
        data["security"]["allowed_directories"] = list(self.security.allowed_directories)
        data["security"]["sensitive_patterns"] = list(self.security.sensitive_patterns)
        return data

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string."""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    def to_json(self) -> str:
        """Serialize configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    def save(self, path: Path | str) -> None:
        """
        Save configuration to a file.

        Raises:
            ValueError: If the file format is unsupported
        """
        path = Path(path)

        if path.suffix in (".yaml", ".yml"):
            content = self.to_yaml()
        elif path.suffix == ".json":
            content = self.to_json()
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def _parse_bool(value: str) -> bool:
    """Parse a string to boolean."""
    return value.lower() in ("true", "1", "yes", "on")


def _parse_path_list(value: str) -> tuple[str, ...]:
    """Split an os.pathsep-separated list, dropping empty entries."""
    return tuple(p for p in value.split(os.pathsep) if p.strip())


def load_config(
    config_path: Optional[Path | str] = None, apply_env: bool = True
) -> FilegateConfig:
    """
    Load configuration with optional environment variable overrides.

    Args:
        config_path: Optional path to config file. If None, uses defaults.
        apply_env: Whether to apply environment variable overrides.
    """
    if config_path:
        config = FilegateConfig.from_file(config_path)
    else:
        config = FilegateConfig()

    if apply_env:
        config.apply_env_overrides()

    return config


def configure_logging(cfg: LoggingConfig, stream=None) -> None:
    """
    Apply the logging section to the root logger.

    Logs go to stderr by default so they never mix with stdout payloads
    (the MCP stdio transport and ``--json`` CLI output).
    """
    logging.basicConfig(
        level=getattr(logging, cfg.level.upper(), logging.INFO),
        format=cfg.format,
        stream=stream or sys.stderr,
        force=True,
    )
