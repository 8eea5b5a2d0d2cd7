"""
Core module for filegate - path validation, scanning and loading.
"""

from filegate.core.errors import (
    FilegateError,
    ReadError,
    ReadErrorCode,
    SecurityError,
    SecurityErrorCode,
)
from filegate.core.patterns import (
    BINARY_EXTENSIONS,
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_SENSITIVE_PATTERNS,
    is_binary_file,
)
from filegate.core.config import (
    DirectoryReadOptions,
    FilegateConfig,
    LoggingConfig,
    ReaderConfig,
    SecurityConfig,
    configure_logging,
    load_config,
    merge_security_config,
)
from filegate.core.path_validator import (
    ValidationOutcome,
    format_bytes,
    has_path_traversal,
    is_sensitive_file,
    is_symlink,
    is_within_allowed_directory,
    normalize_path,
    validate_file_count,
    validate_file_size,
    validate_path,
    validate_paths,
)
from filegate.core.file_scanner import (
    BatchResult,
    DirectoryScanner,
    DirectoryScannerInterface,
    FileContent,
    LanguageRegistry,
    ReadDiagnostic,
    get_default_registry,
)
from filegate.core.file_loader import (
    detect_language,
    directory_exists,
    file_exists,
    load_file,
)
from filegate.core.batch_loader import (
    load_directory,
    load_many,
    summarize_diagnostics,
)

__all__ = [
    # Errors
    "FilegateError",
    "ReadError",
    "ReadErrorCode",
    "SecurityError",
    "SecurityErrorCode",
    # Patterns
    "BINARY_EXTENSIONS",
    "DEFAULT_EXCLUDE_PATTERNS",
    "DEFAULT_SENSITIVE_PATTERNS",
    "is_binary_file",
    # Config
    "DirectoryReadOptions",
    "FilegateConfig",
    "LoggingConfig",
    "ReaderConfig",
    "SecurityConfig",
    "configure_logging",
    "load_config",
    "merge_security_config",
    # Path validation
    "ValidationOutcome",
    "format_bytes",
    "has_path_traversal",
    "is_sensitive_file",
    "is_symlink",
    "is_within_allowed_directory",
    "normalize_path",
    "validate_file_count",
    "validate_file_size",
    "validate_path",
    "validate_paths",
    # Scanning
    "BatchResult",
    "DirectoryScanner",
    "DirectoryScannerInterface",
    "FileContent",
    "LanguageRegistry",
    "ReadDiagnostic",
    "get_default_registry",
    # Loading
    "detect_language",
    "directory_exists",
    "file_exists",
    "load_file",
    "load_directory",
    "load_many",
    "summarize_diagnostics",
]
