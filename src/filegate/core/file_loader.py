"""
Single-file loading for filegate.

Every read goes through the same gates, in order: security validation,
binary-extension rejection, stat, size ceiling, UTF-8 read, language
detection. Content is only read once all earlier gates have passed.
"""

import logging
import os
import stat
from collections.abc import Mapping
from pathlib import Path, PurePath
from typing import Any, Optional

from filegate.core.config import SecurityConfig, merge_security_config
from filegate.core.errors import ReadError, ReadErrorCode
from filegate.core.file_scanner.language_registry import LanguageRegistry, get_default_registry
from filegate.core.file_scanner.models import FileContent
from filegate.core.path_validator import enforce_size_limit, validate_path
from filegate.core.patterns import is_binary_file

logger = logging.getLogger(__name__)


def detect_language(
    file_path: str | PurePath, registry: LanguageRegistry | None = None
) -> Optional[str]:
    """
    Detect the language of a file from its name.

    Args:
        file_path: Path to the file
        registry: Optional LanguageRegistry to use. If None, uses default registry.

    Returns:
        Language name or None
    """
    reg = registry or get_default_registry()
    return reg.detect_from_path(file_path)


_OS_ERROR_CODES: tuple[tuple[type[OSError], ReadErrorCode, str], ...] = (
    (FileNotFoundError, ReadErrorCode.NOT_FOUND, "File does not exist"),
    (PermissionError, ReadErrorCode.ACCESS_DENIED, "Permission denied reading file"),
    (IsADirectoryError, ReadErrorCode.IS_DIRECTORY, "Path is a directory, not a file"),
)


def _map_os_error(file_path: str, error: OSError | ValueError) -> ReadError:
    """Translate an OSError (or a ValueError for malformed paths) into a ReadError."""
    for error_type, code, reason in _OS_ERROR_CODES:
        if isinstance(error, error_type):
            return ReadError(f'{reason}: "{file_path}"', code, file_path, error)
    return ReadError(
        f'Failed to read file: "{file_path}" - {error}',
        ReadErrorCode.READ_FAILED,
        file_path,
        error,
    )


def load_file(
    file_path: str | PurePath,
    config: SecurityConfig | Mapping[str, Any] | None = None,
    registry: LanguageRegistry | None = None,
) -> FileContent:
    """
    Validate and read a single text file.

    Args:
        file_path: Path to read, relative to the working directory
        config: Security settings (SecurityConfig, overrides mapping, or None)
        registry: Language registry for detection (default registry if None)

    Returns:
        FileContent with ``path`` equal to the input (forward slashes)

    Raises:
        SecurityError: If validation fails or the file exceeds max_file_size
        ReadError: If the file is binary, missing, a directory or unreadable
    """
    cfg = merge_security_config(config)
    path_str = str(file_path)

    validate_path(path_str, cfg).raise_if_rejected()

    if is_binary_file(path_str):
        raise ReadError(
            f'Cannot read binary file: "{path_str}"', ReadErrorCode.BINARY_FILE, path_str
        )

    try:
        absolute_path = Path(path_str).resolve()
        file_stat = absolute_path.stat()
    except (OSError, ValueError) as e:
        raise _map_os_error(path_str, e) from e

    if stat.S_ISDIR(file_stat.st_mode):
        raise ReadError(
            f'Path is a directory, not a file: "{path_str}"',
            ReadErrorCode.IS_DIRECTORY,
            path_str,
        )

    enforce_size_limit(path_str, file_stat.st_size, cfg.max_file_size)

    try:
        with absolute_path.open("r", encoding="utf-8", newline="") as f:
            content = f.read()
    except UnicodeDecodeError as e:
        raise ReadError(
            f'Failed to decode file as UTF-8: "{path_str}"',
            ReadErrorCode.READ_FAILED,
            path_str,
            e,
        ) from e
    except OSError as e:
        raise _map_os_error(path_str, e) from e

    logger.debug(f"Read {path_str} ({file_stat.st_size} bytes)")

    return FileContent(
        path=path_str.replace("\\", "/"),
        absolute_path=absolute_path.as_posix(),
        content=content,
        size=file_stat.st_size,
        language=detect_language(path_str, registry),
    )


def file_exists(file_path: str | PurePath) -> bool:
    """Check whether a path exists and is accessible."""
    return os.access(file_path, os.F_OK)


def directory_exists(dir_path: str | PurePath) -> bool:
    """Check whether a path exists and is a directory."""
    try:
        return stat.S_ISDIR(os.stat(dir_path).st_mode)
    except OSError:
        return False
