"""
Path validation for filegate.

Decides whether a path may be read before any content I/O happens. The
checks run in a fixed order and the first failure wins:

1. Path traversal (lexical, relative to the working directory)
2. Sensitive-file patterns
3. Allow-list containment
4. Symbolic link detection (the only check that touches the filesystem)

The first three are pure predicates; ``is_symlink`` performs a single
``lstat`` call.
"""

import fnmatch
import logging
import os
import re
import stat
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import PurePath
from typing import Any, Optional

from filegate.core.config import SecurityConfig, merge_security_config
from filegate.core.errors import SecurityError, SecurityErrorCode
from filegate.core.patterns import DEFAULT_SENSITIVE_PATTERNS

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[/\\]")
_DRIVE_PREFIX = re.compile(r"^[A-Za-z]:")

PathLike = str | PurePath


@dataclass
class ValidationOutcome:
    """Result of path validation.

    Attributes:
        ok: True if the path passed every check.
        code: Rejection code, None when ok.
        path: The offending path, None when ok.
        message: Human-readable reason, None when ok.
    """

    ok: bool
    code: Optional[SecurityErrorCode] = None
    path: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def accept(cls) -> "ValidationOutcome":
        return cls(ok=True)

    @classmethod
    def reject(cls, code: SecurityErrorCode, path: str, message: str) -> "ValidationOutcome":
        return cls(ok=False, code=code, path=path, message=message)

    def raise_if_rejected(self) -> None:
        """Raise SecurityError carrying this outcome's code if it is a rejection."""
        if not self.ok:
            raise SecurityError(self.message or "Access denied", self.code, self.path)


def normalize_path(input_path: PathLike) -> str:
    """Return the absolute form of a path using forward slashes."""
    return os.path.abspath(input_path).replace("\\", "/")


def _escapes(relative_path: str) -> bool:
    """True if a relative path leaves its base (``..`` first segment or absolute)."""
    if os.path.isabs(relative_path):
        return True
    first = _SEPARATORS.split(relative_path, maxsplit=1)[0]
    return first == os.pardir


def has_path_traversal(input_path: PathLike, base_path: Optional[PathLike] = None) -> bool:
    """
    Check whether a path tries to escape its base directory.

    Uses the relative path from the base to the lexically resolved target,
    plus a per-segment check for ``..``. Filenames that merely contain two
    dots (``vendor..lib.js``) are not traversal.

    Args:
        input_path: Path to check
        base_path: Base directory (defaults to the current working directory)
    """
    raw = str(input_path)
    base = os.path.abspath(base_path) if base_path is not None else os.getcwd()
    resolved = os.path.abspath(os.path.join(base, raw))

    try:
        relative = os.path.relpath(resolved, base)
    except ValueError:
        # Different drives on Windows
        return True

    if _escapes(relative):
        return True

    return any(segment == os.pardir for segment in _SEPARATORS.split(raw))


@lru_cache(maxsize=32)
def _split_patterns(patterns: tuple[str, ...]) -> tuple[tuple[str, ...], ...]:
    """Lowercase patterns and split them into path segments."""
    return tuple(
        tuple(segment for segment in p.lower().split("/") if segment) for p in patterns
    )


def _match_segments(parts: tuple[str, ...], pattern: tuple[str, ...]) -> bool:
    """
    Match path segments against pattern segments.

    ``*`` and ``?`` never cross a ``/``; ``**`` spans zero or more whole
    segments. A pattern has to consume the entire path, so ``*token*``
    matches a file name but not the directories above it.
    """
    if not pattern:
        return not parts
    head, rest = pattern[0], pattern[1:]
    if head == "**":
        return any(_match_segments(parts[i:], rest) for i in range(len(parts) + 1))
    return (
        bool(parts)
        and fnmatch.fnmatchcase(parts[0], head)
        and _match_segments(parts[1:], rest)
    )


def _strip_root(normalized: str) -> str:
    """Drop drive letters, leading slashes and ``./`` prefixes before matching."""
    normalized = _DRIVE_PREFIX.sub("", normalized)
    while normalized.startswith("./") or normalized.startswith("/"):
        normalized = normalized[2:] if normalized.startswith("./") else normalized[1:]
    return normalized


def is_sensitive_file(
    file_path: PathLike, patterns: Iterable[str] = DEFAULT_SENSITIVE_PATTERNS
) -> bool:
    """
    Check whether a path looks like a credential or secret file.

    Both the full slash-normalized path and the bare file name are matched,
    case-insensitively and including dot-files. Every pattern must match the
    whole path: a sensitive-looking directory name such as ``tokenizer/``
    does not taint the files below it unless a pattern ends in ``/**``.
    """
    normalized = str(file_path).replace("\\", "/")
    file_name = normalized.rstrip("/").rsplit("/", 1)[-1].lower()
    full_path = tuple(s for s in _strip_root(normalized).lower().split("/") if s)
    compiled = _split_patterns(tuple(patterns))

    for pattern in compiled:
        if full_path and _match_segments(full_path, pattern):
            return True
        if file_name and _match_segments((file_name,), pattern):
            return True
    return False


def is_within_allowed_directory(file_path: PathLike, allowed_dirs: Iterable[PathLike]) -> bool:
    """
    Check that a path lies inside at least one allowed directory.

    An empty allow-list permits everything. Both sides are resolved to
    canonical paths and compared with a relative-path computation, so
    ``/var/www-secret`` is not inside ``/var/www``.
    """
    allowed = list(allowed_dirs or [])
    if not allowed:
        return True

    try:
        target = os.path.realpath(file_path)
    except ValueError:
        # Embedded NUL bytes
        return False
    for allowed_dir in allowed:
        base = os.path.realpath(allowed_dir)
        try:
            relative = os.path.relpath(target, base)
        except ValueError:
            continue
        if not _escapes(relative):
            return True
    return False


def is_symlink(file_path: PathLike) -> bool:
    """
    Check whether the path itself is a symbolic link.

    Missing paths and failed lookups return False; existence is decided by
    the read that follows validation.
    """
    try:
        st = os.lstat(file_path)
    except (OSError, ValueError):
        return False
    return stat.S_ISLNK(st.st_mode)


def _reject(code: SecurityErrorCode, path: str, message: str) -> ValidationOutcome:
    logger.debug(f"Rejected {path}: {code.value}")
    return ValidationOutcome.reject(code, path, message)


def validate_path(
    input_path: PathLike,
    config: SecurityConfig | Mapping[str, Any] | None = None,
) -> ValidationOutcome:
    """
    Run every security check against a single path.

    Args:
        input_path: Path to validate
        config: SecurityConfig, a mapping of overrides, or None for defaults

    Returns:
        ValidationOutcome; rejections carry exactly one code
    """
    cfg = merge_security_config(config)
    path_str = str(input_path)

    if has_path_traversal(path_str):
        return _reject(
            SecurityErrorCode.PATH_TRAVERSAL,
            path_str,
            f'Path traversal blocked: "{path_str}" escapes the working directory',
        )

    if is_sensitive_file(path_str, cfg.sensitive_patterns):
        return _reject(
            SecurityErrorCode.SENSITIVE_FILE,
            path_str,
            f'Access to sensitive file denied: "{path_str}" matches a sensitive file pattern',
        )

    if not is_within_allowed_directory(path_str, cfg.allowed_directories):
        return _reject(
            SecurityErrorCode.ACCESS_DENIED,
            path_str,
            f'Access denied: "{path_str}" is not inside an allowed directory',
        )

    if not cfg.allow_symlinks and is_symlink(path_str):
        return _reject(
            SecurityErrorCode.SYMLINK_DETECTED,
            path_str,
            f'Symbolic link access denied: "{path_str}" is a symbolic link',
        )

    return ValidationOutcome.accept()


def validate_paths(
    paths: Iterable[PathLike],
    config: SecurityConfig | Mapping[str, Any] | None = None,
) -> ValidationOutcome:
    """Validate paths in order and return the first rejection (or acceptance)."""
    cfg = merge_security_config(config)
    for path in paths:
        outcome = validate_path(path, cfg)
        if not outcome.ok:
            return outcome
    return ValidationOutcome.accept()


def enforce_size_limit(file_path: PathLike, size: int, max_size: int) -> None:
    """
    Raise SIZE_EXCEEDED if ``size`` is over ``max_size``.

    ``size`` comes from a stat result so content is never read to find out.
    """
    if size > max_size:
        raise SecurityError(
            f'File too large: "{file_path}" is {format_bytes(size)}, '
            f"limit is {format_bytes(max_size)}",
            SecurityErrorCode.SIZE_EXCEEDED,
            str(file_path),
            actual_size=size,
            limit=max_size,
        )


def validate_file_size(file_path: PathLike, max_size: Optional[int] = None) -> None:
    """
    Stat a file and enforce the size ceiling.

    Missing or unreadable files are left for the read step to report.
    """
    if max_size is None:
        max_size = SecurityConfig().max_file_size
    try:
        size = os.stat(file_path).st_size
    except OSError:
        return
    enforce_size_limit(file_path, size, max_size)


def validate_file_count(count: int, max_files: Optional[int] = None) -> None:
    """Raise FILE_LIMIT_EXCEEDED if ``count`` is over ``max_files``."""
    if max_files is None:
        max_files = SecurityConfig().max_files
    if count > max_files:
        raise SecurityError(
            f"Too many files: found {count}, limit is {max_files}",
            SecurityErrorCode.FILE_LIMIT_EXCEEDED,
            limit=max_files,
        )


def format_bytes(num_bytes: int) -> str:
    """Format a byte count as a human-readable string (``1.5 MB``)."""
    if num_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB", "TB"]
    value = float(num_bytes)
    index = 0
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {units[index]}"
