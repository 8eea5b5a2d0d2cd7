"""
DirectoryScanner implementation for recursive directory enumeration.
"""

import logging
from pathlib import Path
from typing import Optional

import pathspec

from filegate.core.config import SecurityConfig
from filegate.core.errors import ReadError, ReadErrorCode, SecurityError, SecurityErrorCode
from filegate.core.patterns import (
    DEFAULT_EXCLUDE_PATTERNS,
    binary_exclude_patterns,
    is_binary_file,
)

from .interfaces import DirectoryScannerInterface

logger = logging.getLogger(__name__)

DEFAULT_INCLUDE_PATTERNS: tuple[str, ...] = ("**/*",)


class _FileLimitReached(Exception):
    """Internal signal to stop walking once the ceiling is crossed."""


def _compile(patterns: list[str]) -> pathspec.PathSpec:
    return pathspec.PathSpec.from_lines(pathspec.patterns.GitWildMatchPattern, patterns)


def _anchor_include(pattern: str) -> str:
    """Anchor slash-free include globs at the scan root (``*.ts`` is root-level only)."""
    if pattern.startswith(("/", "!")) or "/" in pattern.rstrip("/"):
        return pattern
    return "/" + pattern


class DirectoryScanner(DirectoryScannerInterface):
    """
    Concrete implementation of DirectoryScannerInterface.

    Enumerates files with:
    - Include globs (default: everything)
    - Exclude globs merged with the default excludes and one exclude per
      binary extension
    - Hidden entries and symbolic links never traversed
    - A file-count ceiling enforced while walking, before any content read
    """

    def __init__(self, default_excludes: Optional[list[str]] = None):
        """
        Initialize the DirectoryScanner.

        Args:
            default_excludes: Exclude globs always applied. If None, uses
                DEFAULT_EXCLUDE_PATTERNS.
        """
        self._default_excludes: list[str] = (
            list(default_excludes)
            if default_excludes is not None
            else list(DEFAULT_EXCLUDE_PATTERNS)
        )

    def build_exclude_patterns(self, exclude: Optional[list[str]] = None) -> list[str]:
        """Caller excludes, then the defaults, then the binary-extension excludes."""
        return [*(exclude or []), *self._default_excludes, *binary_exclude_patterns()]

    def scan(
        self,
        root_path: Path | str,
        include: Optional[list[str]] = None,
        exclude: Optional[list[str]] = None,
        max_files: Optional[int] = None,
    ) -> list[str]:
        """
        Enumerate files under ``root_path`` that pass the include/exclude filters.

        Returns:
            Sorted root-relative paths using forward slashes
        """
        root = Path(root_path)

        if not root.exists():
            raise ReadError(
                f'Directory does not exist: "{root_path}"', ReadErrorCode.NOT_FOUND, str(root_path)
            )
        if not root.is_dir():
            raise ReadError(
                f'Path is not a directory: "{root_path}"',
                ReadErrorCode.NOT_A_DIRECTORY,
                str(root_path),
            )

        root = root.resolve()
        limit = max_files if max_files is not None else SecurityConfig().max_files

        include_spec = _compile(
            [_anchor_include(p) for p in include or DEFAULT_INCLUDE_PATTERNS]
        )
        exclude_spec = _compile(self.build_exclude_patterns(exclude))

        found: list[str] = []
        try:
            self._scan_directory(root, root, include_spec, exclude_spec, found, limit)
        except _FileLimitReached:
            logger.warning(f"File limit exceeded scanning {root}: more than {limit} files")
            raise SecurityError(
                f'Too many files: "{root_path}" contains more than {limit} matching files',
                SecurityErrorCode.FILE_LIMIT_EXCEEDED,
                str(root_path),
                limit=limit,
            ) from None

        found.sort()
        logger.debug(f"Scanned {root}: {len(found)} files matched")
        return found

    def _scan_directory(
        self,
        current_path: Path,
        root: Path,
        include_spec: pathspec.PathSpec,
        exclude_spec: pathspec.PathSpec,
        found: list[str],
        limit: int,
    ) -> None:
        """Recursively collect matching files below ``current_path``."""
        try:
            entries = sorted(current_path.iterdir(), key=lambda p: p.name)
        except PermissionError as e:
            logger.warning(f"Permission denied accessing directory: {current_path} - {e}")
            return
        except OSError as e:
            logger.warning(f"Error accessing directory: {current_path} - {e}")
            return

        for entry in entries:
            if entry.name.startswith("."):
                continue

            if entry.is_symlink():
                logger.debug(f"Skipping symlink: {entry}")
                continue

            rel_path = entry.relative_to(root).as_posix()

            if entry.is_dir():
                # A directory matched as a whole excludes everything below it
                if exclude_spec.match_file(rel_path + "/"):
                    logger.debug(f"Ignoring directory: {rel_path}")
                    continue
                self._scan_directory(entry, root, include_spec, exclude_spec, found, limit)
            elif entry.is_file():
                if exclude_spec.match_file(rel_path) or is_binary_file(entry.name):
                    continue
                if not include_spec.match_file(rel_path):
                    continue
                found.append(rel_path)
                if len(found) > limit:
                    raise _FileLimitReached()
