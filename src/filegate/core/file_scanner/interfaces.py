"""
Abstract interfaces for directory scanning.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional


class DirectoryScannerInterface(ABC):
    """
    Abstract interface for directory enumeration.

    Implementations list the files under a root that survive include and
    exclude filtering, without reading any file content.
    """

    @abstractmethod
    def scan(
        self,
        root_path: Path | str,
        include: Optional[list[str]] = None,
        exclude: Optional[list[str]] = None,
        max_files: Optional[int] = None,
    ) -> list[str]:
        """
        Enumerate files under a directory.

        Args:
            root_path: Directory to enumerate
            include: Glob patterns a file must match (default: everything).
                Patterns without a slash are anchored at the root, so
                ``*.ts`` lists root-level files only; use ``**/*.ts`` to
                match at any depth.
            exclude: Extra glob patterns to exclude, on top of the defaults.
                These follow gitignore rules: a slash-free pattern such as
                ``*.log`` matches at any depth.
            max_files: Ceiling on the number of files returned

        Returns:
            Sorted root-relative paths using forward slashes

        Raises:
            ReadError: If the root is missing or not a directory
            SecurityError: FILE_LIMIT_EXCEEDED if the ceiling is crossed
        """
        pass
