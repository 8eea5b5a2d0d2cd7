"""
Data models for file loading results.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass
class FileContent:
    """
    A file that passed validation and was read as text.

    Attributes:
        path: Path relative to the root the caller queried with, forward slashes
        absolute_path: Canonical absolute path, forward slashes
        content: File content as UTF-8 string
        size: File size in bytes (from stat)
        language: Detected language name, None if unknown
    """

    path: str
    absolute_path: str
    content: str
    size: int
    language: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ReadDiagnostic:
    """A file skipped by a batch load, with the reason it was skipped."""

    path: str
    message: str
    code: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class BatchResult:
    """Successful reads (in input order) and per-file diagnostics."""

    files: list[FileContent] = field(default_factory=list)
    diagnostics: list[ReadDiagnostic] = field(default_factory=list)

    @property
    def has_failures(self) -> bool:
        return bool(self.diagnostics)
