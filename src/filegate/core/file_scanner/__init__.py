"""
Directory scanning for filegate.

Provides recursive enumeration with include/exclude glob filtering,
language detection tables and the result models shared by the loaders.
"""

from .interfaces import DirectoryScannerInterface
from .language_registry import LanguageRegistry, get_default_registry
from .models import BatchResult, FileContent, ReadDiagnostic
from .scanner import DEFAULT_INCLUDE_PATTERNS, DirectoryScanner

__all__ = [
    # Main classes
    "DirectoryScanner",
    "DirectoryScannerInterface",
    # Result models
    "BatchResult",
    "FileContent",
    "ReadDiagnostic",
    # Language registry
    "LanguageRegistry",
    "get_default_registry",
    # Constants
    "DEFAULT_INCLUDE_PATTERNS",
]
