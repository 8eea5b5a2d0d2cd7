"""
filegate - secure, read-only file access for AI tooling.

Validates every path against traversal, sensitive-file, allow-list and
symlink checks before any content is read.
"""

__version__ = "0.1.0"
