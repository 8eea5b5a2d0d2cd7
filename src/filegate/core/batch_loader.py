"""
Batch and directory loading for filegate.

Fans a list of paths out to ``load_file`` on a fixed-size thread pool.
Per-file failures become ReadDiagnostic entries instead of exceptions;
only failures that concern the whole operation (missing root, rejected
root, file-count ceiling) propagate.
"""

import asyncio
import logging
import os
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path, PurePath
from typing import Any, Optional

from filegate.core.config import (
    DirectoryReadOptions,
    ReaderConfig,
    SecurityConfig,
    merge_security_config,
)
from filegate.core.errors import FilegateError, ReadErrorCode
from filegate.core.file_loader import load_file
from filegate.core.file_scanner import (
    BatchResult,
    DirectoryScanner,
    LanguageRegistry,
    ReadDiagnostic,
)
from filegate.core.path_validator import validate_path
from filegate.core.patterns import is_binary_file

logger = logging.getLogger(__name__)

# Number of diagnostics spelled out in the warning summary
SUMMARY_LIMIT = 5


def summarize_diagnostics(diagnostics: list[ReadDiagnostic], limit: int = SUMMARY_LIMIT) -> str:
    """Render the first ``limit`` diagnostics and a count of the rest."""
    lines = [f"Skipped {len(diagnostics)} file(s):"]
    for diagnostic in diagnostics[:limit]:
        lines.append(f"  - {diagnostic.path}: {diagnostic.message}")
    if len(diagnostics) > limit:
        lines.append(f"  ... and {len(diagnostics) - limit} more")
    return "\n".join(lines)


def _to_diagnostic(path: str, error: Exception) -> ReadDiagnostic:
    code = getattr(error, "code", None)
    if code is None:
        code = ReadErrorCode.READ_FAILED
    return ReadDiagnostic(path=path, message=str(error), code=getattr(code, "value", str(code)))


async def load_many(
    paths: Iterable[str | PurePath],
    config: SecurityConfig | Mapping[str, Any] | None = None,
    max_workers: Optional[int] = None,
    registry: LanguageRegistry | None = None,
) -> BatchResult:
    """
    Load many files concurrently, isolating per-file failures.

    Binary-extension paths are skipped without a diagnostic. Every other
    failure is recorded as a ReadDiagnostic; this coroutine does not raise
    for individual files.

    Args:
        paths: Paths to load, relative to the working directory
        config: Security settings applied to every file
        max_workers: Size of the worker pool (default from ReaderConfig)
        registry: Language registry for detection

    Returns:
        BatchResult with successes in input order
    """
    cfg = merge_security_config(config)
    workers = max_workers if max_workers is not None else ReaderConfig().max_workers

    targets: list[str] = []
    for path in paths:
        path_str = str(path)
        if is_binary_file(path_str):
            logger.debug(f"Skipping binary file: {path_str}")
            continue
        targets.append(path_str)

    result = BatchResult()
    if not targets:
        return result

    loop = asyncio.get_running_loop()
    with ThreadPoolExecutor(max_workers=max(1, min(workers, len(targets)))) as executor:
        futures = [
            loop.run_in_executor(executor, load_file, path_str, cfg, registry)
            for path_str in targets
        ]
        outcomes = await asyncio.gather(*futures, return_exceptions=True)

    for path_str, outcome in zip(targets, outcomes):
        if isinstance(outcome, FilegateError):
            result.diagnostics.append(_to_diagnostic(path_str, outcome))
        elif isinstance(outcome, Exception):
            logger.error(f"Unexpected error loading {path_str}: {outcome}")
            result.diagnostics.append(_to_diagnostic(path_str, outcome))
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            result.files.append(outcome)

    if result.diagnostics:
        logger.warning(summarize_diagnostics(result.diagnostics))

    return result


async def load_directory(
    directory: str | PurePath,
    options: Optional[DirectoryReadOptions] = None,
    max_workers: Optional[int] = None,
    scanner: Optional[DirectoryScanner] = None,
    registry: LanguageRegistry | None = None,
) -> BatchResult:
    """
    Validate, scan and load a directory.

    Returned ``path`` values (and diagnostic paths) are relative to
    ``directory`` and use forward slashes.

    Raises:
        SecurityError: If the directory path is rejected or the scan exceeds max_files
        ReadError: If the directory is missing or not a directory
    """
    opts = options or DirectoryReadOptions()
    cfg = merge_security_config(opts.security_config)
    dir_str = str(directory)

    validate_path(dir_str, cfg).raise_if_rejected()

    scanner = scanner or DirectoryScanner()
    max_files = opts.max_files if opts.max_files is not None else cfg.max_files
    relative_paths = scanner.scan(
        dir_str, include=opts.include, exclude=opts.exclude, max_files=max_files
    )

    joined = {os.path.join(dir_str, rel): rel for rel in relative_paths}
    result = await load_many(list(joined), cfg, max_workers=max_workers, registry=registry)

    root = Path(dir_str).resolve()
    for file_content in result.files:
        file_content.path = os.path.relpath(file_content.absolute_path, root).replace("\\", "/")
    for diagnostic in result.diagnostics:
        diagnostic.path = joined.get(diagnostic.path, diagnostic.path)

    logger.info(
        "Directory read completed",
        extra={
            "directory": dir_str,
            "total_files": len(result.files),
            "skipped_files": len(result.diagnostics),
        },
    )
    return result
