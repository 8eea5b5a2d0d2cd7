"""
Tests for batch and directory loading.
"""

import threading
import time
from pathlib import Path
from unittest.mock import patch

import pytest

from filegate.core import batch_loader
from filegate.core.batch_loader import load_directory, load_many, summarize_diagnostics
from filegate.core.config import DirectoryReadOptions, SecurityConfig
from filegate.core.errors import ReadError, ReadErrorCode, SecurityError, SecurityErrorCode
from filegate.core.file_scanner import ReadDiagnostic


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write(root: Path, rel: str, content: str = "content\n") -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


class TestLoadMany:
    @pytest.mark.asyncio
    async def test_one_missing_file_becomes_diagnostic(self, workspace):
        _write(workspace, "a.txt", "A")
        _write(workspace, "c.txt", "C")

        result = await load_many(["a.txt", "b.txt", "c.txt"])

        assert [f.path for f in result.files] == ["a.txt", "c.txt"]
        assert [f.content for f in result.files] == ["A", "C"]
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].path == "b.txt"
        assert result.diagnostics[0].code == "NOT_FOUND"
        assert result.has_failures is True

    @pytest.mark.asyncio
    async def test_input_order_is_preserved(self, workspace):
        names = [f"file_{i:02d}.txt" for i in range(20)]
        for name in reversed(names):
            _write(workspace, name, name)

        result = await load_many(names, max_workers=4)

        assert [f.path for f in result.files] == names
        assert result.has_failures is False

    @pytest.mark.asyncio
    async def test_concurrent_reads_never_exceed_max_workers(self, workspace):
        names = [f"file_{i:02d}.txt" for i in range(20)]
        for name in names:
            _write(workspace, name, name)

        real_load_file = batch_loader.load_file
        lock = threading.Lock()
        counters = {"inflight": 0, "peak": 0}

        def counting_load_file(*args, **kwargs):
            with lock:
                counters["inflight"] += 1
                counters["peak"] = max(counters["peak"], counters["inflight"])
            try:
                time.sleep(0.02)
                return real_load_file(*args, **kwargs)
            finally:
                with lock:
                    counters["inflight"] -= 1

        with patch("filegate.core.batch_loader.load_file", side_effect=counting_load_file):
            result = await load_many(names, max_workers=3)

        assert [f.path for f in result.files] == names
        assert 1 <= counters["peak"] <= 3

    @pytest.mark.asyncio
    async def test_binary_paths_are_skipped_silently(self, workspace):
        _write(workspace, "a.txt")
        (workspace / "logo.png").write_bytes(b"\x89PNG")

        result = await load_many(["a.txt", "logo.png", "missing.jpg"])

        assert [f.path for f in result.files] == ["a.txt"]
        assert result.diagnostics == []

    @pytest.mark.asyncio
    async def test_security_rejections_become_diagnostics(self, workspace):
        _write(workspace, ".env", "KEY=1")
        _write(workspace, "a.txt")

        result = await load_many([".env", "a.txt", "../outside.txt"])

        assert [f.path for f in result.files] == ["a.txt"]
        assert [(d.path, d.code) for d in result.diagnostics] == [
            (".env", "SENSITIVE_FILE"),
            ("../outside.txt", "PATH_TRAVERSAL"),
        ]

    @pytest.mark.asyncio
    async def test_size_limit_applies_per_file(self, workspace):
        _write(workspace, "small.txt", "x")
        _write(workspace, "big.txt", "x" * 100)

        result = await load_many(["small.txt", "big.txt"], {"max_file_size": 10})

        assert [f.path for f in result.files] == ["small.txt"]
        assert result.diagnostics[0].code == "SIZE_EXCEEDED"

    @pytest.mark.asyncio
    async def test_unexpected_errors_become_diagnostics(self, workspace):
        _write(workspace, "a.txt")

        with patch("filegate.core.batch_loader.load_file", side_effect=RuntimeError("boom")):
            result = await load_many(["a.txt"])

        assert result.files == []
        assert result.diagnostics[0].message == "boom"
        assert result.diagnostics[0].code == "READ_FAILED"

    @pytest.mark.asyncio
    async def test_empty_input(self, workspace):
        result = await load_many([])

        assert result.files == []
        assert result.diagnostics == []


class TestLoadDirectory:
    @pytest.mark.asyncio
    async def test_paths_are_relative_to_directory(self, workspace):
        _write(workspace, "proj/a.ts")
        _write(workspace, "proj/src/b.ts")
        _write(workspace, "proj/node_modules/c.ts")

        result = await load_directory("proj")

        assert [f.path for f in result.files] == ["a.ts", "src/b.ts"]
        assert result.files[0].language == "TypeScript"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("directory", ["proj", "./proj", "proj/"])
    async def test_absolute_path_round_trip(self, workspace, directory):
        _write(workspace, "proj/src/deep/b.ts")

        result = await load_directory(directory)

        root = Path(directory).resolve()
        for f in result.files:
            assert (root / f.path).as_posix() == f.absolute_path

    @pytest.mark.asyncio
    async def test_include_and_exclude_options(self, workspace):
        _write(workspace, "proj/a.ts")
        _write(workspace, "proj/a.test.ts")
        _write(workspace, "proj/b.js")

        options = DirectoryReadOptions(include=["**/*.ts"], exclude=["**/*.test.ts"])
        result = await load_directory("proj", options)

        assert [f.path for f in result.files] == ["a.ts"]

    @pytest.mark.asyncio
    async def test_sensitive_files_in_directory_become_diagnostics(self, workspace):
        _write(workspace, "proj/app.py")
        _write(workspace, "proj/config/credentials.json", "{}")

        result = await load_directory("proj")

        assert [f.path for f in result.files] == ["app.py"]
        assert [(d.path, d.code) for d in result.diagnostics] == [
            ("config/credentials.json", "SENSITIVE_FILE")
        ]

    @pytest.mark.asyncio
    async def test_file_limit_aborts_before_any_read(self, workspace):
        for name in ("a.txt", "b.txt", "c.txt"):
            _write(workspace, f"proj/{name}")

        with patch("filegate.core.batch_loader.load_file") as mock_load:
            with pytest.raises(SecurityError) as exc_info:
                await load_directory("proj", DirectoryReadOptions(max_files=2))

        mock_load.assert_not_called()
        assert exc_info.value.code == SecurityErrorCode.FILE_LIMIT_EXCEEDED

    @pytest.mark.asyncio
    async def test_file_limit_falls_back_to_security_config(self, workspace):
        for name in ("a.txt", "b.txt"):
            _write(workspace, f"proj/{name}")

        options = DirectoryReadOptions(security_config=SecurityConfig(max_files=1))
        with pytest.raises(SecurityError) as exc_info:
            await load_directory("proj", options)

        assert exc_info.value.limit == 1

    @pytest.mark.asyncio
    async def test_directory_path_is_validated(self, workspace):
        with pytest.raises(SecurityError) as exc_info:
            await load_directory("../elsewhere")

        assert exc_info.value.code == SecurityErrorCode.PATH_TRAVERSAL

    @pytest.mark.asyncio
    async def test_missing_directory(self, workspace):
        with pytest.raises(ReadError) as exc_info:
            await load_directory("missing")

        assert exc_info.value.code == ReadErrorCode.NOT_FOUND

    @pytest.mark.asyncio
    async def test_file_instead_of_directory(self, workspace):
        _write(workspace, "a.txt")

        with pytest.raises(ReadError) as exc_info:
            await load_directory("a.txt")

        assert exc_info.value.code == ReadErrorCode.NOT_A_DIRECTORY


class TestSummarizeDiagnostics:
    def test_lists_first_entries_and_counts_the_rest(self):
        diagnostics = [ReadDiagnostic(path=f"f{i}.txt", message="nope") for i in range(7)]

        summary = summarize_diagnostics(diagnostics)

        lines = summary.splitlines()
        assert lines[0] == "Skipped 7 file(s):"
        assert lines[1] == "  - f0.txt: nope"
        assert len(lines) == 7
        assert lines[-1] == "  ... and 2 more"

    def test_short_list_has_no_remainder_line(self):
        diagnostics = [ReadDiagnostic(path="a.txt", message="missing")]

        assert "more" not in summarize_diagnostics(diagnostics)
