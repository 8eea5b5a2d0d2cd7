"""
Tests for path validation: traversal, sensitive files, allow-lists and symlinks.
"""

import os
import sys

import pytest

from filegate.core.config import SecurityConfig, merge_security_config
from filegate.core.errors import SecurityError, SecurityErrorCode
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


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Use a temporary directory as the working directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestHasPathTraversal:
    def test_parent_reference_is_traversal(self, workspace):
        assert has_path_traversal("../../etc/passwd") is True

    def test_absolute_path_outside_base_is_traversal(self, workspace):
        outside = os.path.dirname(str(workspace))
        assert has_path_traversal(os.path.join(outside, "other.txt")) is True

    def test_double_dots_inside_filename_are_allowed(self, workspace):
        assert has_path_traversal("./vendor..lib.js") is False
        assert has_path_traversal("src/a..b/c.ts") is False

    def test_embedded_parent_segment_is_traversal(self, workspace):
        # Resolves inside the base but still carries a ".." segment
        assert has_path_traversal("src/../src/app.py") is True

    def test_backslash_parent_segment_is_traversal(self, workspace):
        assert has_path_traversal("src\\..\\..\\secret.txt") is True

    def test_explicit_base_path(self, tmp_path):
        base = tmp_path / "base"
        assert has_path_traversal("inner/file.txt", base) is False
        assert has_path_traversal("../file.txt", base) is True

    def test_absolute_path_inside_base_is_allowed(self, workspace):
        assert has_path_traversal(os.path.join(os.getcwd(), "src", "app.py")) is False


class TestIsSensitiveFile:
    @pytest.mark.parametrize(
        "path",
        [
            ".env",
            ".env.production",
            "config/.env",
            "config/credentials.json",
            "keys/server.pem",
            "private.key",
            "home/.ssh/id_rsa",
            ".ssh/config",
            "app/secrets.yaml",
            "db/password.txt",
            "access_token.json",
            "repo/.git/config",
            "data/app.sqlite",
            ".aws/credentials",
            "docker-compose.yml",
            "deploy/docker-compose.prod.yaml",
        ],
    )
    def test_sensitive_paths(self, path):
        assert is_sensitive_file(path) is True

    @pytest.mark.parametrize(
        "path",
        ["src/index.ts", "README.md", "package.json", "docs/environment.md", "lib/keyboard.py"],
    )
    def test_ordinary_paths(self, path):
        assert is_sensitive_file(path) is False

    def test_matching_is_case_insensitive(self):
        assert is_sensitive_file(".ENV") is True
        assert is_sensitive_file("Config/Credentials.JSON") is True

    def test_windows_separators(self):
        assert is_sensitive_file("config\\.env") is True

    def test_absolute_paths(self):
        assert is_sensitive_file("/home/user/project/.env") is True
        assert is_sensitive_file("C:\\Users\\dev\\.ssh\\id_rsa") is True

    def test_custom_patterns(self):
        assert is_sensitive_file("notes/plan.private", ["*.private"]) is True
        assert is_sensitive_file("notes/plan.txt", ["*.private"]) is False

    @pytest.mark.parametrize(
        "path",
        [
            "src/tokenizer/lexer.py",
            "app/password_reset/views.py",
            "lib/credentials_service/api.ts",
            "certs.key/readme.md",
        ],
    )
    def test_sensitive_looking_directories_do_not_taint_children(self, path):
        assert is_sensitive_file(path) is False

    def test_sensitive_looking_directory_files_still_allowed_by_validate_path(self, workspace):
        assert validate_path("src/tokenizer/lexer.py").ok is True

    @pytest.mark.parametrize(
        "path", [".ssh/id_rsa", "config/credentials.json", "home/.aws/credentials", ".ssh/known_hosts"]
    )
    def test_directory_patterns_cover_their_contents(self, path):
        assert is_sensitive_file(path) is True

    def test_star_does_not_cross_separators(self):
        assert is_sensitive_file("a/b/c.txt", ["a/*"]) is False
        assert is_sensitive_file("a/b", ["a/*"]) is True
        assert is_sensitive_file("a/b/c.txt", ["a/**"]) is True


class TestIsWithinAllowedDirectory:
    def test_empty_allow_list_permits_everything(self):
        assert is_within_allowed_directory("/anywhere/file.txt", []) is True

    def test_sibling_with_shared_prefix_is_outside(self):
        assert is_within_allowed_directory("/var/www-secret/x", ["/var/www"]) is False

    def test_child_is_inside(self):
        assert is_within_allowed_directory("/var/www/x", ["/var/www"]) is True

    def test_directory_itself_is_inside(self):
        assert is_within_allowed_directory("/var/www", ["/var/www"]) is True

    def test_any_allowed_directory_matches(self):
        assert is_within_allowed_directory("/srv/app/x", ["/var/www", "/srv/app"]) is True

    def test_relative_paths_resolve_against_cwd(self, workspace):
        (workspace / "allowed").mkdir()
        assert is_within_allowed_directory("allowed/a.txt", [str(workspace / "allowed")]) is True
        assert is_within_allowed_directory("other/a.txt", [str(workspace / "allowed")]) is False


class TestValidatePath:
    def test_accepts_ordinary_file(self, workspace):
        (workspace / "src").mkdir()
        (workspace / "src" / "app.py").write_text("print('hi')\n")

        outcome = validate_path("src/app.py")

        assert outcome.ok is True
        assert outcome.code is None

    def test_missing_file_is_not_a_rejection(self, workspace):
        assert validate_path("missing.txt").ok is True

    def test_traversal(self, workspace):
        outcome = validate_path("../../etc/passwd")

        assert outcome.ok is False
        assert outcome.code == SecurityErrorCode.PATH_TRAVERSAL
        assert outcome.code == "PATH_TRAVERSAL"
        assert outcome.path == "../../etc/passwd"

    def test_sensitive_file(self, workspace):
        outcome = validate_path(".env")
        assert outcome.code == SecurityErrorCode.SENSITIVE_FILE

    def test_traversal_wins_over_sensitive(self, workspace):
        outcome = validate_path("../.env")
        assert outcome.code == SecurityErrorCode.PATH_TRAVERSAL

    def test_outside_allowed_directory(self, workspace):
        (workspace / "allowed").mkdir()
        config = {"allowed_directories": [str(workspace / "allowed")]}

        assert validate_path("allowed/a.txt", config).ok is True
        outcome = validate_path("other/a.txt", config)
        assert outcome.code == SecurityErrorCode.ACCESS_DENIED

    def test_custom_sensitive_pattern_extends_defaults(self, workspace):
        config = {"sensitive_patterns": ["*.private"]}

        assert validate_path("notes.private", config).code == SecurityErrorCode.SENSITIVE_FILE
        assert validate_path(".env", config).code == SecurityErrorCode.SENSITIVE_FILE

    def test_accepts_security_config_instance(self, workspace):
        config = SecurityConfig(sensitive_patterns=("*.private",))
        assert validate_path("a.private", config).ok is False

    def test_unknown_config_key(self, workspace):
        with pytest.raises(ValueError, match="bogus"):
            validate_path("a.txt", {"bogus": True})

    def test_raise_if_rejected(self, workspace):
        with pytest.raises(SecurityError) as exc_info:
            validate_path(".env").raise_if_rejected()

        assert exc_info.value.code == SecurityErrorCode.SENSITIVE_FILE
        assert exc_info.value.path == ".env"

    def test_raise_if_rejected_noop_when_ok(self):
        ValidationOutcome.accept().raise_if_rejected()


@pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges on Windows")
class TestSymlinks:
    def test_is_symlink(self, workspace):
        (workspace / "target.txt").write_text("data")
        (workspace / "link.txt").symlink_to(workspace / "target.txt")

        assert is_symlink("link.txt") is True
        assert is_symlink("target.txt") is False
        assert is_symlink("missing.txt") is False

    def test_symlink_rejected_by_default(self, workspace):
        (workspace / "target.txt").write_text("data")
        (workspace / "link.txt").symlink_to(workspace / "target.txt")

        outcome = validate_path("link.txt")

        assert outcome.code == SecurityErrorCode.SYMLINK_DETECTED

    def test_symlink_allowed_when_configured(self, workspace):
        (workspace / "target.txt").write_text("data")
        (workspace / "link.txt").symlink_to(workspace / "target.txt")

        assert validate_path("link.txt", {"allow_symlinks": True}).ok is True

    def test_dangling_symlink_rejected(self, workspace):
        (workspace / "dangling.txt").symlink_to(workspace / "nowhere.txt")

        outcome = validate_path("dangling.txt")

        assert outcome.code == SecurityErrorCode.SYMLINK_DETECTED

    def test_sensitive_check_runs_before_symlink_check(self, workspace):
        (workspace / "target.txt").write_text("data")
        (workspace / ".env").symlink_to(workspace / "target.txt")

        assert validate_path(".env").code == SecurityErrorCode.SENSITIVE_FILE


class TestValidatePaths:
    def test_returns_first_rejection(self, workspace):
        outcome = validate_paths(["a.txt", ".env", "../b.txt"])

        assert outcome.ok is False
        assert outcome.path == ".env"
        assert outcome.code == SecurityErrorCode.SENSITIVE_FILE

    def test_all_valid(self, workspace):
        assert validate_paths(["a.txt", "src/b.ts"]).ok is True

    def test_empty(self, workspace):
        assert validate_paths([]).ok is True


class TestLimits:
    def test_validate_file_size_over_limit(self, tmp_path):
        big = tmp_path / "big.txt"
        big.write_bytes(b"x" * 2048)

        with pytest.raises(SecurityError) as exc_info:
            validate_file_size(big, max_size=1024)

        assert exc_info.value.code == SecurityErrorCode.SIZE_EXCEEDED
        assert exc_info.value.actual_size == 2048
        assert exc_info.value.limit == 1024
        assert "2 KB" in str(exc_info.value)

    def test_validate_file_size_at_limit(self, tmp_path):
        exact = tmp_path / "exact.txt"
        exact.write_bytes(b"x" * 1024)

        validate_file_size(exact, max_size=1024)

    def test_validate_file_size_missing_file(self, tmp_path):
        validate_file_size(tmp_path / "missing.txt", max_size=1)

    def test_validate_file_count(self):
        validate_file_count(500, max_files=500)
        with pytest.raises(SecurityError) as exc_info:
            validate_file_count(501, max_files=500)

        assert exc_info.value.code == SecurityErrorCode.FILE_LIMIT_EXCEEDED
        assert exc_info.value.limit == 500


class TestHelpers:
    @pytest.mark.parametrize(
        "num_bytes,expected",
        [
            (0, "0 Bytes"),
            (500, "500 Bytes"),
            (1024, "1 KB"),
            (1536, "1.5 KB"),
            (1048576, "1 MB"),
            (1073741824, "1 GB"),
        ],
    )
    def test_format_bytes(self, num_bytes, expected):
        assert format_bytes(num_bytes) == expected

    def test_normalize_path(self, workspace):
        expected = os.path.abspath("src/app.py").replace("\\", "/")
        assert normalize_path("src/app.py") == expected
        assert "\\" not in normalize_path("src/app.py")

    def test_merge_security_config_returns_instance_unchanged(self):
        config = SecurityConfig(max_files=3)
        assert merge_security_config(config) is config
