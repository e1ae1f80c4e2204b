"""
Test cases for dependency hashing and key prefix assembly
"""

import hashlib
import os
import sys

import pytest
from unittest.mock import patch

from setup_python_cache.cache import keys as keys_module
from setup_python_cache.cache.keys import (
    build_primary_key,
    build_restore_key_prefix,
    hash_files,
    hash_files_with_fallback,
    match_files,
)
from setup_python_cache.toolchain.environment import EnvironmentFacts


def write(root, relative_path, content: bytes):
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


class TestHashFiles:
    """Test cases for hash_files"""

    def test_no_match_returns_empty(self, tmp_path):
        assert hash_files("**/requirements.txt", str(tmp_path)) == ""

    def test_hash_is_stable(self, tmp_path):
        write(tmp_path, "requirements.txt", b"requests==2.31.0\n")
        write(tmp_path, "sub/requirements.txt", b"pytest\n")

        first = hash_files("**/requirements.txt", str(tmp_path))
        second = hash_files("**/requirements.txt", str(tmp_path))

        assert first == second
        assert len(first) == 64

    def test_hash_matches_digest_of_file_digests(self, tmp_path):
        a = write(tmp_path, "a/requirements.txt", b"numpy\n")
        b = write(tmp_path, "b/requirements.txt", b"pandas\n")

        expected = hashlib.sha256()
        for path in sorted([str(a), str(b)]):
            with open(path, "rb") as f:
                expected.update(hashlib.sha256(f.read()).digest())

        assert hash_files("**/requirements.txt", str(tmp_path)) == expected.hexdigest()

    def test_single_byte_change_changes_hash(self, tmp_path):
        path = write(tmp_path, "requirements.txt", b"requests==2.31.0\n")
        before = hash_files("**/requirements.txt", str(tmp_path))

        path.write_bytes(b"requests==2.31.1\n")
        after = hash_files("**/requirements.txt", str(tmp_path))

        assert before != after

    def test_independent_of_pattern_order(self, tmp_path):
        write(tmp_path, "requirements.txt", b"flask\n")
        write(tmp_path, "requirements-dev.txt", b"pytest\n")

        forward = hash_files(["requirements.txt", "requirements-dev.txt"], str(tmp_path))
        backward = hash_files(["requirements-dev.txt", "requirements.txt"], str(tmp_path))

        assert forward == backward

    def test_exclude_pattern(self, tmp_path):
        write(tmp_path, "requirements.txt", b"flask\n")
        write(tmp_path, "vendor/requirements.txt", b"ignored\n")

        matched = match_files(["**/requirements.txt", "!vendor/**"], str(tmp_path))

        assert matched == [os.path.realpath(str(tmp_path / "requirements.txt"))]

    def test_files_outside_root_are_ignored(self, tmp_path):
        workspace = tmp_path / "workspace"
        workspace.mkdir()
        write(tmp_path, "requirements.txt", b"outside\n")

        assert match_files("../requirements.txt", str(workspace)) == []

    def test_file_on_another_drive_is_ignored(self, tmp_path):
        write(tmp_path, "requirements.txt", b"flask\n")

        with patch.object(keys_module.os.path, "commonpath",
                          side_effect=ValueError("Paths don't have the same drive")):
            assert match_files("requirements.txt", str(tmp_path)) == []

    @pytest.mark.skipif(sys.version_info < (3, 11), reason="glob include_hidden needs Python 3.11")
    def test_dot_directories_are_searched(self, tmp_path):
        write(tmp_path, ".ci/requirements.txt", b"pytest\n")
        write(tmp_path, "requirements.txt", b"flask\n")

        matched = match_files("**/requirements.txt", str(tmp_path))

        assert os.path.realpath(str(tmp_path / ".ci" / "requirements.txt")) in matched
        assert len(matched) == 2

    def test_directories_are_not_hashed(self, tmp_path):
        (tmp_path / "requirements.txt").mkdir()
        assert hash_files("requirements.txt", str(tmp_path)) == ""


class TestFallback:
    """Test cases for the backup pattern"""

    def test_primary_match_wins(self, tmp_path):
        write(tmp_path, "requirements.txt", b"flask\n")
        write(tmp_path, "pyproject.toml", b"[project]\n")

        result = hash_files_with_fallback("**/requirements.txt", "**/pyproject.toml", str(tmp_path))

        assert result == hash_files("**/requirements.txt", str(tmp_path))

    def test_backup_used_when_primary_matches_nothing(self, tmp_path):
        write(tmp_path, "pyproject.toml", b"[project]\nname='demo'\n")
        write(tmp_path, "pkg/pyproject.toml", b"[project]\nname='pkg'\n")

        result = hash_files_with_fallback("**/requirements.txt", "**/pyproject.toml", str(tmp_path))

        assert result
        assert result == hash_files("**/pyproject.toml", str(tmp_path))

    def test_empty_when_nothing_matches(self, tmp_path):
        assert hash_files_with_fallback("**/requirements.txt", "**/pyproject.toml", str(tmp_path)) == ""


class TestKeyPrefix:
    """Test cases for build_restore_key_prefix"""

    def test_linux_includes_distribution(self, linux_facts):
        prefix = build_restore_key_prefix(linux_facts, "3.11.4", "pip")
        assert prefix == "setup-python-Linux-x64-22.04-ubuntu-python-3.11.4-pip"

    def test_macos_has_no_distribution(self, macos_facts):
        prefix = build_restore_key_prefix(macos_facts, "3.12.1", "pip")
        assert prefix == "setup-python-macOS-arm64-python-3.12.1-pip"

    def test_windows_has_no_distribution(self):
        facts = EnvironmentFacts(
            os_family="windows",
            arch="x64",
            runner_os="Windows",
            distro_name="ignored",
            distro_version="1.0"
        )
        assert build_restore_key_prefix(facts, "3.10.11", "pip") == "setup-python-Windows-x64-python-3.10.11-pip"

    def test_custom_prefix(self, macos_facts):
        prefix = build_restore_key_prefix(macos_facts, "3.12.1", "pip", prefix="custom")
        assert prefix.startswith("custom-macOS-")

    @pytest.mark.parametrize("fingerprint,expected", [
        ("abc123", "base-abc123"),
        ("", "base-"),
    ])
    def test_primary_key(self, fingerprint, expected):
        assert build_primary_key("base", fingerprint) == expected
