"""
Test cases for environment fact detection
"""

import pytest
from unittest.mock import patch

from setup_python_cache.toolchain import environment
from setup_python_cache.toolchain.environment import (
    EnvironmentFacts,
    detect_environment,
    detect_os_family,
    normalize_arch,
    parse_os_release,
)


UBUNTU_OS_RELEASE = '''PRETTY_NAME="Ubuntu 22.04.3 LTS"
NAME="Ubuntu"
VERSION_ID="22.04"
VERSION="22.04.3 LTS (Jammy Jellyfish)"
ID=ubuntu
ID_LIKE=debian
# comment
'''


class TestPlatformNormalization:
    """Test cases for OS family and architecture mapping"""

    @pytest.mark.parametrize("sys_platform,expected", [
        ("linux", "linux"),
        ("darwin", "macos"),
        ("win32", "windows"),
        ("cygwin", "windows"),
    ])
    def test_os_family(self, sys_platform, expected):
        assert detect_os_family(sys_platform) == expected

    @pytest.mark.parametrize("machine,expected", [
        ("x86_64", "x64"),
        ("AMD64", "x64"),
        ("aarch64", "arm64"),
        ("arm64", "arm64"),
        ("i686", "ia32"),
        ("armv7l", "arm"),
        ("riscv64", "riscv64"),
    ])
    def test_arch(self, machine, expected):
        assert normalize_arch(machine) == expected


class TestOsRelease:
    """Test cases for Linux distribution facts"""

    def test_parse_os_release(self):
        info = parse_os_release(UBUNTU_OS_RELEASE)

        assert info["ID"] == "ubuntu"
        assert info["VERSION_ID"] == "22.04"
        assert info["PRETTY_NAME"] == "Ubuntu 22.04.3 LTS"

    def test_get_linux_info_reads_first_available_file(self, tmp_path):
        missing = tmp_path / "missing"
        os_release = tmp_path / "os-release"
        os_release.write_text(UBUNTU_OS_RELEASE)

        environment.get_linux_info.cache.clear()
        try:
            with patch.object(environment, "OS_RELEASE_PATHS", (str(missing), str(os_release))):
                assert environment.get_linux_info() == ("ubuntu", "22.04")
        finally:
            environment.get_linux_info.cache.clear()

    def test_get_linux_info_without_os_release(self, tmp_path):
        environment.get_linux_info.cache.clear()
        try:
            with patch.object(environment, "OS_RELEASE_PATHS", (str(tmp_path / "missing"),)):
                assert environment.get_linux_info() == ("", "")
        finally:
            environment.get_linux_info.cache.clear()


class TestDetectEnvironment:
    """Test cases for detect_environment"""

    def test_linux_facts(self, monkeypatch):
        monkeypatch.setenv("RUNNER_OS", "Linux")
        with patch.object(environment, "detect_os_family", return_value="linux"), \
                patch.object(environment, "normalize_arch", return_value="x64"), \
                patch.object(environment, "get_linux_info", return_value=("ubuntu", "22.04")):
            facts = detect_environment()

        assert facts == EnvironmentFacts("linux", "x64", "Linux", "ubuntu", "22.04")
        assert facts.is_linux

    def test_runner_os_falls_back_to_os_family(self, monkeypatch):
        monkeypatch.delenv("RUNNER_OS", raising=False)
        with patch.object(environment, "detect_os_family", return_value="macos"), \
                patch.object(environment, "normalize_arch", return_value="arm64"):
            facts = detect_environment()

        assert facts.runner_os == "macOS"
        assert facts.distro_name is None
        assert facts.is_macos

    def test_explicit_runner_os_wins(self, monkeypatch):
        monkeypatch.setenv("RUNNER_OS", "Linux")
        with patch.object(environment, "detect_os_family", return_value="windows"), \
                patch.object(environment, "normalize_arch", return_value="x64"):
            facts = detect_environment("Windows")

        assert facts.runner_os == "Windows"
        assert facts.is_windows
