"""
Host environment facts used in cache keys
"""

import os
import platform
import sys
from dataclasses import dataclass
from typing import Optional, Tuple

from cachetools import cached

from ..utils.logging_config import get_logger


LINUX = 'linux'
MACOS = 'macos'
WINDOWS = 'windows'

# Machine names reported by the OS, mapped onto the runner architecture labels
ARCH_ALIASES = {
    'x86_64': 'x64',
    'amd64': 'x64',
    'x64': 'x64',
    'aarch64': 'arm64',
    'arm64': 'arm64',
    'i386': 'ia32',
    'i686': 'ia32',
    'x86': 'ia32',
    'armv7l': 'arm',
    'armv6l': 'arm',
    'ppc64le': 'ppc64',
    's390x': 's390x',
}

RUNNER_OS_NAMES = {
    LINUX: 'Linux',
    MACOS: 'macOS',
    WINDOWS: 'Windows',
}

OS_RELEASE_PATHS = ('/etc/os-release', '/usr/lib/os-release')

logger = get_logger(__name__)


@dataclass(frozen=True)
class EnvironmentFacts:
    """Read-only facts about the machine running the job"""
    os_family: str
    arch: str
    runner_os: str
    distro_name: Optional[str] = None
    distro_version: Optional[str] = None

    @property
    def is_linux(self) -> bool:
        return self.os_family == LINUX

    @property
    def is_macos(self) -> bool:
        return self.os_family == MACOS

    @property
    def is_windows(self) -> bool:
        return self.os_family == WINDOWS


def detect_os_family(sys_platform: str = None) -> str:
    """Map sys.platform onto linux / macos / windows"""
    sys_platform = sys_platform or sys.platform
    if sys_platform.startswith('win') or sys_platform == 'cygwin':
        return WINDOWS
    if sys_platform == 'darwin':
        return MACOS
    return LINUX


def normalize_arch(machine: str = None) -> str:
    """Normalize a machine name (x86_64, AMD64, aarch64...) to x64 / arm64 / ..."""
    machine = (machine or platform.machine() or '').strip()
    return ARCH_ALIASES.get(machine.lower(), machine.lower())


def parse_os_release(content: str) -> dict:
    """Parse the KEY=value lines of an os-release file"""
    info = {}
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        key, value = line.split('=', 1)
        info[key.strip()] = value.strip().strip('"').strip("'")
    return info


@cached(cache={})
def get_linux_info() -> Tuple[str, str]:
    """
    Get the Linux distribution name and version

    Returns:
        (name, version) from os-release, e.g. ("ubuntu", "22.04").
        Empty strings when no os-release file is readable.
    """
    for path in OS_RELEASE_PATHS:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                info = parse_os_release(f.read())
        except OSError:
            continue

        name = info.get('ID', '')
        version = info.get('VERSION_ID', '')
        logger.debug(f"Linux distribution detected from {path}: {name} {version}")
        return name, version

    logger.warning("Could not read os-release, Linux distribution facts are empty")
    return '', ''


def detect_environment(runner_os: str = None) -> EnvironmentFacts:
    """
    Collect environment facts for the current process

    Args:
        runner_os: CI runner OS label (defaults to RUNNER_OS, then to a
            label derived from the OS family)

    Returns:
        EnvironmentFacts for this host
    """
    os_family = detect_os_family()
    runner_os = runner_os or os.getenv('RUNNER_OS') or RUNNER_OS_NAMES[os_family]

    distro_name = distro_version = None
    if os_family == LINUX:
        distro_name, distro_version = get_linux_info()

    return EnvironmentFacts(
        os_family=os_family,
        arch=normalize_arch(),
        runner_os=runner_os,
        distro_name=distro_name,
        distro_version=distro_version
    )
