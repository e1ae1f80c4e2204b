"""
Shared fixtures for setup-python-cache tests
"""

import pytest
from unittest.mock import AsyncMock, Mock

from setup_python_cache.toolchain.environment import EnvironmentFacts
from setup_python_cache.toolchain.installer import ToolchainInstaller
from setup_python_cache.toolchain.runner import CommandRunner
from setup_python_cache.utils.errors import ToolNotFoundError


class FakeCommandRunner(CommandRunner):
    """Command runner returning scripted results.

    Each command maps to a list of outcomes consumed in order; the last
    outcome repeats. An outcome is a CommandResult or an exception to
    raise. Unscripted commands behave like missing executables.
    """

    def __init__(self, script: dict = None):
        super().__init__()
        self.script = {}
        self.calls = []
        for command, outcomes in (script or {}).items():
            self.set(command, outcomes)

    def set(self, command, outcomes):
        if not isinstance(outcomes, list):
            outcomes = [outcomes]
        self.script[tuple(command.split()) if isinstance(command, str) else tuple(command)] = list(outcomes)

    def commands(self, mode: str = None):
        return [" ".join(args) for call_mode, args in self.calls if mode is None or call_mode == mode]

    def _respond(self, mode, command):
        args = tuple(command.split()) if isinstance(command, str) else tuple(str(c) for c in command)
        self.calls.append((mode, args))

        outcomes = self.script.get(args)
        if not outcomes:
            raise ToolNotFoundError(f"Unable to locate executable file: {args[0]}", tool=args[0])

        outcome = outcomes.pop(0) if len(outcomes) > 1 else outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def run(self, command):
        return self._respond("async", command)

    def run_sync(self, command):
        return self._respond("sync", command)


@pytest.fixture
def linux_facts():
    return EnvironmentFacts(
        os_family="linux",
        arch="x64",
        runner_os="Linux",
        distro_name="ubuntu",
        distro_version="22.04"
    )


@pytest.fixture
def macos_facts():
    return EnvironmentFacts(os_family="macos", arch="arm64", runner_os="macOS")


@pytest.fixture
def windows_facts():
    return EnvironmentFacts(os_family="windows", arch="x64", runner_os="Windows")


@pytest.fixture
def fake_runner():
    return FakeCommandRunner()


@pytest.fixture
def mock_installer():
    """Installer double recording interpreter installs and pip bootstraps"""
    installer = Mock(spec=ToolchainInstaller)
    installer.install_interpreter = AsyncMock(return_value="python")
    installer.bootstrap_pip = AsyncMock()
    return installer
