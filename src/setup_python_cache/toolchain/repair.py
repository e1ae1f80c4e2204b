"""
Toolchain probe and repair state machine
"""

from enum import Enum
from typing import Awaitable, Callable, Dict, List

from ..utils.errors import InstallationError, ToolNotFoundError
from ..utils.logging_config import get_logger
from .installer import ToolchainInstaller
from .runner import CommandRunner


class ToolchainState(Enum):
    """Repair states of the pip toolchain"""
    TOOL_ABSENT = "tool_absent"
    INTERPRETER_REPAIRING = "interpreter_repairing"
    MANAGER_REPAIRING = "manager_repairing"
    READY = "ready"


class ToolchainRepairer:
    """Drives pip from absent to ready.

    Policy: probe, install, re-probe, fail if the tool is still absent.
    The first pip probe decides between READY and TOOL_ABSENT; installers
    only run from the repairing states.
    """

    def __init__(self,
                 runner: CommandRunner,
                 installer: ToolchainInstaller,
                 python_binary: str,
                 package_manager: str = 'pip'):
        """
        Initialize repairer

        Args:
            runner: Command runner for probes
            installer: Installer for the interpreter and pip bootstrap
            python_binary: Interpreter used for probing and bootstrapping
            package_manager: Package manager executable
        """
        self.runner = runner
        self.installer = installer
        self.python_binary = python_binary
        self.package_manager = package_manager
        self.logger = get_logger(__name__)

        self.state = ToolchainState.TOOL_ABSENT
        self.history: List[ToolchainState] = []

        self._handlers: Dict[ToolchainState, Callable[[], Awaitable[ToolchainState]]] = {
            ToolchainState.TOOL_ABSENT: self._handle_tool_absent,
            ToolchainState.INTERPRETER_REPAIRING: self._handle_interpreter_repairing,
            ToolchainState.MANAGER_REPAIRING: self._handle_manager_repairing,
        }

    async def probe(self, executable: str) -> None:
        """
        Run '<executable> --version'

        Raises:
            ToolNotFoundError: If the executable is missing or exits non-zero
        """
        result = await self.runner.run([executable, '--version'])
        if not result.ok:
            raise ToolNotFoundError(
                f"{executable} --version exited with {result.exit_code}",
                tool=executable
            )
        self.logger.debug(f"{executable} found: {result.stdout.strip()}")

    async def is_available(self, executable: str) -> bool:
        try:
            await self.probe(executable)
        except ToolNotFoundError:
            return False
        return True

    async def ensure_ready(self) -> ToolchainState:
        """
        Probe the package manager and repair the toolchain if needed

        Returns:
            ToolchainState.READY

        Raises:
            InstallationError: If an installation step fails
            ToolNotFoundError: If pip is still missing after repair
        """
        self.history = []

        if await self.is_available(self.package_manager):
            self._transition(ToolchainState.READY)
            return self.state

        self.logger.info(f"{self.package_manager} not found, repairing toolchain")
        self._transition(ToolchainState.TOOL_ABSENT)

        while self.state is not ToolchainState.READY:
            self._transition(await self._handlers[self.state]())

        return self.state

    def _transition(self, state: ToolchainState) -> None:
        self.logger.debug(f"Toolchain state: {state.value}")
        self.state = state
        self.history.append(state)

    async def _handle_tool_absent(self) -> ToolchainState:
        if await self.is_available(self.python_binary):
            return ToolchainState.MANAGER_REPAIRING

        self.logger.warning(f"Python executable {self.python_binary} not found")
        return ToolchainState.INTERPRETER_REPAIRING

    async def _handle_interpreter_repairing(self) -> ToolchainState:
        # Re-probe the binary the installer placed, not the PATH lookup
        self.python_binary = await self.installer.install_interpreter()

        if not await self.is_available(self.python_binary):
            raise InstallationError(
                f"Python executable {self.python_binary} is still missing after installation",
                step="verify"
            )

        # The interpreter installer may already ship pip
        if await self.is_available(self.package_manager):
            return ToolchainState.READY
        return ToolchainState.MANAGER_REPAIRING

    async def _handle_manager_repairing(self) -> ToolchainState:
        await self.installer.bootstrap_pip(self.python_binary)

        try:
            await self.probe(self.package_manager)
        except ToolNotFoundError as e:
            self.logger.error(f"{self.package_manager} is still missing after bootstrap")
            raise ToolNotFoundError(
                f"{self.package_manager} is not available after installation",
                tool=self.package_manager
            ) from e

        return ToolchainState.READY
