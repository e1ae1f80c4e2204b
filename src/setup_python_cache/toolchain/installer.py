"""
Interpreter and pip installation steps
"""

import os
import tempfile
from typing import List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..utils.errors import InstallationError, ToolNotFoundError
from ..utils.logging_config import get_logger
from ..utils.validation import InputValidator
from .environment import EnvironmentFacts
from .runner import CommandRunner


PYTHON_DOWNLOAD_BASE_URL = "https://www.python.org/ftp/python"

# Installer file suffix per runner architecture
WINDOWS_INSTALLER_SUFFIXES = {
    'x64': '-amd64',
    'arm64': '-arm64',
    'ia32': '',
}

WINDOWS_INSTALLER_ARGS = ['/quiet', 'InstallAllUsers=1', 'PrependPath=1', 'Include_pip=1']


class ToolchainInstaller:
    """Installs the Python interpreter and bootstraps pip"""

    def __init__(self,
                 runner: CommandRunner,
                 facts: EnvironmentFacts,
                 python_version: str,
                 base_url: str = PYTHON_DOWNLOAD_BASE_URL,
                 timeout: int = 300,
                 session: Optional[requests.Session] = None,
                 target_dir: Optional[str] = None):
        """
        Initialize installer

        Args:
            runner: Command runner used for installer and bootstrap commands
            facts: Environment facts selecting the installer flavour
            python_version: Interpreter version to install (major.minor.patch)
            base_url: Download mirror for interpreter installers
            timeout: Download timeout in seconds
            session: HTTP session (a retrying session is created if None)
            target_dir: Install directory (Program Files/PythonXY if None)
        """
        self.runner = runner
        self.facts = facts
        self.python_version = python_version
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or self._create_session()
        self.target_dir = target_dir or self._default_target_dir()
        self.logger = get_logger(__name__)

    def _default_target_dir(self) -> str:
        major_minor = ''.join(self.python_version.split('.')[:2])
        program_files = os.getenv('ProgramFiles', r'C:\Program Files')
        return os.path.join(program_files, f"Python{major_minor}")

    @property
    def interpreter_path(self) -> str:
        """Interpreter binary inside the install directory"""
        return os.path.join(self.target_dir, 'python')

    def get_installer_args(self) -> List[str]:
        return WINDOWS_INSTALLER_ARGS + [f"TargetDir={self.target_dir}"]

    def _create_session(self) -> requests.Session:
        """Create HTTP session with retry strategy"""
        session = requests.Session()

        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"]
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def get_installer_url(self) -> str:
        """Build the download URL of the interpreter installer"""
        if not self.facts.is_windows:
            raise InstallationError(
                f"Automatic Python installation is not supported on {self.facts.os_family}",
                step="download"
            )

        if not InputValidator.is_full_python_version(self.python_version):
            raise InstallationError(
                f"Python version '{self.python_version}' must be major.minor.patch to be installed",
                step="download"
            )

        suffix = WINDOWS_INSTALLER_SUFFIXES.get(self.facts.arch)
        if suffix is None:
            raise InstallationError(
                f"No Python installer available for architecture {self.facts.arch}",
                step="download"
            )

        version = self.python_version
        return f"{self.base_url}/{version}/python-{version}{suffix}.exe"

    def download_installer(self, url: str) -> str:
        """
        Download the installer to a temporary file

        Returns:
            Path of the downloaded installer

        Raises:
            InstallationError: If the download fails
        """
        self.logger.info(f"Downloading Python installer from {url}")

        fd, installer_path = tempfile.mkstemp(suffix=os.path.basename(url))
        try:
            with os.fdopen(fd, 'wb') as f:
                response = self.session.get(url, stream=True, timeout=self.timeout)
                response.raise_for_status()
                for chunk in response.iter_content(chunk_size=1024 * 1024):
                    if chunk:
                        f.write(chunk)
        except (requests.exceptions.RequestException, OSError) as e:
            self._remove(installer_path)
            raise InstallationError(
                f"Failed to download Python installer: {e}",
                step="download",
                details={"url": url}
            ) from e

        return installer_path

    async def install_interpreter(self) -> str:
        """
        Download, run and clean up the interpreter installer

        The install directory and its Scripts directory are prepended to
        PATH so that later commands of this process find python and pip.

        Returns:
            Path of the installed interpreter binary

        Raises:
            InstallationError: If any step fails
        """
        url = self.get_installer_url()
        installer_path = self.download_installer(url)

        try:
            self.logger.info(f"Installing Python {self.python_version} into {self.target_dir}")
            await self._run_step([installer_path] + self.get_installer_args(), "execute")
        finally:
            self._remove(installer_path)

        self._add_to_path(self.target_dir)
        self.logger.info(f"Python {self.python_version} installed")
        return self.interpreter_path

    def _add_to_path(self, directory: str) -> None:
        entries = [directory, os.path.join(directory, 'Scripts')]
        current = os.environ.get('PATH', '')
        if current:
            entries.append(current)
        os.environ['PATH'] = os.pathsep.join(entries)

    async def bootstrap_pip(self, python_binary: str) -> None:
        """
        Install pip through the interpreter and upgrade it

        Args:
            python_binary: Interpreter used for ensurepip

        Raises:
            InstallationError: If either command fails
        """
        self.logger.info("pip not found. Installing pip...")
        await self._run_step([python_binary, '-m', 'ensurepip'], "bootstrap")
        await self._run_step([python_binary, '-m', 'pip', 'install', '--upgrade', 'pip'], "upgrade")

    async def _run_step(self, command: List[str], step: str) -> None:
        try:
            result = await self.runner.run(command)
        except ToolNotFoundError as e:
            raise InstallationError(str(e), step=step) from e
        except OSError as e:
            # Not executable, or elevation required (WinError 740)
            raise InstallationError(
                f"Installation step '{step}' could not start: {e}",
                step=step,
                details={"command": command[0]}
            ) from e

        if not result.ok:
            raise InstallationError(
                f"Installation step '{step}' failed with exit code {result.exit_code}",
                step=step,
                details={"stderr": result.stderr.strip()}
            )

    def _remove(self, path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.warning(f"Failed to remove installer {path}: {e}")
