"""
pip cache strategy
"""

import asyncio
import os
from typing import List, Optional

from ..toolchain.environment import EnvironmentFacts, detect_environment
from ..toolchain.installer import ToolchainInstaller
from ..toolchain.repair import ToolchainRepairer
from ..toolchain.runner import CommandResult, CommandRunner
from ..utils.errors import CacheDirectoryResolutionError, ToolNotFoundError
from ..utils.logging_config import get_logger, log_cache_key
from ..utils.validation import InputValidator
from .keys import build_primary_key, build_restore_key_prefix, hash_files_with_fallback
from .strategies import CacheKeyBundle, CacheStrategy, DEFAULT_CACHE_DEPENDENCY_PATH


CACHE_DIR_COMMAND = ['pip', 'cache', 'dir']


class PipCacheStrategy(CacheStrategy):
    """Cache strategy for pip's global download/wheel cache"""

    package_manager = 'pip'

    def __init__(self,
                 python_version: str,
                 cache_dependency_path: str = DEFAULT_CACHE_DEPENDENCY_PATH,
                 runner: Optional[CommandRunner] = None,
                 facts: Optional[EnvironmentFacts] = None,
                 installer: Optional[ToolchainInstaller] = None,
                 python_home: Optional[str] = None,
                 workspace: Optional[str] = None):
        """
        Initialize pip cache strategy

        Args:
            python_version: Configured interpreter version, part of the key
            cache_dependency_path: Glob pattern(s), newline separated
            runner: Command runner (a real one is created if None)
            facts: Environment facts (detected if None)
            installer: Toolchain installer (created from runner/facts if None)
            python_home: Interpreter home used on Windows (defaults to PYTHON_HOME)
            workspace: Directory dependency patterns are resolved against
        """
        self.python_version = python_version
        self._cache_dependency_path = cache_dependency_path or DEFAULT_CACHE_DEPENDENCY_PATH
        self.runner = runner or CommandRunner()
        self.facts = facts or detect_environment()
        self.python_home = python_home if python_home is not None else os.getenv('PYTHON_HOME', '')
        self.workspace = workspace
        self.logger = get_logger(__name__)

        self.installer = installer or ToolchainInstaller(
            self.runner, self.facts, python_version, target_dir=self.python_home or None
        )
        self.repairer = ToolchainRepairer(
            self.runner,
            self.installer,
            python_binary=self.python_executable,
            package_manager=self.package_manager
        )

    @property
    def cache_dependency_path(self) -> str:
        return self._cache_dependency_path

    @property
    def python_executable(self) -> str:
        """Interpreter binary: PYTHON_HOME/python on Windows, python3 elsewhere"""
        if self.facts.is_windows:
            return os.path.join(self.python_home or '', 'python')
        return 'python3'

    async def resolve_cache_directories(self) -> List[str]:
        """
        Locate pip's global cache directory

        On Windows the toolchain is probed and repaired before the query,
        and the query itself runs synchronously. Elsewhere a single
        'pip --version' probe precedes the query.

        Raises:
            CacheDirectoryResolutionError: If 'pip cache dir' fails with diagnostics
            InstallationError: If repairing the toolchain fails
            ToolNotFoundError: If pip is still missing after repair
        """
        if self.facts.is_windows:
            await self.repairer.ensure_ready()
            result = self._query_cache_dir_sync()
        else:
            if not await self.repairer.is_available(self.package_manager):
                self.logger.warning(f"{self.package_manager} --version failed, querying cache dir anyway")
            result = await self._query_cache_dir_async()

        return [self._resolve_path(result)]

    def _query_cache_dir_sync(self) -> CommandResult:
        try:
            return self.runner.run_sync(CACHE_DIR_COMMAND)
        except ToolNotFoundError as e:
            raise CacheDirectoryResolutionError(self.package_manager) from e

    async def _query_cache_dir_async(self) -> CommandResult:
        try:
            return await self.runner.run(CACHE_DIR_COMMAND)
        except ToolNotFoundError as e:
            raise CacheDirectoryResolutionError(self.package_manager) from e

    def _resolve_path(self, result: CommandResult) -> str:
        # Some pip versions exit non-zero but still print a usable path
        if result.exit_code and result.stderr.strip():
            self.logger.error(f"pip cache dir failed: {result.stderr.strip()}")
            raise CacheDirectoryResolutionError(
                self.package_manager,
                exit_code=result.exit_code,
                details={"stderr": result.stderr.strip()}
            )

        resolved_path = result.stdout.strip()
        if not resolved_path:
            raise CacheDirectoryResolutionError(self.package_manager, exit_code=result.exit_code)

        if resolved_path.startswith('~'):
            resolved_path = os.path.join(
                os.path.expanduser('~'),
                resolved_path[1:].lstrip('/\\')
            )

        self.logger.debug(f"global cache directory path is {resolved_path}")
        return resolved_path

    async def compute_cache_keys(self) -> CacheKeyBundle:
        """
        Compute the cache key bundle

        Returns:
            CacheKeyBundle whose single restore key is the primary key
            without its trailing dependency fingerprint
        """
        patterns = InputValidator.split_dependency_patterns(self.cache_dependency_path)
        fingerprint = await asyncio.to_thread(
            hash_files_with_fallback,
            patterns,
            self.cache_dependency_backup_path,
            self.workspace
        )
        if not fingerprint:
            self.logger.warning(
                f"No file matched {self.cache_dependency_path} or {self.cache_dependency_backup_path}"
            )

        restore_key = build_restore_key_prefix(
            self.facts,
            self.python_version,
            self.package_manager,
            prefix=self.cache_key_prefix
        )
        primary_key = build_primary_key(restore_key, fingerprint)

        log_cache_key(self.logger, 'primary', primary_key)
        log_cache_key(self.logger, 'restore', restore_key)

        return CacheKeyBundle(primary_key=primary_key, restore_keys=(restore_key,))
