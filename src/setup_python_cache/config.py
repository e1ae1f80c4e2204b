"""
Configuration loaded from the CI environment
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .cache.strategies import DEFAULT_CACHE_DEPENDENCY_PATH
from .utils.errors import ConfigurationError
from .utils.validation import InputValidator


# Action inputs arrive as INPUT_<NAME> with the input name upper-cased
ENV_PYTHON_VERSION = 'INPUT_PYTHON-VERSION'
ENV_PACKAGE_MANAGER = 'INPUT_CACHE'
ENV_CACHE_DEPENDENCY_PATH = 'INPUT_CACHE-DEPENDENCY-PATH'


@dataclass(frozen=True)
class CacheConfig:
    """Settings for one cache strategy run"""
    python_version: str
    package_manager: str = 'pip'
    cache_dependency_path: str = DEFAULT_CACHE_DEPENDENCY_PATH
    runner_os: Optional[str] = None
    python_home: str = ''
    workspace: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] = None) -> 'CacheConfig':
        """
        Load configuration from environment variables

        Args:
            environ: Environment mapping (defaults to os.environ)

        Returns:
            CacheConfig instance

        Raises:
            ConfigurationError: If the python version is missing or malformed
        """
        environ = os.environ if environ is None else environ

        python_version = environ.get(ENV_PYTHON_VERSION, '').strip()
        if not python_version:
            raise ConfigurationError(
                f"{ENV_PYTHON_VERSION} environment variable is required",
                field="python_version"
            )

        return cls(
            python_version=InputValidator.validate_python_version(python_version),
            package_manager=environ.get(ENV_PACKAGE_MANAGER, '').strip() or 'pip',
            cache_dependency_path=environ.get(ENV_CACHE_DEPENDENCY_PATH, '').strip() or DEFAULT_CACHE_DEPENDENCY_PATH,
            runner_os=environ.get('RUNNER_OS') or None,
            python_home=environ.get('PYTHON_HOME', ''),
            workspace=environ.get('GITHUB_WORKSPACE') or None
        )
