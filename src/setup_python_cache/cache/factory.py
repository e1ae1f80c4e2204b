"""
Factory for package manager cache strategies
"""

from typing import Dict, Optional, Type

from ..utils.errors import ConfigurationError
from ..utils.validation import InputValidator
from .pip_cache import PipCacheStrategy
from .strategies import CacheStrategy, DEFAULT_CACHE_DEPENDENCY_PATH


STRATEGIES: Dict[str, Type[CacheStrategy]] = {
    'pip': PipCacheStrategy,
}


def get_cache_strategy(package_manager: str,
                       python_version: str,
                       cache_dependency_path: Optional[str] = None,
                       **kwargs) -> CacheStrategy:
    """
    Instantiate the cache strategy for a package manager

    Args:
        package_manager: Package manager identifier ('pip')
        python_version: Configured interpreter version
        cache_dependency_path: Glob pattern(s) of dependency files
        **kwargs: Passed through to the strategy (runner, facts, ...)

    Returns:
        CacheStrategy implementation

    Raises:
        ConfigurationError: If the package manager is not supported
    """
    normalized = (package_manager or '').strip().lower()
    strategy_class = STRATEGIES.get(normalized)
    if strategy_class is None:
        raise ConfigurationError(
            f"Caching for '{package_manager}' is not supported",
            field="package_manager"
        )

    python_version = InputValidator.validate_python_version(python_version)

    return strategy_class(
        python_version,
        cache_dependency_path or DEFAULT_CACHE_DEPENDENCY_PATH,
        **kwargs
    )
