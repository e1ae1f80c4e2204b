"""
Cache strategies for different package managers
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from .keys import CACHE_KEY_PREFIX


DEFAULT_CACHE_DEPENDENCY_PATH = "**/requirements.txt"
CACHE_DEPENDENCY_BACKUP_PATH = "**/pyproject.toml"


@dataclass(frozen=True)
class CacheKeyBundle:
    """Primary key plus ordered restore keys"""
    primary_key: str
    restore_keys: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'primary_key': self.primary_key,
            'restore_keys': list(self.restore_keys)
        }


class CacheStrategy(ABC):
    """What a package manager exposes to the caching framework"""

    package_manager: str = ''
    cache_key_prefix: str = CACHE_KEY_PREFIX
    cache_dependency_backup_path: str = CACHE_DEPENDENCY_BACKUP_PATH

    @property
    @abstractmethod
    def cache_dependency_path(self) -> str:
        """Glob pattern(s) of the dependency-declaration files"""

    @abstractmethod
    async def resolve_cache_directories(self) -> List[str]:
        """
        List the directories to cache

        Returns:
            Non-empty ordered list of absolute paths
        """

    @abstractmethod
    async def compute_cache_keys(self) -> CacheKeyBundle:
        """Compute the primary and restore keys"""
