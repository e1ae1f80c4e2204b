"""Cache strategies and key computation"""

from .distributor import CacheDistributor, CachePlan, write_outputs
from .factory import get_cache_strategy
from .keys import build_restore_key_prefix, hash_files
from .pip_cache import PipCacheStrategy
from .strategies import CacheKeyBundle, CacheStrategy

__all__ = [
    "CacheDistributor",
    "CachePlan",
    "write_outputs",
    "get_cache_strategy",
    "build_restore_key_prefix",
    "hash_files",
    "PipCacheStrategy",
    "CacheKeyBundle",
    "CacheStrategy",
]
