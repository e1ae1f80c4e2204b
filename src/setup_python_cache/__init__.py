"""
setup-python-cache

Cache directory discovery and cache key computation for Python package
managers in CI jobs.

License: MIT
Version: 0.1.0
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .cache import CacheKeyBundle, CacheStrategy, PipCacheStrategy, get_cache_strategy
from .cli import main

__all__ = ["CacheKeyBundle", "CacheStrategy", "PipCacheStrategy", "get_cache_strategy", "main"]
