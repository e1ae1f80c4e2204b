"""
Collects what the caching framework needs from a strategy
"""

import json
import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TextIO

from ..utils.logging_config import get_logger
from .strategies import CacheKeyBundle, CacheStrategy


@dataclass(frozen=True)
class CachePlan:
    """Directories to cache and the keys to store them under"""
    package_manager: str
    cache_paths: List[str]
    keys: CacheKeyBundle

    def to_outputs(self) -> Dict[str, str]:
        """Flatten the plan into step output values"""
        return {
            'cache-paths': json.dumps(self.cache_paths),
            'cache-primary-key': self.keys.primary_key,
            'cache-restore-keys': json.dumps(list(self.keys.restore_keys)),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            'package_manager': self.package_manager,
            'cache_paths': list(self.cache_paths),
            **self.keys.to_dict()
        }


class CacheDistributor:
    """Runs a strategy's directory resolution and key computation in order"""

    def __init__(self, strategy: CacheStrategy):
        self.strategy = strategy
        self.logger = get_logger(__name__)

    async def plan(self) -> CachePlan:
        """
        Resolve cache directories, then compute cache keys

        Returns:
            CachePlan for the strategy's package manager
        """
        cache_paths = await self.strategy.resolve_cache_directories()
        keys = await self.strategy.compute_cache_keys()

        self.logger.info(
            f"{self.strategy.package_manager} cache: {', '.join(cache_paths)} "
            f"(key {keys.primary_key})"
        )

        return CachePlan(
            package_manager=self.strategy.package_manager,
            cache_paths=cache_paths,
            keys=keys
        )


def write_outputs(plan: CachePlan,
                  output_file: Optional[str] = None,
                  stream: Optional[TextIO] = None) -> None:
    """
    Append the plan as key=value lines to $GITHUB_OUTPUT, or print them

    Args:
        plan: Plan to publish
        output_file: Output file (defaults to GITHUB_OUTPUT)
        stream: Fallback stream when no output file is set (defaults to stdout)
    """
    output_file = output_file or os.getenv('GITHUB_OUTPUT')
    lines = [f"{key}={value}\n" for key, value in plan.to_outputs().items()]

    if output_file:
        with open(output_file, 'a', encoding='utf-8') as handle:
            handle.writelines(lines)
    else:
        (stream or sys.stdout).writelines(lines)
