#!/usr/bin/env python3
"""
setup-python-cache - Main Entry Point

Resolves the package manager's cache directory and cache keys for the
current job and publishes them as step outputs.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .cache.distributor import CacheDistributor, CachePlan, write_outputs
from .cache.factory import get_cache_strategy
from .config import CacheConfig
from .toolchain.environment import detect_environment
from .utils.errors import CacheStrategyError
from .utils.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute dependency cache paths and keys")
    parser.add_argument("--output", help="File to append outputs to (defaults to $GITHUB_OUTPUT)")
    parser.add_argument("--log-file", help="Optional log file")
    return parser


async def run(config: CacheConfig) -> CachePlan:
    """Build the configured strategy and resolve its cache plan"""
    strategy = get_cache_strategy(
        config.package_manager,
        config.python_version,
        config.cache_dependency_path,
        facts=detect_environment(config.runner_os),
        python_home=config.python_home,
        workspace=config.workspace
    )
    return await CacheDistributor(strategy).plan()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for setup-python-cache"""
    args = build_parser().parse_args(argv)
    logger = logging.getLogger(__name__)

    setup_logging(log_file=args.log_file)

    try:
        config = CacheConfig.from_env()

        plan = asyncio.run(run(config))
        write_outputs(plan, args.output)

    except CacheStrategyError as e:
        logger.error(f"Cache setup failed: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
