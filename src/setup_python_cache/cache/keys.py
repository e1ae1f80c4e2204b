"""
Shared cache key helpers: dependency file hashing and key prefix assembly
"""

import glob
import hashlib
import os
import sys
from typing import Iterable, List, Optional, Sequence, Union

from ..toolchain.environment import EnvironmentFacts
from ..utils.logging_config import get_logger


CACHE_KEY_PREFIX = "setup-python"
KEY_DELIMITER = "-"
INTERPRETER_FAMILY = "python"

_READ_CHUNK_SIZE = 64 * 1024

# Dot directories such as .ci/ or .github/ are searched where glob supports it
GLOB_OPTIONS = {"include_hidden": True} if sys.version_info >= (3, 11) else {}

logger = get_logger(__name__)


def match_files(patterns: Union[str, Sequence[str]], root: str = None) -> List[str]:
    """
    Resolve glob patterns to the sorted list of matching files under root

    Args:
        patterns: Glob pattern(s); a leading '!' excludes matches
        root: Directory patterns are resolved against (defaults to cwd)

    Returns:
        Absolute paths of matched regular files inside root
    """
    if isinstance(patterns, str):
        patterns = [patterns]

    root = os.path.realpath(root or os.getcwd())
    included = set()
    excluded = set()

    for pattern in patterns:
        pattern = pattern.strip()
        if not pattern:
            continue

        target = included
        if pattern.startswith('!'):
            target = excluded
            pattern = pattern[1:]

        for path in glob.glob(os.path.join(root, pattern), recursive=True, **GLOB_OPTIONS):
            target.add(os.path.realpath(path))

    matched = []
    for path in sorted(included - excluded):
        if not os.path.isfile(path):
            continue
        # Files outside the workspace are never hashed
        if not _is_within(root, path):
            logger.debug(f"Ignoring {path}, not under {root}")
            continue
        matched.append(path)

    return matched


def _is_within(root: str, path: str) -> bool:
    try:
        return os.path.commonpath([root, path]) == root
    except ValueError:
        # Different drives on Windows
        return False


def _file_digest(path: str) -> bytes:
    hasher = hashlib.sha256()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(_READ_CHUNK_SIZE), b''):
            hasher.update(chunk)
    return hasher.digest()


def hash_files(patterns: Union[str, Sequence[str]], root: str = None) -> str:
    """
    Compute a content hash over all files matched by the glob patterns

    Each matched file is hashed with SHA-256 and the per-file digests are
    hashed again in path order, so the result depends only on the set of
    matched files and their bytes.

    Args:
        patterns: Glob pattern(s) relative to root
        root: Directory patterns are resolved against (defaults to cwd)

    Returns:
        Hex digest, or an empty string if no file matched
    """
    files = match_files(patterns, root)
    if not files:
        return ''

    hasher = hashlib.sha256()
    for path in files:
        hasher.update(_file_digest(path))

    logger.debug(f"Hashed {len(files)} dependency file(s)")
    return hasher.hexdigest()


def hash_files_with_fallback(patterns: Union[str, Sequence[str]],
                             backup_patterns: Union[str, Sequence[str]],
                             root: str = None) -> str:
    """Hash the primary patterns, or the backup patterns if nothing matched"""
    fingerprint = hash_files(patterns, root)
    if fingerprint:
        return fingerprint

    logger.debug(f"No file matched {patterns}, falling back to {backup_patterns}")
    return hash_files(backup_patterns, root)


def join_key(parts: Iterable[Optional[str]]) -> str:
    """Join key segments with the key delimiter"""
    return KEY_DELIMITER.join('' if part is None else str(part) for part in parts)


def build_restore_key_prefix(facts: EnvironmentFacts,
                             python_version: str,
                             package_manager: str,
                             prefix: str = CACHE_KEY_PREFIX) -> str:
    """
    Assemble the environment part of a cache key

    Layout: prefix-runner_os-arch[-distro_version-distro_name]-python-version-manager
    The distribution segments are only present on Linux.
    """
    key_parts = [prefix, facts.runner_os, facts.arch]

    if facts.is_linux:
        key_parts.extend([facts.distro_version, facts.distro_name])

    key_parts.extend([INTERPRETER_FAMILY, python_version, package_manager])
    return join_key(key_parts)


def build_primary_key(restore_key_prefix: str, fingerprint: str) -> str:
    """Append the dependency fingerprint to the restore key prefix"""
    return join_key([restore_key_prefix, fingerprint])
