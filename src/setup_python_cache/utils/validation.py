"""
Input validation and log sanitization utilities
"""

import re
from typing import List
from .errors import ConfigurationError


class InputValidator:
    """Validation and sanitization for action inputs"""

    # Regex patterns for validation
    PYTHON_VERSION_PATTERN = re.compile(r'^[A-Za-z0-9][A-Za-z0-9.+\-]*$')
    FULL_PYTHON_VERSION_PATTERN = re.compile(r'^\d+\.\d+\.\d+$')
    TOKEN_MASK_PATTERN = re.compile(r'\b(gh[pousr]_[A-Za-z0-9]{20,}|github_pat_[A-Za-z0-9_]{20,})\b')

    @classmethod
    def validate_python_version(cls, version: str) -> str:
        """Validate and return a python version string"""
        if not version or not isinstance(version, str):
            raise ConfigurationError(
                "Python version is required",
                field="python_version"
            )

        version = version.strip()
        if not cls.PYTHON_VERSION_PATTERN.match(version):
            raise ConfigurationError(
                f"Invalid python version: {version!r}",
                field="python_version"
            )
        return version

    @classmethod
    def is_full_python_version(cls, version: str) -> bool:
        """Check whether a version pins major.minor.patch"""
        return bool(version and cls.FULL_PYTHON_VERSION_PATTERN.match(version))

    @classmethod
    def split_dependency_patterns(cls, cache_dependency_path: str) -> List[str]:
        """Split a multi-line dependency path input into glob patterns"""
        if not cache_dependency_path:
            return []

        patterns = []
        for line in cache_dependency_path.splitlines():
            line = line.strip()
            if line and not line.startswith('#'):
                patterns.append(line)
        return patterns

    @classmethod
    def sanitize_token_in_text(cls, text: str) -> str:
        """Remove/mask tokens from text for logging"""
        if not isinstance(text, str):
            return str(text)

        return cls.TOKEN_MASK_PATTERN.sub('[TOKEN_REDACTED]', text)

    @classmethod
    def sanitize_log_message(cls, message: str, secret: str = None) -> str:
        """Sanitize log messages by removing sensitive data"""
        sanitized = cls.sanitize_token_in_text(message)
        if secret:
            sanitized = sanitized.replace(secret, '***')
        return sanitized
