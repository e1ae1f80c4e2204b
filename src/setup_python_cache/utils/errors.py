"""
Custom exceptions for setup-python-cache
"""


class CacheStrategyError(Exception):
    """Base exception for cache strategies"""

    def __init__(self, message: str, error_code: str = None, details: dict = None):
        super().__init__(message)
        self.error_code = error_code or "UNKNOWN_ERROR"
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert exception to dictionary for JSON serialization"""
        return {
            "error": {
                "code": self.error_code,
                "message": str(self),
                "details": self.details
            }
        }


class ConfigurationError(CacheStrategyError):
    """Configuration-related errors"""

    def __init__(self, message: str, field: str = None, details: dict = None):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message, "CONFIGURATION_ERROR", error_details)


class ToolNotFoundError(CacheStrategyError):
    """An executable probe failed"""

    def __init__(self, message: str, tool: str = None, details: dict = None):
        error_details = details or {}
        if tool:
            error_details["tool"] = tool
        super().__init__(message, "TOOL_NOT_FOUND", error_details)
        self.tool = tool


class CacheDirectoryResolutionError(CacheStrategyError):
    """The package manager could not report its cache directory"""

    def __init__(self, package_manager: str, exit_code: int = None, details: dict = None):
        error_details = details or {}
        error_details["package_manager"] = package_manager
        if exit_code is not None:
            error_details["exit_code"] = exit_code
        super().__init__(
            f"Could not get cache folder path for {package_manager} package manager",
            "CACHE_DIRECTORY_ERROR",
            error_details
        )
        self.package_manager = package_manager


class InstallationError(CacheStrategyError):
    """A toolchain installation step failed"""

    def __init__(self, message: str, step: str = None, details: dict = None):
        error_details = details or {}
        if step:
            error_details["step"] = step
        super().__init__(message, "INSTALLATION_ERROR", error_details)
        self.step = step
