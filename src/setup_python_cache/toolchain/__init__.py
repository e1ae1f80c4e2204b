"""Toolchain probing, installation and environment facts"""

from .environment import EnvironmentFacts, detect_environment
from .installer import ToolchainInstaller
from .repair import ToolchainRepairer, ToolchainState
from .runner import CommandResult, CommandRunner

__all__ = [
    "EnvironmentFacts",
    "detect_environment",
    "ToolchainInstaller",
    "ToolchainRepairer",
    "ToolchainState",
    "CommandResult",
    "CommandRunner",
]
