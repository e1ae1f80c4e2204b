"""
External command execution
"""

import asyncio
import shlex
import subprocess
import time
from typing import List, NamedTuple, Sequence, Union

from ..utils.errors import ToolNotFoundError
from ..utils.logging_config import get_logger, log_command_execution


Command = Union[str, Sequence[str]]


class CommandResult(NamedTuple):
    """Captured outcome of an external command"""
    exit_code: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def split_command(command: Command) -> List[str]:
    """Turn a command string into an argument list"""
    if isinstance(command, str):
        return shlex.split(command, posix=True)
    return [str(part) for part in command]


class CommandRunner:
    """Runs external commands, capturing stdout, stderr and exit status.

    ``run`` suspends on the child process; ``run_sync`` blocks the caller
    until the process exits. A missing executable raises
    ``ToolNotFoundError`` from both.
    """

    def __init__(self, encoding: str = 'utf-8'):
        self.encoding = encoding
        self.logger = get_logger(__name__)

    async def run(self, command: Command) -> CommandResult:
        """Run a command without blocking the event loop"""
        args = split_command(command)
        start_time = time.time()

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(
                f"Unable to locate executable file: {args[0]}",
                tool=args[0]
            ) from e

        stdout, stderr = await process.communicate()
        result = CommandResult(
            exit_code=process.returncode,
            stdout=stdout.decode(self.encoding, errors='replace'),
            stderr=stderr.decode(self.encoding, errors='replace')
        )

        log_command_execution(self.logger, args, result.exit_code, time.time() - start_time)
        return result

    def run_sync(self, command: Command) -> CommandResult:
        """Run a command and block until it exits"""
        args = split_command(command)
        start_time = time.time()

        try:
            completed = subprocess.run(
                args,
                capture_output=True,
                text=True,
                encoding=self.encoding,
                errors='replace'
            )
        except FileNotFoundError as e:
            raise ToolNotFoundError(
                f"Unable to locate executable file: {args[0]}",
                tool=args[0]
            ) from e

        result = CommandResult(
            exit_code=completed.returncode,
            stdout=completed.stdout or '',
            stderr=completed.stderr or ''
        )

        log_command_execution(self.logger, args, result.exit_code, time.time() - start_time)
        return result
