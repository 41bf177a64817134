"""Subprocess utilities for external toolchains"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Captured outcome of an external command"""
    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        """stdout and stderr joined, for pattern scanning"""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)

    def tail(self, lines: int = 20) -> str:
        """Last lines of combined output, for error messages"""
        return "\n".join(self.output.strip().splitlines()[-lines:])


# (args, cwd, timeout) -> CommandResult
CommandRunner = Callable[[List[str], Optional[Path], Optional[float]], CommandResult]


def run_command(args: List[str],
                cwd: Optional[Path] = None,
                timeout: Optional[float] = None) -> CommandResult:
    """
    Run an external command and capture its output

    Args:
        args: Command and arguments
        cwd: Working directory
        timeout: Seconds before the command is killed

    Returns:
        CommandResult (non-zero exit codes are returned, not raised)

    Raises:
        FileNotFoundError: If the executable is not installed
        subprocess.TimeoutExpired: If the command runs past the timeout
    """
    logger.debug("Running %s (cwd=%s)", " ".join(args), cwd)
    result = subprocess.run(
        args,
        cwd=cwd,
        capture_output=True,
        text=True,
        timeout=timeout
    )
    return CommandResult(
        args=list(args),
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or ""
    )
