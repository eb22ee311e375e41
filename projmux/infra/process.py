"""
Subprocess execution for projmux.

Every external program (git, tmux, fzf, zoxide) is run through
run_process(). Clients take the runner as a constructor argument so
tests can substitute a fake and never spawn anything.
"""

import subprocess
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Sequence, Union
from pathlib import Path
import logging

from ..exit_codes import SubprocessIOError

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Outcome of a finished command."""
    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


Runner = Callable[..., ProcessResult]


def run_process(
    args: Sequence[Union[str, Path]],
    input: Optional[str] = None,
    cwd: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None,
    capture_stdout: bool = True,
    capture_stderr: bool = True,
) -> ProcessResult:
    """
    Spawn a command, feed it input, and block until it exits.

    When input is given, stdin is a pipe that is fully written and closed
    before stdout is read (Popen.communicate does both in that order), so
    filters like fzf always see EOF.

    Args:
        args: Command and arguments
        input: Text written to the child's stdin, or None to inherit stdin
        cwd: Working directory
        env: Full environment for the child (inherits when None)
        capture_stdout: Pipe stdout; False lets interactive programs own the terminal
        capture_stderr: Pipe stderr

    Returns:
        ProcessResult with decoded output (undecodable bytes replaced)

    Raises:
        SubprocessIOError: if the command cannot be spawned or awaited
    """
    cmd = [str(a) for a in args]
    logger.debug(f"running: {' '.join(cmd)}" + (f" (cwd={cwd})" if cwd else ""))

    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            stdin=subprocess.PIPE if input is not None else None,
            stdout=subprocess.PIPE if capture_stdout else None,
            stderr=subprocess.PIPE if capture_stderr else None,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise SubprocessIOError(cmd, str(e)) from e

    try:
        stdout, stderr = proc.communicate(input)
    except OSError as e:
        proc.kill()
        proc.wait()
        raise SubprocessIOError(cmd, str(e)) from e

    result = ProcessResult(
        args=cmd,
        returncode=proc.returncode,
        stdout=stdout or "",
        stderr=stderr or "",
    )

    if result.ok and result.stdout:
        logger.debug(result.stdout.strip())
    elif not result.ok and result.stderr.strip():
        logger.warning(result.stderr.strip())

    return result
