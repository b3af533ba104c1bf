import os
import subprocess
import sys
from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from preflight.version import __version__

ENV_LOG_LEVEL = "PREFLIGHT_LOG"


@dataclass(frozen=True)
class ProbeResult:
    """Captured output of one subprocess run."""

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        return self.returncode == 0


def run_capture(command: str | Sequence[str], shell: bool = True) -> ProbeResult:
    """
    Run a command to completion and capture its stdout and stderr separately.

    Args:
        command: A shell string when `shell` is True, otherwise an argument list
            that is executed directly.
        shell: Run the command through ``bash -c`` so that redirections such as
            ``2>&1`` and pipes work.

    Returns:
        ProbeResult with the decoded output and the exit status.

    There is no timeout: a hung child process blocks the caller.
    """
    if shell:
        if not isinstance(command, str):
            raise TypeError("A shell command must be given as a single string")
        args = ["bash", "-c", command]
    else:
        if isinstance(command, str):
            raise TypeError("A direct command must be given as a sequence of arguments")
        args = list(command)

    logger.debug(f"Running: {command}")
    try:
        result = subprocess.run(
            args,
            capture_output=True,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as e:
        logger.error(f"Unable to execute {args[0]}: {e}")
        raise

    return ProbeResult(
        stdout=result.stdout, stderr=result.stderr, returncode=result.returncode
    )


def setup_logger(
    verbose: bool = False, quiet: bool = False, log_file: str | None = None
) -> str:
    """
    Configure the loguru logger once at program start.

    `quiet` takes precedence over `verbose`. The PREFLIGHT_LOG environment
    variable, when set, overrides both. Returns the level in use.
    """
    level = "INFO"
    if verbose:
        level = "DEBUG"
    if quiet:
        level = "ERROR"
    level = os.environ.get(ENV_LOG_LEVEL, level).upper()

    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        logger.add(log_file, level=level)

    logger.info(f"preflight version {__version__}")
    return level
