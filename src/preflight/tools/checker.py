# ================================================================================
# External tool verification
#
# Presence and minimum-version checks for executables a pipeline shells out
# to. Every check runs one command through bash and inspects the result; a
# failed check raises a ToolCheckError and is never retried.
# ================================================================================

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from loguru import logger

from preflight.errors import (
    InvalidVersionError,
    ToolNotPresent,
    VersionProbeFailed,
    VersionTooOld,
    VersionUnparseable,
)
from preflight.tools.version import Version
from preflight.utils.utils import ProbeResult, run_capture

Runner = Callable[[str], ProbeResult]


@dataclass(frozen=True)
class ToolRequirement:
    """An external executable and what is required of it."""

    executable_name: str
    min_version: str | None = None
    presence_command: str | None = None
    version_command: str | None = None
    allow_nonzero_exit: bool = False

    @property
    def presence_test(self) -> str:
        return self.presence_command or f"which {self.executable_name}"


def check_presence(
    executable_name: str, testing_command: str, runner: Runner = run_capture
) -> None:
    """Check whether a command is available at all.

    Only the exit status of `testing_command` matters; its stdout is ignored.
    """
    logger.debug(f"Checking for {executable_name} ..")
    result = runner(testing_command)
    if not result.success:
        logger.error(f"Could not find an available {executable_name} executable.")
        logger.error(f"The STDERR was: {result.stderr!r}")
        logger.error(
            f"Cannot continue without {executable_name}. "
            f"Testing for presence with `{testing_command}` failed"
        )
        raise ToolNotPresent(
            executable_name, testing_command, result.returncode, result.stderr
        )


def extract_version_token(executable_name: str, output: str) -> str:
    """
    Pull the version token out of free-form version output.

    A single leading ``v`` is dropped, then the last space-separated word of
    the first line is taken, so ``"tool version 3.4.1"`` gives ``"3.4.1"``.
    """
    text = output.strip()
    if text.startswith("v"):
        text = text[1:]

    lines = text.splitlines()
    if not lines:
        raise VersionUnparseable(executable_name, output)
    token = lines[0].strip().split(" ")[-1]
    if not token:
        raise VersionUnparseable(executable_name, output)
    return token


def check_version(
    executable_name: str,
    min_version: str,
    allow_nonzero_exit: bool = False,
    version_command: str | None = None,
    runner: Runner = run_capture,
) -> Version:
    """
    Check whether a program has a sufficient version.

    By default the version is read from ``<executable_name> --version 2>&1``;
    stderr is merged because many tools print their version there. Tools
    that report differently can pass their own `version_command`.

    Args:
        executable_name: Name of the tool, used in the default command and in errors.
        min_version: Oldest acceptable version. Must be a valid version string;
            a malformed value raises InvalidVersionError.
        allow_nonzero_exit: Parse the output even if the probe exits non-zero
            (some tools exit 1 after printing their version).
        version_command: Shell command that prints the version.
        runner: Subprocess primitive, replaceable in tests.

    Returns:
        The version found.

    Raises:
        VersionProbeFailed: The probe exited non-zero and that is not allowed.
        VersionUnparseable: No version could be read from the probe output.
        VersionTooOld: The version found is older than `min_version`.
    """
    try:
        expected = Version.parse(min_version)
    except InvalidVersionError as e:
        raise InvalidVersionError(
            f"Programming error: failed to parse code-specified version "
            f"{min_version!r} for {executable_name}"
        ) from e

    command = version_command or f"{executable_name} --version 2>&1"
    result = runner(command)
    if not allow_nonzero_exit and not result.success:
        logger.error(f"Could not find an available {executable_name} executable.")
        logger.error(f"The STDERR was: {result.stderr!r}")
        logger.error(
            f"Cannot continue without {executable_name}. "
            f"Finding version of `{command}` failed"
        )
        raise VersionProbeFailed(
            executable_name, command, result.returncode, result.stderr
        )

    logger.debug(
        f"Running {executable_name}, found version STDOUT: {result.stdout.strip()!r}"
    )
    token = extract_version_token(executable_name, result.stdout)
    try:
        found = Version.parse(token)
    except InvalidVersionError as e:
        logger.error(
            f"Unable to parse version number '{token}' from executable {executable_name}"
        )
        raise VersionUnparseable(executable_name, result.stdout) from e

    logger.info(f"Found {executable_name} version {found}")
    if found < expected:
        logger.error(
            f"It appears the available version of {executable_name} is too old "
            f"(found version {found}, required is {expected})"
        )
        raise VersionTooOld(executable_name, str(found), str(expected))
    return found


def verify_tool(requirement: ToolRequirement, runner: Runner = run_capture) -> Version | None:
    """Run the presence check and, when a minimum is set, the version check."""
    check_presence(requirement.executable_name, requirement.presence_test, runner=runner)
    if requirement.min_version is None:
        return None
    return check_version(
        requirement.executable_name,
        requirement.min_version,
        allow_nonzero_exit=requirement.allow_nonzero_exit,
        version_command=requirement.version_command,
        runner=runner,
    )


def verify_tools(
    requirements: Iterable[ToolRequirement], runner: Runner = run_capture
) -> dict[str, Version | None]:
    """
    Verify each requirement in turn, stopping at the first failure.

    Returns a mapping of executable name to the version found (None for
    presence-only requirements).
    """
    found = {}
    for requirement in requirements:
        found[requirement.executable_name] = verify_tool(requirement, runner=runner)
    return found
