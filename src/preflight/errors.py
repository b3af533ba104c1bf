# ================================================================================
# Error types raised by the genome input resolver and the external tool verifier
# ================================================================================

from __future__ import annotations


class PreflightError(Exception):
    """Base class for precondition failures the caller is expected to report."""

    exit_code = 1


# ---------------------------------------------------------------------------
# Genome input errors
# ---------------------------------------------------------------------------


class GenomeInputError(PreflightError):
    """A genome input specification could not be turned into a list of paths."""


class NoGenomeSpecification(GenomeInputError):
    def __init__(self):
        super().__init__("No genomes options specified")


class ConflictingGenomeSpecification(GenomeInputError):
    def __init__(self, supplied: list[str]):
        self.supplied = supplied
        super().__init__(
            f"Only one genome input may be given, but found: {', '.join(supplied)}"
        )


class EmptyGenomeDirectory(GenomeInputError):
    def __init__(self, directory: str, extension: str):
        self.directory = directory
        self.extension = extension
        super().__init__(
            f"Found 0 genomes with extension '{extension}' in directory "
            f"'{directory}', cannot continue."
        )


class GenomeDirectoryUnreadable(GenomeInputError):
    def __init__(self, directory: str, reason: str):
        self.directory = directory
        self.reason = reason
        super().__init__(f"Unable to list genome directory '{directory}': {reason}")


class ListFileUnreadable(GenomeInputError):
    def __init__(self, path: str, reason: str, line_number: int | None = None):
        self.path = path
        self.reason = reason
        self.line_number = line_number
        where = f" at line {line_number}" if line_number is not None else ""
        super().__init__(f"Unable to read genome list file '{path}'{where}: {reason}")


# ---------------------------------------------------------------------------
# External tool errors
# ---------------------------------------------------------------------------


class ToolCheckError(PreflightError):
    """An external executable is missing or unusable."""

    def __init__(self, executable_name: str, message: str):
        self.executable_name = executable_name
        super().__init__(message)


class ToolNotPresent(ToolCheckError):
    def __init__(self, executable_name: str, command: str, returncode: int, stderr: str):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = (
            f"Could not find an available {executable_name} executable. "
            f"Testing for presence with `{command}` failed (exit status {returncode})."
        )
        if stderr.strip():
            message += f" STDERR was: {stderr.strip()}"
        super().__init__(executable_name, message)


class VersionProbeFailed(ToolCheckError):
    def __init__(self, executable_name: str, command: str, returncode: int, stderr: str):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = (
            f"Cannot continue without {executable_name}. "
            f"Finding version with `{command}` failed (exit status {returncode})."
        )
        if stderr.strip():
            message += f" STDERR was: {stderr.strip()}"
        super().__init__(executable_name, message)


class VersionUnparseable(ToolCheckError):
    def __init__(self, executable_name: str, output: str):
        self.output = output
        super().__init__(
            executable_name,
            f"Unable to parse version number from executable {executable_name} "
            f"(output was {output!r})",
        )


class VersionTooOld(ToolCheckError):
    exit_code = 11

    def __init__(self, executable_name: str, found: str, required: str):
        self.found = found
        self.required = required
        super().__init__(
            executable_name,
            f"It appears the available version of {executable_name} is too old "
            f"(found version {found}, required is {required})",
        )


# ---------------------------------------------------------------------------
# Programming errors
# ---------------------------------------------------------------------------


class InvalidVersionError(ValueError):
    """A version string does not look like dot-separated numbers."""
