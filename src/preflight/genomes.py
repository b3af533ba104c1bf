# ================================================================================
# Genome input resolution
#
# Turns one of three genome input forms (explicit files, a directory filtered
# by extension, or a list-file of paths) into a single ordered list of paths.
# Only file names are inspected here; FASTA contents are never read.
# ================================================================================

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from preflight.errors import (
    ConflictingGenomeSpecification,
    EmptyGenomeDirectory,
    GenomeDirectoryUnreadable,
    ListFileUnreadable,
    NoGenomeSpecification,
)

DEFAULT_GENOME_EXTENSION = "fna"


@dataclass(frozen=True)
class ExplicitFiles:
    """Genome paths given one by one. Order and duplicates are kept."""

    paths: Sequence[str]

    def __post_init__(self):
        object.__setattr__(self, "paths", tuple(str(p) for p in self.paths))


@dataclass(frozen=True)
class GenomeDirectory:
    """A directory whose direct entries with a given extension are genomes."""

    path: str
    extension: str = DEFAULT_GENOME_EXTENSION

    @property
    def normalised_extension(self) -> str:
        return self.extension[1:] if self.extension.startswith(".") else self.extension


@dataclass(frozen=True)
class GenomeListFile:
    """A text file listing one genome path per line."""

    path: str


GenomeSpecification = ExplicitFiles | GenomeDirectory | GenomeListFile


def genome_specification_from_options(
    files: Sequence[str] | None = None,
    directory: str | None = None,
    extension: str = DEFAULT_GENOME_EXTENSION,
    list_file: str | None = None,
) -> GenomeSpecification:
    """
    Build a GenomeSpecification from command-line style options.

    Exactly one of `files`, `directory` and `list_file` must be given; an
    empty `files` list counts as not given.
    """
    supplied = []
    if files:
        supplied.append("genome FASTA files")
    if directory is not None:
        supplied.append("genome FASTA directory")
    if list_file is not None:
        supplied.append("genome FASTA list file")

    if not supplied:
        raise NoGenomeSpecification()
    if len(supplied) > 1:
        raise ConflictingGenomeSpecification(supplied)

    if files:
        return ExplicitFiles(files)
    if directory is not None:
        return GenomeDirectory(str(directory), extension)
    return GenomeListFile(str(list_file))


def resolve_genome_files(
    spec: GenomeSpecification | None, fail_on_empty: bool = False
) -> list[str]:
    """
    Resolve a genome specification into a list of genome file paths.

    Args:
        spec: Which genomes to use. None means no input was given.
        fail_on_empty: Raise EmptyGenomeDirectory when a directory scan
            matches no files, instead of returning an empty list.

    Returns:
        List of paths as strings. Explicit files are returned verbatim and are
        not checked for existence.
    """
    if spec is None:
        raise NoGenomeSpecification()
    if isinstance(spec, ExplicitFiles):
        return list(spec.paths)
    if isinstance(spec, GenomeDirectory):
        return _scan_genome_directory(spec, fail_on_empty)
    if isinstance(spec, GenomeListFile):
        return _read_genome_list_file(spec)
    raise TypeError(f"Unsupported genome specification: {spec!r}")


def _scan_genome_directory(spec: GenomeDirectory, fail_on_empty: bool) -> list[str]:
    extension = spec.normalised_extension
    try:
        entries = list(Path(spec.path).iterdir())
    except OSError as e:
        logger.error(f"Unable to list genome directory '{spec.path}': {e}")
        raise GenomeDirectoryUnreadable(spec.path, str(e)) from e

    # Listing order is whatever the filesystem returns; no sorting.
    genome_fasta_files = []
    for entry in entries:
        suffix = entry.suffix
        if not suffix:
            logger.info(
                f"Not using directory entry '{entry}' as a genome FASTA file, "
                f"as it has no extension"
            )
        elif suffix[1:] == extension:
            genome_fasta_files.append(str(entry))
        else:
            logger.info(
                f"Not using directory entry '{entry}' as a genome FASTA file, "
                f"as it does not end with the extension '{extension}'"
            )

    if not genome_fasta_files:
        if fail_on_empty:
            logger.error(
                f"Found 0 genomes from the genome FASTA directory '{spec.path}', "
                f"cannot continue."
            )
            raise EmptyGenomeDirectory(spec.path, extension)
        logger.warning(f"Found 0 genomes in directory '{spec.path}'")
        return []

    logger.debug(f"Found {len(genome_fasta_files)} genomes in '{spec.path}'")
    return genome_fasta_files


def _read_genome_list_file(spec: GenomeListFile) -> list[str]:
    # Blank lines are kept as empty-string entries.
    genome_fasta_files = []
    line_number = 0
    try:
        with open(spec.path, "rb") as f:
            for line_number, raw in enumerate(f, start=1):
                try:
                    line = raw.decode("utf-8")
                except UnicodeDecodeError as e:
                    logger.error(
                        f"Unable to decode line {line_number} of '{spec.path}': {e}"
                    )
                    raise ListFileUnreadable(spec.path, str(e), line_number) from e
                genome_fasta_files.append(line.strip())
    except OSError as e:
        failed_line = line_number + 1 if line_number else None
        logger.error(f"Unable to read genome list file '{spec.path}': {e}")
        raise ListFileUnreadable(spec.path, str(e), failed_line) from e

    logger.debug(f"Read {len(genome_fasta_files)} genome paths from '{spec.path}'")
    return genome_fasta_files
