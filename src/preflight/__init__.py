from preflight.errors import (
    ConflictingGenomeSpecification,
    EmptyGenomeDirectory,
    GenomeDirectoryUnreadable,
    GenomeInputError,
    InvalidVersionError,
    ListFileUnreadable,
    NoGenomeSpecification,
    PreflightError,
    ToolCheckError,
    ToolNotPresent,
    VersionProbeFailed,
    VersionTooOld,
    VersionUnparseable,
)
from preflight.genomes import (
    ExplicitFiles,
    GenomeDirectory,
    GenomeListFile,
    GenomeSpecification,
    genome_specification_from_options,
    resolve_genome_files,
)
from preflight.tools import (
    ToolRequirement,
    Version,
    check_presence,
    check_version,
    verify_tool,
    verify_tools,
)
from preflight.version import __version__

__all__ = [
    "ConflictingGenomeSpecification",
    "EmptyGenomeDirectory",
    "ExplicitFiles",
    "GenomeDirectory",
    "GenomeDirectoryUnreadable",
    "GenomeInputError",
    "GenomeListFile",
    "GenomeSpecification",
    "InvalidVersionError",
    "ListFileUnreadable",
    "NoGenomeSpecification",
    "PreflightError",
    "ToolCheckError",
    "ToolNotPresent",
    "ToolRequirement",
    "Version",
    "VersionProbeFailed",
    "VersionTooOld",
    "VersionUnparseable",
    "__version__",
    "check_presence",
    "check_version",
    "genome_specification_from_options",
    "resolve_genome_files",
    "verify_tool",
    "verify_tools",
]
