# ================================================================================
# Command-line interface for preflight checks
#
# Thin wrapper around the tool verifier and the genome input resolver.
# ================================================================================

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from preflight.config import load_requirements, parse_tool_option
from preflight.errors import PreflightError
from preflight.genomes import (
    DEFAULT_GENOME_EXTENSION,
    genome_specification_from_options,
    resolve_genome_files,
)
from preflight.tools.checker import ToolRequirement, verify_tool
from preflight.utils.env import find_executable, get_missing_tools
from preflight.utils.utils import setup_logger
from preflight.version import __version__

app = typer.Typer(
    name="preflight",
    help="Check external tools and genome inputs before running a pipeline.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
err_console = Console(stderr=True)

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="JSON file listing required tools.",
    ),
]
ToolOption = Annotated[
    list[str] | None,
    typer.Option(
        "--tool",
        "-t",
        help='Required tool, optionally with a minimum version, e.g. "samtools>=1.9".',
    ),
]


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold green]preflight[/bold green] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Enable verbose output (DEBUG level)."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only report errors."),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Also write log messages to this file."),
    ] = None,
) -> None:
    """preflight - verify external tools and resolve genome inputs."""
    setup_logger(verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None)


def _collect_requirements(
    config_file: Path | None, tools: list[str] | None
) -> list[ToolRequirement]:
    requirements = []
    try:
        if config_file is not None:
            requirements.extend(load_requirements(config_file))
        for value in tools or []:
            requirements.append(parse_tool_option(value))
    except (FileNotFoundError, ValueError) as e:
        err_console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=1) from e

    if not requirements:
        err_console.print("[bold red]Error: no tools given; use --config or --tool.[/bold red]")
        raise typer.Exit(code=2)
    return requirements


@app.command()
def tools(config_file: ConfigOption = None, tool: ToolOption = None) -> None:
    """
    Verify that required tools are installed and recent enough.

    Tools are checked in order and the first failure stops the run.

    Example:
        preflight tools -t "samtools>=1.9" -t mmseqs
    """
    requirements = _collect_requirements(config_file, tool)

    table = Table(title="External tools")
    table.add_column("Tool")
    table.add_column("Required")
    table.add_column("Found")

    for requirement in requirements:
        try:
            found = verify_tool(requirement)
        except PreflightError as e:
            err_console.print(f"[bold red]Error: {e}[/bold red]")
            raise typer.Exit(code=e.exit_code) from e
        table.add_row(
            requirement.executable_name,
            requirement.min_version or "any",
            str(found) if found is not None else "present",
        )

    console.print(table)
    console.print("[bold green]All tools present.[/bold green]")


@app.command()
def status(config_file: ConfigOption = None, tool: ToolOption = None) -> None:
    """Report which tools are present, without stopping at the first missing one."""
    requirements = _collect_requirements(config_file, tool)
    missing = set(get_missing_tools(requirements))

    marks = {True: "[green]✓[/green]", False: "[red]✗[/red]"}
    for requirement in requirements:
        name = requirement.executable_name
        present = name not in missing
        location = find_executable(name) or ""
        console.print(f"  {marks[present]} {name}  {location}")

    if missing:
        raise typer.Exit(code=1)


@app.command()
def genomes(
    genome_fasta_files: Annotated[
        list[str] | None,
        typer.Option(
            "--genome-fasta-files",
            "-f",
            help="Path to a genome FASTA file. May be repeated.",
        ),
    ] = None,
    genome_fasta_directory: Annotated[
        Path | None,
        typer.Option(
            "--genome-fasta-directory",
            "-d",
            help="Directory containing genome FASTA files.",
        ),
    ] = None,
    genome_fasta_extension: Annotated[
        str,
        typer.Option(
            "--genome-fasta-extension",
            "-x",
            help="File extension of genomes in --genome-fasta-directory.",
        ),
    ] = DEFAULT_GENOME_EXTENSION,
    genome_fasta_list: Annotated[
        Path | None,
        typer.Option(
            "--genome-fasta-list",
            help="File containing one genome FASTA path per line.",
        ),
    ] = None,
    allow_empty: Annotated[
        bool,
        typer.Option(
            "--allow-empty",
            help="Do not fail when a directory contains no matching genomes.",
        ),
    ] = False,
) -> None:
    """Resolve genome inputs and print one genome path per line."""
    try:
        spec = genome_specification_from_options(
            files=genome_fasta_files,
            directory=str(genome_fasta_directory) if genome_fasta_directory else None,
            extension=genome_fasta_extension,
            list_file=str(genome_fasta_list) if genome_fasta_list else None,
        )
        paths = resolve_genome_files(spec, fail_on_empty=not allow_empty)
    except PreflightError as e:
        err_console.print(f"[bold red]Error: {e}[/bold red]")
        raise typer.Exit(code=e.exit_code) from e

    for path in paths:
        typer.echo(path)


if __name__ == "__main__":
    app()
