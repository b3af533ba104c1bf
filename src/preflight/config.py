# ================================================================================
# Tool requirement configuration
#
# Requirements come from JSON files ({"tools": [...]}) or from command-line
# options of the form "name" or "name>=version".
# ================================================================================

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from preflight.errors import InvalidVersionError
from preflight.tools.checker import ToolRequirement
from preflight.tools.version import Version

# JSON key -> ToolRequirement field
_FIELDS = {
    "name": "executable_name",
    "min_version": "min_version",
    "presence_command": "presence_command",
    "version_command": "version_command",
    "allow_nonzero_exit": "allow_nonzero_exit",
}


def _validate_min_version(name: str, min_version: str | None) -> None:
    if min_version is None:
        return
    try:
        Version.parse(min_version)
    except InvalidVersionError as e:
        raise ValueError(f"Invalid min_version for '{name}': {min_version!r}") from e


def requirement_from_dict(entry: dict) -> ToolRequirement:
    """Build a ToolRequirement from one entry of a requirements file."""
    if not isinstance(entry, dict):
        raise ValueError(f"Tool entry must be an object, got {entry!r}")

    unknown = set(entry) - set(_FIELDS)
    if unknown:
        raise ValueError(f"Unknown keys in tool entry: {', '.join(sorted(unknown))}")

    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise ValueError(f"Tool entry is missing a 'name': {entry!r}")

    for key in ("min_version", "presence_command", "version_command"):
        value = entry.get(key)
        if value is not None and not isinstance(value, str):
            raise ValueError(f"'{key}' for '{name}' must be a string")
    if not isinstance(entry.get("allow_nonzero_exit", False), bool):
        raise ValueError(f"'allow_nonzero_exit' for '{name}' must be true or false")

    _validate_min_version(name, entry.get("min_version"))
    return ToolRequirement(**{_FIELDS[key]: value for key, value in entry.items()})


def load_requirements(path: str | Path) -> list[ToolRequirement]:
    """
    Load tool requirements from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not valid JSON or an entry is malformed.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Requirements file not found: {path}")

    with path.open() as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("tools"), list):
        raise ValueError(f"{path} must contain an object with a 'tools' list")

    requirements = [requirement_from_dict(entry) for entry in data["tools"]]
    logger.debug(f"Loaded {len(requirements)} tool requirements from {path}")
    return requirements


def parse_tool_option(value: str) -> ToolRequirement:
    """Parse "samtools>=1.9" (or just "samtools") into a ToolRequirement."""
    name, sep, min_version = value.partition(">=")
    name = name.strip()
    min_version = min_version.strip()
    if not name:
        raise ValueError(f"Missing tool name in {value!r}")
    if sep and not min_version:
        raise ValueError(f"Missing minimum version in {value!r}")

    _validate_min_version(name, min_version or None)
    return ToolRequirement(executable_name=name, min_version=min_version or None)
