from preflight.tools.checker import (
    ToolRequirement,
    check_presence,
    check_version,
    verify_tool,
    verify_tools,
)
from preflight.tools.version import Version

__all__ = [
    "ToolRequirement",
    "Version",
    "check_presence",
    "check_version",
    "verify_tool",
    "verify_tools",
]
