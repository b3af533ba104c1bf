# ================================================================================
# Environment and dependency verification utilities
# ================================================================================

import shutil
from collections.abc import Iterable

from preflight.errors import ToolNotPresent
from preflight.tools.checker import Runner, ToolRequirement, check_presence
from preflight.utils.utils import run_capture


def find_executable(name: str) -> str | None:
    """Return the path of an executable on the PATH, or None."""
    return shutil.which(name)


def get_missing_tools(
    requirements: Iterable[ToolRequirement], runner: Runner = run_capture
) -> list[str]:
    """
    Identify missing system dependencies without stopping at the first one.

    Args:
        requirements: Tools to look for; only their presence tests are run.
        runner: Subprocess primitive used for the presence tests.

    Returns:
        List of missing executable names, in input order.
    """
    missing = []
    for requirement in requirements:
        try:
            check_presence(
                requirement.executable_name, requirement.presence_test, runner=runner
            )
        except ToolNotPresent:
            missing.append(requirement.executable_name)
    return missing
