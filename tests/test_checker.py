# ================================================================================
# Tests for presence and version checks of external tools
# ================================================================================

import pytest

from preflight.errors import (
    InvalidVersionError,
    ToolNotPresent,
    VersionProbeFailed,
    VersionTooOld,
    VersionUnparseable,
)
from preflight.tools.checker import (
    ToolRequirement,
    check_presence,
    check_version,
    extract_version_token,
    verify_tool,
    verify_tools,
)
from preflight.tools.version import Version
from preflight.utils.utils import ProbeResult


class FakeRunner:
    """Stands in for run_capture: returns canned results keyed by command."""

    def __init__(self, results=None, default=None):
        self.results = results or {}
        self.default = default or ProbeResult("", "", 0)
        self.commands = []

    def __call__(self, command):
        self.commands.append(command)
        return self.results.get(command, self.default)


class TestCheckPresence:
    def test_exit_zero_passes(self):
        runner = FakeRunner({"which mmseqs": ProbeResult("/usr/bin/mmseqs\n", "", 0)})
        assert check_presence("mmseqs", "which mmseqs", runner=runner) is None
        assert runner.commands == ["which mmseqs"]

    def test_stdout_is_irrelevant(self):
        runner = FakeRunner(default=ProbeResult("", "", 0))
        check_presence("mmseqs", "which mmseqs", runner=runner)

    def test_nonzero_exit_raises_with_stderr(self):
        runner = FakeRunner(default=ProbeResult("", "mmseqs: not found\n", 1))
        with pytest.raises(ToolNotPresent) as exc_info:
            check_presence("mmseqs", "which mmseqs", runner=runner)
        err = exc_info.value
        assert err.executable_name == "mmseqs"
        assert err.command == "which mmseqs"
        assert err.returncode == 1
        assert err.stderr == "mmseqs: not found\n"
        assert "mmseqs: not found" in str(err)

    def test_not_retried(self):
        runner = FakeRunner(default=ProbeResult("", "", 127))
        with pytest.raises(ToolNotPresent):
            check_presence("x", "which x", runner=runner)
        assert len(runner.commands) == 1

    def test_real_shell(self):
        """Uses bash, like the presence checks in production."""
        check_presence("bash", "exit 0")
        with pytest.raises(ToolNotPresent) as exc_info:
            check_presence("nothing", "echo oops >&2; exit 1")
        assert "oops" in exc_info.value.stderr


class TestExtractVersionToken:
    def test_last_word_of_first_line(self):
        assert extract_version_token("tool", "tool version 3.4.1\n") == "3.4.1"

    def test_only_first_line_considered(self):
        output = "samtools 1.17\nUsing htslib 1.17\nCopyright (C) 2023\n"
        assert extract_version_token("samtools", output) == "1.17"

    def test_leading_v_stripped(self):
        assert extract_version_token("tool", "v2.0\n") == "2.0"

    def test_only_one_leading_v_stripped(self):
        assert extract_version_token("tool", "vv2.0") == "v2.0"

    def test_empty_output(self):
        with pytest.raises(VersionUnparseable):
            extract_version_token("tool", "   \n")


class TestCheckVersion:
    def test_default_command_merges_stderr(self):
        runner = FakeRunner(default=ProbeResult("prodigal 2.6.3\n", "", 0))
        check_version("prodigal", "2.6.3", runner=runner)
        assert runner.commands == ["prodigal --version 2>&1"]

    def test_override_command(self):
        cmd = "prodigal -v 2>&1 | grep V"
        runner = FakeRunner({cmd: ProbeResult("Prodigal V2.6.3\n", "", 0)})
        # The token is "V2.6.3": only a lowercase leading v on the whole output is stripped.
        with pytest.raises(VersionUnparseable):
            check_version("prodigal", "2.6.3", version_command=cmd, runner=runner)
        assert runner.commands == [cmd]

    def test_newer_version_passes(self):
        runner = FakeRunner(default=ProbeResult("tool version 1.10.0\n", "", 0))
        found = check_version("tool", "1.9.0", runner=runner)
        assert found == Version.parse("1.10.0")

    def test_v_prefix_equal_to_minimum(self):
        runner = FakeRunner(default=ProbeResult("v2.0\n", "", 0))
        assert check_version("tool", "2.0.0", runner=runner) == Version.parse("2.0.0")

    def test_too_old(self):
        runner = FakeRunner(default=ProbeResult("tool 1.2.9\n", "", 0))
        with pytest.raises(VersionTooOld) as exc_info:
            check_version("tool", "1.3", runner=runner)
        err = exc_info.value
        assert err.executable_name == "tool"
        assert err.found == "1.2.9"
        assert err.required == "1.3"
        assert err.exit_code == 11

    def test_nonzero_exit_rejected(self):
        runner = FakeRunner(default=ProbeResult("", "unknown option\n", 2))
        with pytest.raises(VersionProbeFailed) as exc_info:
            check_version("tool", "1.0", runner=runner)
        assert exc_info.value.stderr == "unknown option\n"
        assert exc_info.value.returncode == 2

    def test_nonzero_exit_allowed(self):
        runner = FakeRunner(default=ProbeResult("Mash version 2.3\n", "", 1))
        assert check_version("mash", "2.0", allow_nonzero_exit=True, runner=runner)

    def test_unparseable_token(self):
        runner = FakeRunner(default=ProbeResult("no version here\n", "", 0))
        with pytest.raises(VersionUnparseable) as exc_info:
            check_version("tool", "1.0", runner=runner)
        assert exc_info.value.executable_name == "tool"

    def test_empty_output_unparseable(self):
        runner = FakeRunner(default=ProbeResult("", "", 0))
        with pytest.raises(VersionUnparseable):
            check_version("tool", "1.0", runner=runner)

    def test_malformed_minimum_is_programming_error(self):
        runner = FakeRunner(default=ProbeResult("tool 1.0\n", "", 0))
        with pytest.raises(InvalidVersionError, match="Programming error"):
            check_version("tool", "latest", runner=runner)
        assert runner.commands == []

    def test_idempotent(self):
        runner = FakeRunner(default=ProbeResult("tool 1.5\n", "", 0))
        first = check_version("tool", "1.0", runner=runner)
        second = check_version("tool", "1.0", runner=runner)
        assert first == second

        old = FakeRunner(default=ProbeResult("tool 0.5\n", "", 0))
        for _ in range(2):
            with pytest.raises(VersionTooOld):
                check_version("tool", "1.0", runner=old)

    def test_real_shell(self):
        check_version("fake", "3.4", version_command="echo 'fake version 3.4.1'")


class TestVerifyTools:
    def test_presence_only_requirement(self):
        runner = FakeRunner()
        assert verify_tool(ToolRequirement("mmseqs"), runner=runner) is None
        assert runner.commands == ["which mmseqs"]

    def test_presence_then_version(self):
        runner = FakeRunner(default=ProbeResult("samtools 1.17\n", "", 0))
        req = ToolRequirement("samtools", min_version="1.9")
        assert verify_tool(req, runner=runner) == Version.parse("1.17")
        assert runner.commands == ["which samtools", "samtools --version 2>&1"]

    def test_custom_presence_command(self):
        runner = FakeRunner()
        req = ToolRequirement("gtdbtk", presence_command="gtdbtk -h")
        verify_tool(req, runner=runner)
        assert runner.commands == ["gtdbtk -h"]

    def test_stops_at_first_failure(self):
        runner = FakeRunner(
            {"which b": ProbeResult("", "", 1)}, default=ProbeResult("x 1.0\n", "", 0)
        )
        reqs = [ToolRequirement("a"), ToolRequirement("b"), ToolRequirement("c")]
        with pytest.raises(ToolNotPresent) as exc_info:
            verify_tools(reqs, runner=runner)
        assert exc_info.value.executable_name == "b"
        assert "which c" not in runner.commands

    def test_returns_found_versions(self):
        runner = FakeRunner(default=ProbeResult("x 2.1\n", "", 0))
        reqs = [ToolRequirement("a", min_version="2"), ToolRequirement("b")]
        assert verify_tools(reqs, runner=runner) == {"a": Version.parse("2.1"), "b": None}
