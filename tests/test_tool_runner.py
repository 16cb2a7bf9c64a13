"""
Tests for ToolCommandBuilder and ToolRunner.

ToolRunner tests run the current interpreter as the external tool so they work
without mount privileges.
"""

import os
import sys
from unittest.mock import patch

import pytest

from iso_mounter.services.iso_mount import ProcessResult, ToolCommandBuilder, ToolRunner


class TestToolCommandBuilder:

    def test_superuser_runs_tool_directly(self):
        builder = ToolCommandBuilder("/usr/bin/sudo", euid_provider=lambda: 0)

        assert builder.is_superuser()
        assert builder.build("/usr/bin/mount", "/isos/a.iso", "/tmp/m/1") == [
            "/usr/bin/mount",
            "/isos/a.iso",
            "/tmp/m/1",
        ]

    def test_regular_user_escalates(self):
        builder = ToolCommandBuilder("/usr/bin/sudo", euid_provider=lambda: 1000)

        assert not builder.is_superuser()
        assert builder.build("/usr/bin/umount", "/tmp/m/1") == [
            "/usr/bin/sudo",
            "/usr/bin/umount",
            "/tmp/m/1",
        ]

    @pytest.mark.skipif(not hasattr(os, "geteuid"), reason="requires os.geteuid")
    def test_default_uses_effective_uid(self):
        builder = ToolCommandBuilder("/usr/bin/sudo")

        with patch("os.geteuid", return_value=0):
            assert builder.is_superuser()
        with patch("os.geteuid", return_value=501):
            assert not builder.is_superuser()


class TestToolRunner:

    @pytest.mark.asyncio
    async def test_captures_exit_code_and_first_lines(self):
        script = (
            "import sys\n"
            "print('first out')\n"
            "print('second out')\n"
            "sys.stderr.write('first err\\nsecond err\\n')\n"
            "sys.exit(3)\n"
        )

        result = await ToolRunner().run([sys.executable, "-c", script])

        assert isinstance(result, ProcessResult)
        assert result.return_code == 3
        assert not result.succeeded
        assert result.stdout_line == "first out"
        assert result.stderr_line == "first err"
        assert result.command == [sys.executable, "-c", script]

    @pytest.mark.asyncio
    async def test_success_without_output(self):
        result = await ToolRunner().run([sys.executable, "-c", "pass"])

        assert result.succeeded
        assert result.stdout_line == ""
        assert result.stderr_line == ""

    @pytest.mark.asyncio
    async def test_arguments_are_not_shell_interpreted(self):
        argument = "/isos/a b; echo injected $HOME.iso"

        result = await ToolRunner().run(
            [sys.executable, "-c", "import sys; print(sys.argv[1])", argument]
        )

        assert result.stdout_line == argument

    @pytest.mark.asyncio
    async def test_missing_executable_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            await ToolRunner().run([str(tmp_path / "no-such-tool")])

    @pytest.mark.asyncio
    async def test_large_output_does_not_block(self):
        script = "import sys; sys.stdout.write('x' * 200000 + '\\n'); sys.stderr.write('e' * 200000)"

        result = await ToolRunner().run([sys.executable, "-c", script])

        assert result.succeeded
        assert len(result.stdout_line) == 200000
