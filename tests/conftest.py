"""
Pytest configuration og shared fixtures.
"""

import asyncio
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pytest

from iso_mounter.config import Settings
from iso_mounter.dependencies import reset_singletons
from iso_mounter.services.iso_mount import (
    LinuxIsoManager,
    PlatformDetector,
    ProcessResult,
    ToolCommandBuilder,
)


def tool_name(command: Sequence[str]) -> str:
    return "umount" if any(Path(part).name == "umount" for part in command) else "mount"


class FakeToolRunner:
    """Stands in for mount/umount and records every command line it is asked to run."""

    def __init__(self):
        self.commands: List[List[str]] = []
        self.return_codes: Dict[str, int] = {"mount": 0, "umount": 0}
        self.errors: Dict[str, Exception] = {}
        self.started: Optional[asyncio.Event] = None
        self.gate: Optional[asyncio.Event] = None

    def commands_for(self, tool: str) -> List[List[str]]:
        return [command for command in self.commands if tool_name(command) == tool]

    async def run(self, command: Sequence[str]) -> ProcessResult:
        command = list(command)
        self.commands.append(command)

        if self.started is not None:
            self.started.set()
        if self.gate is not None:
            await self.gate.wait()

        tool = tool_name(command)
        if tool in self.errors:
            raise self.errors[tool]

        return_code = self.return_codes[tool]
        return ProcessResult(
            command=command,
            return_code=return_code,
            stdout_line="",
            stderr_line=f"{tool}: failed" if return_code else "",
        )


@pytest.fixture(autouse=True)
def clean_singletons():
    """Automatically reset singletons before hver test."""
    reset_singletons()
    yield
    reset_singletons()


@pytest.fixture
def tool_dir(tmp_path) -> Path:
    """Directory with placeholder mount, umount and sudo executables."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    for name in ("mount", "umount", "sudo"):
        (bin_dir / name).write_text("#!/bin/sh\nexit 0\n")
    return bin_dir


@pytest.fixture
def mount_root(tmp_path) -> Path:
    return tmp_path / "mnt"


@pytest.fixture
def settings(tmp_path, tool_dir, mount_root) -> Settings:
    return Settings(
        _env_file=None,
        mount_root=str(mount_root),
        mount_tool_path=str(tool_dir / "mount"),
        unmount_tool_path=str(tool_dir / "umount"),
        privilege_tool_path=str(tool_dir / "sudo"),
        log_file_path=str(tmp_path / "logs" / "iso_mounter.log"),
    )


@pytest.fixture
def tool_runner() -> FakeToolRunner:
    return FakeToolRunner()


@pytest.fixture
def root_command_builder(settings) -> ToolCommandBuilder:
    return ToolCommandBuilder(settings.privilege_tool_path, euid_provider=lambda: 0)


@pytest.fixture
def user_command_builder(settings) -> ToolCommandBuilder:
    return ToolCommandBuilder(settings.privilege_tool_path, euid_provider=lambda: 1000)


@pytest.fixture
def linux_platform() -> PlatformDetector:
    return PlatformDetector(kernel_name_provider=lambda: "Linux", os_name="posix")


@pytest.fixture
def iso_manager(settings, tool_runner, root_command_builder, linux_platform) -> LinuxIsoManager:
    """LinuxIsoManager running as root on Linux with fake mount tools."""
    return LinuxIsoManager(
        settings=settings,
        tool_runner=tool_runner,
        command_builder=root_command_builder,
        platform_detector=linux_platform,
    )
