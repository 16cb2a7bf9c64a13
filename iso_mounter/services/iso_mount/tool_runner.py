"""Tool Runner - builds and executes mount/umount command lines."""

import asyncio
import os
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence


@dataclass(frozen=True)
class ProcessResult:
    command: List[str]
    return_code: int
    stdout_line: str = ""
    stderr_line: str = ""

    @property
    def succeeded(self) -> bool:
        return self.return_code == 0


def _first_line(output: Optional[bytes]) -> str:
    lines = output.decode(errors="replace").splitlines() if output else []
    return lines[0] if lines else ""


def _effective_uid() -> int:
    geteuid = getattr(os, "geteuid", None)
    return geteuid() if geteuid else -1


class ToolCommandBuilder:
    """Decides privilege escalation and builds argument vectors (never shell strings)."""

    def __init__(
        self,
        privilege_tool_path: str,
        euid_provider: Optional[Callable[[], int]] = None,
    ):
        self._privilege_tool_path = privilege_tool_path
        self._euid_provider = euid_provider or _effective_uid

    def is_superuser(self) -> bool:
        return self._euid_provider() == 0

    def build(self, tool_path: str, *args: str) -> List[str]:
        if self.is_superuser():
            return [tool_path, *args]
        return [self._privilege_tool_path, tool_path, *args]


class ToolRunner:
    """Runs an external tool with captured output and waits for it to exit."""

    async def run(self, command: Sequence[str]) -> ProcessResult:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()

        return ProcessResult(
            command=list(command),
            return_code=process.returncode,
            stdout_line=_first_line(stdout),
            stderr_line=_first_line(stderr),
        )
