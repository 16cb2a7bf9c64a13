"""Platform Detector - kernel/OS detection for ISO mounting."""

import logging
import os
import platform
from typing import Callable, Optional


def _uname_sysname() -> str:
    return os.uname().sysname


class PlatformDetector:
    """Answers whether this host can mount ISO images with mount(8). SRP: Platform detection ONLY."""

    def __init__(
        self,
        kernel_name_provider: Optional[Callable[[], str]] = None,
        os_name: Optional[str] = None,
    ):
        self._kernel_name_provider = kernel_name_provider or _uname_sysname
        self._os_name = os_name if os_name is not None else os.name

    def is_unix(self) -> bool:
        return self._os_name == "posix"

    def kernel_name(self) -> Optional[str]:
        """Kernel name as reported by uname, or None when it cannot be queried."""
        try:
            return self._kernel_name_provider()
        except Exception as e:
            logging.debug(f"Kernel name query failed, assuming non-Darwin host: {e}")
            return None

    def is_darwin(self) -> bool:
        return self.kernel_name() == "Darwin"

    def supports_iso_mounting(self) -> bool:
        return self.is_unix() and not self.is_darwin()

    def detect_platform(self) -> str:
        """Detect current platform. Returns: macos, windows, linux or the lowercased system name."""
        if self.is_darwin():
            return "macos"

        system = (self.kernel_name() or platform.system()).lower()
        if system.startswith("win"):
            return "windows"
        return system or "unknown"
