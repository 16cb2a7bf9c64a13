"""
ISO Mount Module

Mounts ISO images on Linux hosts by running mount(8)/umount(8), escalating
through sudo when the service does not run as root.

Components:
- LinuxIsoManager: mount lifecycle orchestrator
- IsoMount: handle for one mounted image
- IsoMounter: abstract mounter interface
- MountSlotPool: bounds concurrent mounts
- ToolCommandBuilder / ToolRunner: command construction and process execution
- PlatformDetector: Unix / Darwin detection
"""

from .base_iso_mounter import IsoMounter
from .iso_mount import IsoMount
from .linux_iso_manager import LinuxIsoManager
from .mount_slots import MountSlotPool
from .platform_detector import PlatformDetector
from .tool_runner import ProcessResult, ToolCommandBuilder, ToolRunner

__all__ = [
    "IsoMounter",
    "IsoMount",
    "LinuxIsoManager",
    "MountSlotPool",
    "PlatformDetector",
    "ProcessResult",
    "ToolCommandBuilder",
    "ToolRunner",
]
