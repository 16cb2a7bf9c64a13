from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class MountState(str, Enum):
    """
    Lifecycle of a mounted image.

    Workflow: Mounted -> Released
    Released is terminal.
    """

    MOUNTED = "Mounted"  # Image is mounted and holds a mount slot
    RELEASED = "Released"  # Unmounted (or disposed), slot given back


class MountRequest(BaseModel):
    iso_path: str = Field(..., description="Absolut sti til ISO filen")


class MountInfo(BaseModel):
    """Snapshot of a mount handle for API responses."""

    mount_id: str = Field(..., description="Unique identifier, also the mount point name")
    iso_path: str
    mount_path: str
    state: MountState
    mounted_at: datetime


class CanMountResponse(BaseModel):
    path: str
    can_mount: bool


class MounterInfo(BaseModel):
    name: str
    platform: str
    requires_installation: bool
    is_installed: bool
    max_concurrent_mounts: int
    available_slots: int
    active_mounts: int
