# iso_mounter/core/exceptions.py
from typing import Iterable, Optional


class IsoMountError(Exception):
    """Base class for all ISO mount lifecycle errors."""


class InvalidIsoPathError(IsoMountError, ValueError):
    """Raised when an empty or missing image path is passed to mount."""
    def __init__(self, iso_path: Optional[str]):
        self.iso_path = iso_path
        super().__init__("ISO path must be a non-empty string")


class MountToolsUnavailableError(IsoMountError):
    """Raised when mount, umount or the privilege tool is missing."""
    def __init__(self, missing_tools: Iterable[str]):
        self.missing_tools = list(missing_tools)
        super().__init__(
            f"Missing mount, umount or privilege tool: {', '.join(self.missing_tools)}. "
            "Unable to continue"
        )


class MountPointIOError(IsoMountError):
    """Raised when a mount point directory cannot be created or removed."""
    def __init__(self, mount_path: str, message: str):
        self.mount_path = mount_path
        super().__init__(message)


class MountPointPermissionError(MountPointIOError):
    def __init__(self, mount_path: str, iso_path: str):
        self.iso_path = iso_path
        super().__init__(
            mount_path,
            f"Unable to create mount point {mount_path} (permission denied) for {iso_path}",
        )


class MountFailedError(IsoMountError):
    """Raised when the mount tool exits non-zero or cannot be started."""
    def __init__(
        self,
        iso_path: str,
        return_code: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        self.iso_path = iso_path
        self.return_code = return_code
        self.reason = reason
        message = f"Unable to mount file {iso_path}"
        if return_code is not None:
            message += f" (exit code {return_code})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class MountPointCleanupError(MountPointIOError):
    """
    Raised when a failed mount leaves a mount point that cannot be removed.

    The mount failure that triggered the cleanup is kept in ``mount_error``.
    """
    def __init__(self, mount_path: str, mount_error: MountFailedError):
        self.mount_error = mount_error
        super().__init__(
            mount_path,
            f"Unable to delete mount point {mount_path} after failed mount: {mount_error}",
        )


class UnmountFailedError(IsoMountError):
    """Raised when the unmount tool exits non-zero or cannot be started."""
    def __init__(
        self,
        mount_path: str,
        return_code: Optional[int] = None,
        reason: Optional[str] = None,
    ):
        self.mount_path = mount_path
        self.return_code = return_code
        self.reason = reason
        message = f"Unable to unmount {mount_path}"
        if return_code is not None:
            message += f" (exit code {return_code})"
        if reason:
            message += f": {reason}"
        super().__init__(message)
