"""Tests for the mount error hierarchy."""

from iso_mounter.core.exceptions import (
    InvalidIsoPathError,
    IsoMountError,
    MountFailedError,
    MountPointCleanupError,
    MountPointIOError,
    MountPointPermissionError,
    MountToolsUnavailableError,
    UnmountFailedError,
)


def test_all_errors_share_base_class():
    errors = [
        InvalidIsoPathError(""),
        MountToolsUnavailableError(["/usr/bin/sudo"]),
        MountPointIOError("/tmp/m/1", "boom"),
        MountPointPermissionError("/tmp/m/1", "/isos/a.iso"),
        MountFailedError("/isos/a.iso"),
        MountPointCleanupError("/tmp/m/1", MountFailedError("/isos/a.iso")),
        UnmountFailedError("/tmp/m/1"),
    ]

    assert all(isinstance(error, IsoMountError) for error in errors)


def test_mount_failed_message():
    assert str(MountFailedError("/isos/a.iso")) == "Unable to mount file /isos/a.iso"
    assert str(MountFailedError("/isos/a.iso", 32, "wrong fs type")) == (
        "Unable to mount file /isos/a.iso (exit code 32): wrong fs type"
    )


def test_cleanup_error_keeps_mount_error():
    mount_error = MountFailedError("/isos/a.iso", 1)
    error = MountPointCleanupError("/tmp/m/1", mount_error)

    assert error.mount_error is mount_error
    assert error.mount_path == "/tmp/m/1"
    assert "/tmp/m/1" in str(error)
    assert "Unable to mount file /isos/a.iso (exit code 1)" in str(error)


def test_tools_unavailable_lists_missing_tools():
    error = MountToolsUnavailableError(["/usr/bin/mount", "/usr/bin/sudo"])

    assert error.missing_tools == ["/usr/bin/mount", "/usr/bin/sudo"]
    assert "/usr/bin/mount, /usr/bin/sudo" in str(error)


def test_unmount_failed_message():
    assert str(UnmountFailedError("/tmp/m/1", 16, "target is busy")) == (
        "Unable to unmount /tmp/m/1 (exit code 16): target is busy"
    )
