"""Linux ISO Manager - mounts ISO images with mount(8), bounded by a slot pool."""

import asyncio
import logging
import os
import uuid
from typing import Dict, List, Optional, Set

import aiofiles.os

from ...config import Settings
from ...core.exceptions import (
    InvalidIsoPathError,
    IsoMountError,
    MountFailedError,
    MountPointCleanupError,
    MountPointIOError,
    MountPointPermissionError,
    MountToolsUnavailableError,
)
from ...models import MounterInfo
from .base_iso_mounter import IsoMounter
from .iso_mount import IsoMount
from .mount_slots import MountSlotPool
from .platform_detector import PlatformDetector
from .tool_runner import ToolCommandBuilder, ToolRunner

ISO_EXTENSION = ".iso"


class LinuxIsoManager(IsoMounter):
    """
    Mount lifecycle manager for Linux hosts.

    Every successful mount holds one slot from the pool until its IsoMount is
    released. Every failed mount gives its slot back and removes its mount
    point before the error reaches the caller.
    """

    def __init__(
        self,
        settings: Settings,
        slot_pool: Optional[MountSlotPool] = None,
        tool_runner: Optional[ToolRunner] = None,
        command_builder: Optional[ToolCommandBuilder] = None,
        platform_detector: Optional[PlatformDetector] = None,
    ):
        self._mount_root = settings.mount_root
        self._mount_tool_path = settings.mount_tool_path
        self._unmount_tool_path = settings.unmount_tool_path
        self._required_tools = tuple(settings.required_tool_paths)

        self._slots = slot_pool or MountSlotPool(settings.max_concurrent_mounts)
        self._tool_runner = tool_runner or ToolRunner()
        self._command_builder = command_builder or ToolCommandBuilder(
            settings.privilege_tool_path
        )
        self._platform = platform_detector or PlatformDetector()

        self._active_mounts: Dict[str, IsoMount] = {}
        self._pending_mount_ids: Set[str] = set()

        logging.info(
            f"{self.name} initialiseret - mount root: {self._mount_root}, "
            f"max concurrent mounts: {self._slots.capacity}"
        )

    @property
    def name(self) -> str:
        return "LinuxMount"

    @property
    def requires_installation(self) -> bool:
        return False

    @property
    def is_installed(self) -> bool:
        return True

    @property
    def available_slots(self) -> int:
        return self._slots.available

    @property
    def active_mounts(self) -> List[IsoMount]:
        return list(self._active_mounts.values())

    def get_mount(self, mount_id: str) -> Optional[IsoMount]:
        return self._active_mounts.get(mount_id)

    def can_mount(self, path: str) -> bool:
        if not self._platform.supports_iso_mounting():
            return False
        return os.path.basename(path).lower().endswith(ISO_EXTENSION)

    def get_info(self) -> MounterInfo:
        return MounterInfo(
            name=self.name,
            platform=self._platform.detect_platform(),
            requires_installation=self.requires_installation,
            is_installed=self.is_installed,
            max_concurrent_mounts=self._slots.capacity,
            available_slots=self._slots.available,
            active_mounts=len(self._active_mounts),
        )

    async def install(self) -> int:
        """Remove empty mount points left behind by a previous run."""
        if not await aiofiles.os.path.isdir(self._mount_root):
            return 0

        removed = 0
        for entry in await aiofiles.os.listdir(self._mount_root):
            if entry in self._active_mounts or entry in self._pending_mount_ids:
                continue

            path = os.path.join(self._mount_root, entry)
            if not await aiofiles.os.path.isdir(path):
                continue

            try:
                await aiofiles.os.rmdir(path)
                removed += 1
                logging.info(f"Removed stale mount point {path}")
            except OSError as e:
                # Non-empty or busy: most likely still mounted
                logging.warning(f"Leaving stale mount point {path} in place: {e}")

        return removed

    async def mount(self, iso_path: str) -> IsoMount:
        if not iso_path:
            raise InvalidIsoPathError(iso_path)

        await self._ensure_tools_available()

        mount_id = str(uuid.uuid4())
        mount_path = os.path.join(self._mount_root, mount_id)

        self._pending_mount_ids.add(mount_id)
        try:
            await self._create_mount_point(iso_path, mount_path)

            logging.info(f"Mounting {iso_path}...")
            try:
                await self._slots.acquire()
            except asyncio.CancelledError:
                logging.info(f"Mount of {iso_path} cancelled while waiting for a mount slot")
                await self._discard_mount_point(mount_path)
                raise

            mount_task = asyncio.ensure_future(
                self._mount_with_slot(mount_id, iso_path, mount_path)
            )
            try:
                return await asyncio.shield(mount_task)
            except asyncio.CancelledError:
                logging.warning(
                    f"Mount of {iso_path} cancelled while the mount tool was running, "
                    "waiting for it to finish"
                )
                await self._release_orphaned_mount(mount_task)
                raise
        finally:
            self._pending_mount_ids.discard(mount_id)

    async def shutdown(self) -> None:
        logging.info(f"Disposing {self.name}")
        for handle in self.active_mounts:
            await handle.release()

    async def _ensure_tools_available(self) -> None:
        missing = [
            tool for tool in self._required_tools
            if not await aiofiles.os.path.exists(tool)
        ]
        if missing:
            raise MountToolsUnavailableError(missing)

    async def _create_mount_point(self, iso_path: str, mount_path: str) -> None:
        logging.debug(f"Creating mount point {mount_path}")
        try:
            await aiofiles.os.makedirs(mount_path)
        except PermissionError as e:
            raise MountPointPermissionError(mount_path, iso_path) from e
        except OSError as e:
            raise MountPointIOError(
                mount_path, f"Unable to create mount point {mount_path} for {iso_path}: {e}"
            ) from e

    async def _mount_with_slot(self, mount_id: str, iso_path: str, mount_path: str) -> IsoMount:
        command = self._command_builder.build(self._mount_tool_path, iso_path, mount_path)
        logging.debug(" ".join(command))

        try:
            result = await self._tool_runner.run(command)
        except asyncio.CancelledError:
            logging.warning(f"Mount tool for {iso_path} was cancelled, giving back its slot")
            self._slots.release()
            await self._discard_mount_point(mount_path)
            raise
        except Exception as e:
            error = MountFailedError(iso_path, reason=str(e))
            logging.error(str(error))
            await self._abort_mount(mount_path, error)
            raise error from e

        logging.debug(f"Mount StdOut: {result.stdout_line}")
        logging.debug(f"Mount StdErr: {result.stderr_line}")

        if not result.succeeded:
            error = MountFailedError(
                iso_path, return_code=result.return_code, reason=result.stderr_line or None
            )
            logging.error(str(error))
            await self._abort_mount(mount_path, error)
            raise error

        handle = IsoMount(
            mount_id=mount_id,
            mount_path=mount_path,
            iso_path=iso_path,
            unmount_tool_path=self._unmount_tool_path,
            command_builder=self._command_builder,
            tool_runner=self._tool_runner,
            on_released=self._on_mount_released,
        )
        self._active_mounts[mount_id] = handle
        logging.info(f"Mounted {iso_path} at {mount_path}")
        return handle

    async def _abort_mount(self, mount_path: str, error: MountFailedError) -> None:
        """Give back the slot and remove the mount point after a failed mount."""
        self._slots.release()
        try:
            await aiofiles.os.rmdir(mount_path)
        except OSError as e:
            raise MountPointCleanupError(mount_path, mount_error=error) from e

    async def _discard_mount_point(self, mount_path: str) -> None:
        try:
            await aiofiles.os.rmdir(mount_path)
        except OSError as e:
            logging.warning(f"Could not remove unused mount point {mount_path}: {e}")

    async def _release_orphaned_mount(self, mount_task: "asyncio.Future[IsoMount]") -> None:
        await self._wait_through_cancellation(mount_task)
        if mount_task.cancelled():
            return

        error = mount_task.exception()
        if error is not None:
            if isinstance(error, IsoMountError):
                logging.debug(f"Cancelled mount failed on its own: {error}")
            else:
                logging.error(f"Cancelled mount failed unexpectedly: {error!r}")
            return

        release_task = asyncio.ensure_future(mount_task.result().release())
        await self._wait_through_cancellation(release_task)
        if not release_task.cancelled():
            release_task.result()

    @staticmethod
    async def _wait_through_cancellation(task: "asyncio.Future") -> None:
        """Wait until task is done, even if the waiting task is cancelled again meanwhile."""
        while not task.done():
            try:
                await asyncio.wait({task})
            except asyncio.CancelledError:
                logging.debug("Cancelled again while cleaning up a cancelled mount, still waiting")

    def _on_mount_released(self, handle: IsoMount) -> None:
        self._active_mounts.pop(handle.mount_id, None)
        self._slots.release()
        logging.debug(
            f"Mount slot released for {handle.iso_path} "
            f"({self._slots.available}/{self._slots.capacity} available)"
        )
