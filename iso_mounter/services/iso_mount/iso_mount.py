"""ISO Mount - live handle for one mounted image."""

import asyncio
import logging
from datetime import datetime
from typing import Callable

import aiofiles.os

from ...core.exceptions import UnmountFailedError
from ...models import MountInfo, MountState
from .tool_runner import ToolCommandBuilder, ToolRunner


class IsoMount:
    """
    One successfully mounted image.

    Created only by the manager after the mount tool reported success. The
    handle owns its mount point directory and the mount slot taken for it;
    both are given back exactly once, by unmount() or release().
    """

    def __init__(
        self,
        mount_id: str,
        mount_path: str,
        iso_path: str,
        unmount_tool_path: str,
        command_builder: ToolCommandBuilder,
        tool_runner: ToolRunner,
        on_released: Callable[["IsoMount"], None],
    ):
        self._mount_id = mount_id
        self._mount_path = mount_path
        self._iso_path = iso_path
        self._unmount_tool_path = unmount_tool_path
        self._command_builder = command_builder
        self._tool_runner = tool_runner
        self._on_released = on_released

        self._state = MountState.MOUNTED
        self._mounted_at = datetime.now()
        self._lock = asyncio.Lock()

    @property
    def mount_id(self) -> str:
        return self._mount_id

    @property
    def mount_path(self) -> str:
        return self._mount_path

    @property
    def iso_path(self) -> str:
        return self._iso_path

    @property
    def state(self) -> MountState:
        return self._state

    @property
    def is_released(self) -> bool:
        return self._state == MountState.RELEASED

    @property
    def mounted_at(self) -> datetime:
        return self._mounted_at

    async def unmount(self) -> None:
        """
        Unmount the image and give back the mount slot.

        Raises UnmountFailedError when the unmount tool fails; the handle then
        stays mounted so the call can be retried. A released handle is a no-op.
        """
        async with self._lock:
            if self.is_released:
                logging.debug(f"{self._mount_path} already released, skipping unmount")
                return

            command = self._command_builder.build(self._unmount_tool_path, self._mount_path)
            logging.info(f"Unmounting {self._iso_path} from {self._mount_path}")
            logging.debug(" ".join(command))

            try:
                result = await self._tool_runner.run(command)
            except Exception as e:
                raise UnmountFailedError(self._mount_path, reason=str(e)) from e

            logging.debug(f"Unmount StdOut: {result.stdout_line}")
            logging.debug(f"Unmount StdErr: {result.stderr_line}")

            if not result.succeeded:
                raise UnmountFailedError(
                    self._mount_path,
                    return_code=result.return_code,
                    reason=result.stderr_line or None,
                )

            await self._remove_mount_point()
            self._mark_released()
            logging.info(f"Unmounted {self._iso_path}")

    async def release(self) -> None:
        """Dispose the handle: unmount if possible, always give back the slot."""
        try:
            await self.unmount()
        except UnmountFailedError as e:
            logging.error(f"{e} - releasing mount slot anyway")
        finally:
            self._mark_released()

    def to_info(self) -> MountInfo:
        return MountInfo(
            mount_id=self._mount_id,
            iso_path=self._iso_path,
            mount_path=self._mount_path,
            state=self._state,
            mounted_at=self._mounted_at,
        )

    async def _remove_mount_point(self) -> None:
        try:
            if await aiofiles.os.path.exists(self._mount_path):
                await aiofiles.os.rmdir(self._mount_path)
        except OSError as e:
            logging.warning(f"Could not remove mount point {self._mount_path}: {e}")

    def _mark_released(self) -> None:
        if self.is_released:
            return
        self._state = MountState.RELEASED
        self._on_released(self)

    async def __aenter__(self) -> "IsoMount":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.release()

    def __repr__(self) -> str:
        return (
            f"IsoMount(mount_id={self._mount_id!r}, iso_path={self._iso_path!r}, "
            f"state={self._state.value})"
        )
