"""Mount Slot Pool - bounds the number of concurrent mounts."""

import asyncio


class MountSlotPool:
    """
    Counting semaphore with a fixed capacity.

    A slot is taken before the mount tool is started and given back when the
    resulting mount is released (or the mount fails). Waiting for a slot
    suspends the calling task and is cancelled together with it.
    """

    def __init__(self, capacity: int = 3):
        if capacity < 1:
            raise ValueError(f"Mount slot capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._semaphore = asyncio.Semaphore(capacity)
        self._in_use = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def in_use(self) -> int:
        return self._in_use

    @property
    def available(self) -> int:
        return self._capacity - self._in_use

    def locked(self) -> bool:
        """True when the next acquire would have to wait."""
        return self._semaphore.locked()

    async def acquire(self) -> None:
        await self._semaphore.acquire()
        self._in_use += 1

    def release(self) -> None:
        if self._in_use == 0:
            raise RuntimeError("Mount slot released more times than it was acquired")
        self._in_use -= 1
        self._semaphore.release()
