"""Abstract ISO Mounter - interface shared by mount strategies."""

from abc import ABC, abstractmethod

from .iso_mount import IsoMount


class IsoMounter(ABC):
    """Abstract base class for platform-specific ISO mount operations."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Mounter name for logging."""

    @property
    @abstractmethod
    def requires_installation(self) -> bool:
        pass

    @property
    @abstractmethod
    def is_installed(self) -> bool:
        pass

    @abstractmethod
    async def install(self) -> int:
        """Prepare the mounter. Returns number of stale mount points removed."""

    @abstractmethod
    def can_mount(self, path: str) -> bool:
        """Check whether this mounter handles the given image path on this host."""

    @abstractmethod
    async def mount(self, iso_path: str) -> IsoMount:
        """Mount an image and return its handle."""
