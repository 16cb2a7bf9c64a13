from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Mount points
    mount_root: str = "/tmp/iso_mounter"  # One sub directory per active mount

    # External tools (must all exist before a mount is attempted)
    mount_tool_path: str = "/usr/bin/mount"
    unmount_tool_path: str = "/usr/bin/umount"
    privilege_tool_path: str = "/usr/bin/sudo"

    # Parallel processing
    max_concurrent_mounts: int = Field(default=3, ge=1)

    # Lifecycle
    cleanup_stale_mount_points_on_startup: bool = True
    release_mounts_on_shutdown: bool = True

    # Logging konfiguration
    log_level: str = "INFO"
    log_file_path: str = "logs/iso_mounter.log"
    log_retention_days: int = 30
    log_console_width: int = 120
    quiet_loggers: list[str] = ["uvicorn.access", "asyncio"]  # Capped at WARNING

    # HTTP API
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    model_config = SettingsConfigDict(env_file="settings.env", extra="ignore")

    @property
    def log_directory(self) -> Path:
        """Returnerer log directory som Path objekt"""
        return Path(self.log_file_path).parent

    @property
    def required_tool_paths(self) -> list[str]:
        """Tools that must be present before mounting."""
        return [self.mount_tool_path, self.unmount_tool_path, self.privilege_tool_path]
