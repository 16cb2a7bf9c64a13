from functools import lru_cache
from typing import Dict, Any

from .config import Settings
from .services.iso_mount import LinuxIsoManager

# Global singleton instances
_singletons: Dict[str, Any] = {}


@lru_cache
def get_settings() -> Settings:
    """Hent Settings singleton instance."""
    return Settings()


def get_iso_manager() -> LinuxIsoManager:
    if "iso_manager" not in _singletons:
        _singletons["iso_manager"] = LinuxIsoManager(settings=get_settings())
    return _singletons["iso_manager"]


def reset_singletons() -> None:
    global _singletons
    _singletons.clear()
