import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request

from .api import mounts
from .dependencies import get_iso_manager, get_settings
from .logging_config import setup_logging

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    setup_logging(settings)

    iso_manager = get_iso_manager()
    logging.info("ISO Mounter starting up...")
    logging.info(f"Mount root: {settings.mount_root}")
    logging.info(
        f"Tools: mount={settings.mount_tool_path}, "
        f"umount={settings.unmount_tool_path}, sudo={settings.privilege_tool_path}"
    )

    if settings.cleanup_stale_mount_points_on_startup:
        try:
            removed = await iso_manager.install()
            if removed > 0:
                logging.info(f"Startup cleanup: removed {removed} stale mount points")
        except OSError as e:
            logging.warning(f"Startup cleanup failed (non-critical): {e}")

    yield

    # Shutdown
    logging.info("ISO Mounter shutting down...")
    if settings.release_mounts_on_shutdown:
        await iso_manager.shutdown()
    elif iso_manager.active_mounts:
        logging.warning(
            f"Leaving {len(iso_manager.active_mounts)} images mounted under {settings.mount_root}"
        )


app = FastAPI(
    title="ISO Mounter",
    description="Mounts ISO images on Linux hosts with a bounded number of concurrent mounts",
    version="0.1.0",
    lifespan=lifespan,
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    logging.debug(f"Incoming request: {request.method} {request.url.path}")
    response = await call_next(request)
    logging.debug(f"Response: {response.status_code} for {request.url.path}")
    return response


app.include_router(mounts.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "service": "iso-mounter"}


def run() -> None:
    uvicorn.run(
        "iso_mounter.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
