from typing import List

from fastapi import APIRouter, HTTPException, Depends, Query, Response, status

from ..core.exceptions import (
    InvalidIsoPathError,
    MountFailedError,
    MountPointIOError,
    MountPointPermissionError,
    MountToolsUnavailableError,
    UnmountFailedError,
)
from ..dependencies import get_iso_manager
from ..models import CanMountResponse, MounterInfo, MountInfo, MountRequest
from ..services.iso_mount import LinuxIsoManager

router = APIRouter(prefix="/api", tags=["mounts"])


@router.get("/mounter", response_model=MounterInfo)
async def get_mounter_info(
    iso_manager: LinuxIsoManager = Depends(get_iso_manager),
) -> MounterInfo:
    return iso_manager.get_info()


@router.get("/mounts/can-mount", response_model=CanMountResponse)
async def can_mount(
    path: str = Query(..., description="Sti til image filen"),
    iso_manager: LinuxIsoManager = Depends(get_iso_manager),
) -> CanMountResponse:
    return CanMountResponse(path=path, can_mount=iso_manager.can_mount(path))


@router.get("/mounts", response_model=List[MountInfo])
async def list_mounts(
    iso_manager: LinuxIsoManager = Depends(get_iso_manager),
) -> List[MountInfo]:
    return [mount.to_info() for mount in iso_manager.active_mounts]


@router.post("/mounts", response_model=MountInfo, status_code=status.HTTP_201_CREATED)
async def create_mount(
    request: MountRequest,
    iso_manager: LinuxIsoManager = Depends(get_iso_manager),
) -> MountInfo:
    """
    Mount an ISO image.

    HTTP Status Codes:
        201: Mounted
        400: Empty path or not a mountable image on this host
        403: Mount point could not be created (permission denied)
        500: Mount point could not be created or cleaned up
        502: Mount tool failed
        503: mount, umount or sudo missing
    """
    if request.iso_path and not iso_manager.can_mount(request.iso_path):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{iso_manager.name} cannot mount {request.iso_path} on this host",
        )

    try:
        mount = await iso_manager.mount(request.iso_path)
    except InvalidIsoPathError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except MountToolsUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except MountPointPermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except MountPointIOError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    except MountFailedError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return mount.to_info()


@router.get("/mounts/{mount_id}", response_model=MountInfo)
async def get_mount(
    mount_id: str,
    iso_manager: LinuxIsoManager = Depends(get_iso_manager),
) -> MountInfo:
    mount = iso_manager.get_mount(mount_id)
    if mount is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Mount {mount_id} not found"
        )
    return mount.to_info()


@router.delete("/mounts/{mount_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_mount(
    mount_id: str,
    iso_manager: LinuxIsoManager = Depends(get_iso_manager),
) -> Response:
    mount = iso_manager.get_mount(mount_id)
    if mount is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Mount {mount_id} not found"
        )

    try:
        await mount.unmount()
    except UnmountFailedError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return Response(status_code=status.HTTP_204_NO_CONTENT)
