import logging
import os
import uuid as uuid_mod
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from core import permissions as perms
from core.auth import current_active_user
from core.config import settings
from core.exceptions import ImageStorageError, InventoryError
from core.imagekit_client import (
    delete_image_from_imagekit,
    item_image_folder,
    location_image_folder,
    sub_location_image_folder,
    upload_image_to_imagekit,
)
from db.users import User
from routers.deps import get_repository, http_error, require_catalog_role, require_store_role
from schemas.items import ItemRead
from schemas.locations import LocationRead

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_EXTS = {"jpg", "jpeg", "png", "gif", "webp", "heic", "heif"}


async def _read_image(file: UploadFile) -> bytes:
    if settings.offline_mode:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Image uploads are not available in offline mode",
        )
    file_data = await file.read()
    content_type = (file.content_type or "").strip().lower()
    ext = os.path.splitext(file.filename or "")[1].lower().lstrip(".")
    if content_type and content_type != "application/octet-stream" and not content_type.startswith("image/"):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File must be an image")
    if (not content_type or content_type == "application/octet-stream") and ext and ext not in ALLOWED_EXTS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File must be an image")

    if len(file_data) < 100:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Image file appears to be corrupted or too small",
        )
    if len(file_data) > settings.image_max_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Image size must be less than {settings.image_max_bytes // (1024 * 1024)}MB",
        )
    return file_data


async def _upload(file: UploadFile, folder: str) -> dict:
    file_data = await _read_image(file)
    filename = file.filename or f"image_{uuid_mod.uuid4().hex[:8]}.jpg"
    try:
        return await upload_image_to_imagekit(file_data, filename, folder)
    except ImageStorageError as e:
        logger.error("Image upload to %s failed: %s", folder, e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e)) from e


async def _discard(file_id: Optional[str]) -> None:
    """Remove a replaced image; the record is already updated so failures are only logged."""
    if not file_id or settings.offline_mode:
        return
    try:
        await delete_image_from_imagekit(file_id)
    except ImageStorageError as e:
        logger.warning("Could not delete image %s: %s", file_id, e)


async def _location_for_editor(repo, user: User, location_id: str) -> LocationRead:
    try:
        location = await repo.get_location(location_id)
    except InventoryError as e:
        raise http_error(e) from e
    await require_store_role(repo, user, location.store_id, perms.EDITOR)
    return location


def _find_sub(location: LocationRead, sub_location_id: str):
    for sub in location.sublocations:
        if sub.id == sub_location_id:
            return sub
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sub-location not found")


@router.post("/items/{item_id}", response_model=ItemRead)
async def upload_item_image(
    item_id: str,
    file: UploadFile = File(...),
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_catalog_role(repo, user, perms.EDITOR)
    try:
        item = await repo.get_item(item_id)
    except InventoryError as e:
        raise http_error(e) from e

    uploaded = await _upload(file, item_image_folder(item.id))
    updated = await repo.update_item(item.id, {"image_url": uploaded["url"], "image_file_id": uploaded["file_id"]})
    await _discard(item.image_file_id)
    return updated


@router.delete("/items/{item_id}", response_model=ItemRead)
async def delete_item_image(
    item_id: str,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_catalog_role(repo, user, perms.EDITOR)
    try:
        item = await repo.get_item(item_id)
    except InventoryError as e:
        raise http_error(e) from e

    updated = await repo.update_item(item.id, {"image_url": None, "image_file_id": None})
    await _discard(item.image_file_id)
    return updated


@router.post("/locations/{location_id}", response_model=LocationRead)
async def upload_location_image(
    location_id: str,
    file: UploadFile = File(...),
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    location = await _location_for_editor(repo, user, location_id)
    uploaded = await _upload(file, location_image_folder(location.id))
    updated = await repo.update_location(
        location.id, {"image_url": uploaded["url"], "image_file_id": uploaded["file_id"]}
    )
    await _discard(location.image_file_id)
    return updated


@router.delete("/locations/{location_id}", response_model=LocationRead)
async def delete_location_image(
    location_id: str,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    location = await _location_for_editor(repo, user, location_id)
    updated = await repo.update_location(location.id, {"image_url": None, "image_file_id": None})
    await _discard(location.image_file_id)
    return updated


@router.post("/locations/{location_id}/sublocations/{sub_location_id}", response_model=LocationRead)
async def upload_sub_location_image(
    location_id: str,
    sub_location_id: str,
    file: UploadFile = File(...),
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    location = await _location_for_editor(repo, user, location_id)
    sub = _find_sub(location, sub_location_id)
    uploaded = await _upload(file, sub_location_image_folder(location.id, sub.id))
    updated = await repo.update_sub_location(
        location.id, sub.id, {"image_url": uploaded["url"], "image_file_id": uploaded["file_id"]}
    )
    await _discard(sub.image_file_id)
    return updated


@router.delete("/locations/{location_id}/sublocations/{sub_location_id}", response_model=LocationRead)
async def delete_sub_location_image(
    location_id: str,
    sub_location_id: str,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    location = await _location_for_editor(repo, user, location_id)
    sub = _find_sub(location, sub_location_id)
    updated = await repo.update_sub_location(location.id, sub.id, {"image_url": None, "image_file_id": None})
    await _discard(sub.image_file_id)
    return updated
