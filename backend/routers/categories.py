from typing import List

from fastapi import APIRouter, Depends, Response, status

from core import permissions as perms
from core.auth import current_active_user
from core.exceptions import InventoryError
from db.users import User
from routers.deps import get_repository, http_error, require_catalog_role
from schemas.catalog import CategoryCreate, CategoryRead, CategoryUpdate

router = APIRouter()


@router.get("/", response_model=List[CategoryRead])
async def list_categories(
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_catalog_role(repo, user, perms.VIEWER)
    return await repo.list_categories()


@router.post("/", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryCreate,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_catalog_role(repo, user, perms.EDITOR)
    try:
        return await repo.add_category(payload)
    except InventoryError as e:
        raise http_error(e) from e


@router.patch("/{category_id}", response_model=CategoryRead)
async def update_category(
    category_id: str,
    payload: CategoryUpdate,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_catalog_role(repo, user, perms.EDITOR)
    try:
        return await repo.update_category(category_id, payload.model_dump(exclude_unset=True))
    except InventoryError as e:
        raise http_error(e) from e


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    """Delete a category; its items become uncategorised."""
    await require_catalog_role(repo, user, perms.EDITOR)
    try:
        await repo.delete_category(category_id)
    except InventoryError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
