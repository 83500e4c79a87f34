from typing import List, Optional

from fastapi import APIRouter, Depends, status

from core import permissions as perms
from core.auth import current_active_superuser, current_active_user
from core.exceptions import InventoryError
from db.users import User
from routers.deps import get_repository, http_error, user_permissions
from schemas.stores import PermissionRead, PermissionUpsert, StoreCreate, StoreRead

router = APIRouter()
permissions_router = APIRouter()


@router.get("/", response_model=List[StoreRead])
async def list_stores(
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    """Stores the user can at least view."""
    permissions = await user_permissions(repo, user)
    return await repo.list_stores(perms.visible_store_ids(user, permissions))


@router.post("/", response_model=StoreRead, status_code=status.HTTP_201_CREATED)
async def create_store(
    payload: StoreCreate,
    repo=Depends(get_repository),
    user: User = Depends(current_active_superuser),
):
    try:
        return await repo.add_store(payload)
    except InventoryError as e:
        raise http_error(e) from e


@permissions_router.get("/", response_model=List[PermissionRead])
async def list_permissions(
    user_id: Optional[str] = None,
    store_id: Optional[str] = None,
    repo=Depends(get_repository),
    user: User = Depends(current_active_superuser),
):
    rows = await repo.list_permissions(user_id=user_id)
    return [p for p in rows if not store_id or p.store_id == store_id]


@permissions_router.put("/", response_model=PermissionRead)
async def upsert_permission(
    payload: PermissionUpsert,
    repo=Depends(get_repository),
    user: User = Depends(current_active_superuser),
):
    try:
        return await repo.upsert_permission(payload)
    except InventoryError as e:
        raise http_error(e) from e
