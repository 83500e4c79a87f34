import uuid
from typing import List

from fastapi import Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from core import permissions as perms
from core.exceptions import DuplicateError, InventoryError, NotFoundError
from db.database import get_async_session
from db.repository import SqlInventoryRepository
from db.users import User
from schemas.stores import PermissionRead

OFFLINE_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")


async def get_repository(db: AsyncSession = Depends(get_async_session)):
    return SqlInventoryRepository(db)


def offline_user() -> User:
    """Stand-in superuser for offline demo mode."""
    return User(
        id=OFFLINE_USER_ID,
        email="demo@example.com",
        hashed_password="",
        is_active=True,
        is_superuser=True,
        is_verified=True,
        name="Demo User",
    )


def http_error(e: InventoryError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, DuplicateError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


async def user_permissions(repo, user: User) -> List[PermissionRead]:
    if user.is_superuser:
        return []
    return await repo.list_permissions(user_id=str(user.id))


async def require_store_role(repo, user: User, store_id: str, minimum: str) -> List[PermissionRead]:
    permissions = await user_permissions(repo, user)
    if not perms.has_store_role(user, permissions, store_id, minimum):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"{minimum} access to this store is required")
    return permissions


async def require_catalog_role(repo, user: User, minimum: str) -> List[PermissionRead]:
    permissions = await user_permissions(repo, user)
    if not perms.has_any_store_role(user, permissions, minimum):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"{minimum} access is required")
    return permissions


def csv_response(text: str, filename: str) -> Response:
    return Response(
        content=text,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
