from typing import Iterable, List, Optional

from schemas.stores import PermissionRead

ADMIN = "Admin"
EDITOR = "Editor"
VIEWER = "Viewer"
NO_ACCESS = "No Access"

ROLE_RANK = {
    NO_ACCESS: 0,
    VIEWER: 1,
    EDITOR: 2,
    ADMIN: 3,
}


def role_for_store(user, permissions: Iterable[PermissionRead], store_id: str) -> str:
    if getattr(user, "is_superuser", False):
        return ADMIN
    user_id = str(user.id)
    for p in permissions:
        if p.user_id == user_id and p.store_id == store_id:
            return p.role
    return NO_ACCESS


def has_store_role(user, permissions: Iterable[PermissionRead], store_id: str, minimum: str) -> bool:
    return ROLE_RANK[role_for_store(user, permissions, store_id)] >= ROLE_RANK[minimum]


def has_any_store_role(user, permissions: Iterable[PermissionRead], minimum: str) -> bool:
    """Catalog data (items, categories, vendors) is shared by every store."""
    if getattr(user, "is_superuser", False):
        return True
    user_id = str(user.id)
    return any(
        p.user_id == user_id and ROLE_RANK[p.role] >= ROLE_RANK[minimum]
        for p in permissions
    )


def can_view_cost(user, permissions: Iterable[PermissionRead], store_id: Optional[str] = None) -> bool:
    if getattr(user, "is_superuser", False):
        return True
    user_id = str(user.id)
    return any(
        p.user_id == user_id
        and p.can_view_cost
        and p.role != NO_ACCESS
        and (store_id is None or p.store_id == store_id)
        for p in permissions
    )


def visible_store_ids(user, permissions: Iterable[PermissionRead]) -> Optional[List[str]]:
    """None means every store."""
    if getattr(user, "is_superuser", False):
        return None
    user_id = str(user.id)
    return [
        p.store_id for p in permissions
        if p.user_id == user_id and ROLE_RANK[p.role] >= ROLE_RANK[VIEWER]
    ]
