from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from core import permissions as perms
from core.auth import current_active_user
from core.exceptions import InventoryError
from core.text_search import create_search_terms, matches_search
from db.users import User
from routers.deps import get_repository, http_error, require_catalog_role
from schemas.catalog import VendorAssignment, VendorCreate, VendorRead, VendorUpdate
from schemas.items import ItemRead

router = APIRouter()


@router.get("/", response_model=List[VendorRead])
async def list_vendors(
    q: Optional[str] = None,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_catalog_role(repo, user, perms.VIEWER)
    terms = create_search_terms(q)
    return [
        v for v in await repo.list_vendors()
        if matches_search([v.name, v.contact_name, v.internal_contact_name, v.email, v.phone, v.notes], terms)
    ]


@router.post("/", response_model=VendorRead, status_code=status.HTTP_201_CREATED)
async def create_vendor(
    payload: VendorCreate,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_catalog_role(repo, user, perms.EDITOR)
    try:
        return await repo.add_vendor(payload)
    except InventoryError as e:
        raise http_error(e) from e


@router.patch("/{vendor_id}", response_model=VendorRead)
async def update_vendor(
    vendor_id: str,
    payload: VendorUpdate,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_catalog_role(repo, user, perms.EDITOR)
    try:
        return await repo.update_vendor(vendor_id, payload.model_dump(exclude_unset=True))
    except InventoryError as e:
        raise http_error(e) from e


@router.delete("/{vendor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vendor(
    vendor_id: str,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_catalog_role(repo, user, perms.EDITOR)
    try:
        await repo.delete_vendor(vendor_id)
    except InventoryError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{vendor_id}/items", response_model=List[ItemRead])
async def assign_items(
    vendor_id: str,
    payload: VendorAssignment,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    """Attach and detach items; returns every item now supplied by the vendor."""
    permissions = await require_catalog_role(repo, user, perms.EDITOR)
    try:
        items = await repo.assign_vendor_items(vendor_id, payload.assign_item_ids, payload.unassign_item_ids)
    except InventoryError as e:
        raise http_error(e) from e
    if perms.can_view_cost(user, permissions):
        return items
    return [i.model_copy(update={"cost_a": None, "cost_b": None}) for i in items]
