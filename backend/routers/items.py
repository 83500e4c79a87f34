from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from core import permissions as perms
from core.auth import current_active_user
from core.exceptions import InventoryError
from core.text_search import create_search_terms, matches_search
from db.users import User
from routers.deps import get_repository, http_error, require_catalog_role
from schemas.items import ItemCreate, ItemRead, ItemUpdate, NextHumanId

router = APIRouter()


def _present(item: ItemRead, show_cost: bool) -> ItemRead:
    if show_cost:
        return item
    return item.model_copy(update={"cost_a": None, "cost_b": None})


def _search_fields(item: ItemRead):
    return [item.name, item.name_en, item.short_name, item.human_id, item.sku, item.description]


@router.get("/", response_model=List[ItemRead])
async def list_items(
    q: Optional[str] = Query(None, description="Search name, English name, short name, ID, SKU, description"),
    category_id: Optional[str] = None,
    include_discontinued: bool = False,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    permissions = await require_catalog_role(repo, user, perms.VIEWER)
    show_cost = perms.can_view_cost(user, permissions)
    terms = create_search_terms(q)

    items = [
        i for i in await repo.list_items()
        if (include_discontinued or not i.is_discontinued)
        and (not category_id or i.category_id == category_id)
        and matches_search(_search_fields(i), terms)
    ]
    items.sort(key=lambda i: i.name.lower())
    return [_present(i, show_cost) for i in items]


@router.get("/next-human-id", response_model=NextHumanId)
async def next_human_id(
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_catalog_role(repo, user, perms.EDITOR)
    return NextHumanId(human_id=await repo.next_item_human_id())


@router.get("/{item_id}", response_model=ItemRead)
async def get_item(
    item_id: str,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    permissions = await require_catalog_role(repo, user, perms.VIEWER)
    try:
        item = await repo.get_item(item_id)
    except InventoryError as e:
        raise http_error(e) from e
    return _present(item, perms.can_view_cost(user, permissions))


@router.post("/", response_model=ItemRead, status_code=status.HTTP_201_CREATED)
async def create_item(
    payload: ItemCreate,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    permissions = await require_catalog_role(repo, user, perms.EDITOR)
    try:
        item = await repo.add_item(payload)
    except InventoryError as e:
        raise http_error(e) from e
    return _present(item, perms.can_view_cost(user, permissions))


@router.patch("/{item_id}", response_model=ItemRead)
async def update_item(
    item_id: str,
    payload: ItemUpdate,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    permissions = await require_catalog_role(repo, user, perms.EDITOR)
    show_cost = perms.can_view_cost(user, permissions)

    data = payload.model_dump(exclude_unset=True)
    if not show_cost and ({"cost_a", "cost_b"} & data.keys()):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cost permission is required to change costs")
    try:
        item = await repo.update_item(item_id, data)
    except InventoryError as e:
        raise http_error(e) from e
    return _present(item, show_cost)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_catalog_role(repo, user, perms.EDITOR)
    try:
        await repo.delete_item(item_id)
    except InventoryError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
