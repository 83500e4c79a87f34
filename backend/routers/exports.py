from typing import List, Optional

from fastapi import APIRouter, Depends

from core import permissions as perms
from core.auth import current_active_user
from core.converters import (
    ITEM_EXPORT_HEADERS,
    LOCATION_EXPORT_HEADERS,
    STOCKTAKE_EXPORT_HEADERS,
    item_to_export_row,
    location_to_export_rows,
    stocktakes_to_export_rows,
)
from core.csv_rows import write_csv
from db.users import User
from routers.deps import csv_response, get_repository, require_catalog_role, require_store_role, user_permissions
from schemas.stores import StoreRead

router = APIRouter()


async def _stores_in_scope(repo, user: User, store_id: Optional[str]) -> List[StoreRead]:
    if store_id:
        await require_store_role(repo, user, store_id, perms.VIEWER)
        return await repo.list_stores([store_id])
    permissions = await user_permissions(repo, user)
    return await repo.list_stores(perms.visible_store_ids(user, permissions))


@router.get("/items.csv")
async def export_items(
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    permissions = await require_catalog_role(repo, user, perms.VIEWER)
    show_cost = perms.can_view_cost(user, permissions)
    rows = []
    for item in sorted(await repo.list_items(), key=lambda i: i.name.lower()):
        if not show_cost:
            item = item.model_copy(update={"cost_a": None, "cost_b": None})
        rows.append(item_to_export_row(item))
    return csv_response(write_csv(ITEM_EXPORT_HEADERS, rows), "items.csv")


@router.get("/locations.csv")
async def export_locations(
    store_id: Optional[str] = None,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    rows = []
    for store in await _stores_in_scope(repo, user, store_id):
        for location in await repo.list_locations(store.id):
            rows.extend(location_to_export_rows(location, store))
    return csv_response(write_csv(LOCATION_EXPORT_HEADERS, rows), "locations.csv")


@router.get("/stocktakes.csv")
async def export_stocktakes(
    store_id: Optional[str] = None,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    stores = await _stores_in_scope(repo, user, store_id)
    items = {i.id: i for i in await repo.list_items()}
    rows = []
    for store in stores:
        locations = {loc.id: loc for loc in await repo.list_locations(store.id)}
        rows.extend(stocktakes_to_export_rows(
            await repo.list_stocktakes(store.id),
            items,
            locations,
            {store.id: store},
        ))
    return csv_response(write_csv(STOCKTAKE_EXPORT_HEADERS, rows), "item-assignments.csv")
