from typing import List

from fastapi import APIRouter, Depends

from core import permissions as perms
from core.auth import current_active_user
from core.exceptions import InventoryError
from db.users import User
from routers.deps import get_repository, http_error, require_store_role
from schemas.stocktakes import StocktakeDelete, StocktakeRead, StocktakeWrite

router = APIRouter()


@router.get("/", response_model=List[StocktakeRead])
async def list_stocktakes(
    store_id: str,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_store_role(repo, user, store_id, perms.VIEWER)
    return await repo.list_stocktakes(store_id)


@router.put("/", response_model=List[StocktakeRead])
async def save_stocktakes(
    payload: List[StocktakeWrite],
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    """
    Save a counting sheet in one batch.
    Rows whose id is missing or starts with "new-" are inserted, others updated.
    """
    for store_id in sorted({p.store_id for p in payload}):
        await require_store_role(repo, user, store_id, perms.EDITOR)
    try:
        return await repo.save_stocktakes(payload)
    except InventoryError as e:
        raise http_error(e) from e


@router.post("/delete")
async def delete_stocktakes(
    payload: StocktakeDelete,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_store_role(repo, user, payload.store_id, perms.EDITOR)
    in_store = {st.id for st in await repo.list_stocktakes(payload.store_id)}
    deleted = await repo.delete_stocktakes([i for i in payload.ids if i in in_store])
    return {"deleted": deleted}
