from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status

from core import permissions as perms
from core.auth import current_active_user
from core.exceptions import InventoryError
from core.text_search import create_search_terms, matches_search
from db.users import User
from routers.deps import get_repository, http_error, require_store_role
from schemas.locations import (
    LocationCreate,
    LocationRead,
    LocationUpdate,
    SubLocationCreate,
    SubLocationUpdate,
)
from schemas.items import NextHumanId

router = APIRouter()


async def _load(repo, location_id: str) -> LocationRead:
    try:
        return await repo.get_location(location_id)
    except InventoryError as e:
        raise http_error(e) from e


@router.get("/", response_model=List[LocationRead])
async def list_locations(
    store_id: str,
    q: Optional[str] = None,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_store_role(repo, user, store_id, perms.VIEWER)
    terms = create_search_terms(q)
    locations = [
        loc for loc in await repo.list_locations(store_id)
        if matches_search(
            [loc.human_id, loc.name, loc.description] + [s.name for s in loc.sublocations],
            terms,
        )
    ]
    locations.sort(key=lambda loc: (len(loc.human_id), loc.human_id))
    return locations


@router.get("/next-human-id", response_model=NextHumanId)
async def next_human_id(
    store_id: str,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_store_role(repo, user, store_id, perms.EDITOR)
    try:
        return NextHumanId(human_id=await repo.next_location_human_id(store_id))
    except InventoryError as e:
        raise http_error(e) from e


@router.post("/", response_model=LocationRead, status_code=status.HTTP_201_CREATED)
async def create_location(
    payload: LocationCreate,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    """Create a location; the next letter ID is allocated when none is given."""
    await require_store_role(repo, user, payload.store_id, perms.EDITOR)
    try:
        return await repo.add_location(payload)
    except InventoryError as e:
        raise http_error(e) from e


@router.patch("/{location_id}", response_model=LocationRead)
async def update_location(
    location_id: str,
    payload: LocationUpdate,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    location = await _load(repo, location_id)
    await require_store_role(repo, user, location.store_id, perms.EDITOR)
    try:
        return await repo.update_location(location_id, payload.model_dump(exclude_unset=True))
    except InventoryError as e:
        raise http_error(e) from e


@router.delete("/{location_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_location(
    location_id: str,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    location = await _load(repo, location_id)
    await require_store_role(repo, user, location.store_id, perms.EDITOR)
    try:
        await repo.delete_location(location_id)
    except InventoryError as e:
        raise http_error(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{location_id}/sublocations", response_model=LocationRead, status_code=status.HTTP_201_CREATED)
async def create_sub_location(
    location_id: str,
    payload: SubLocationCreate,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    location = await _load(repo, location_id)
    await require_store_role(repo, user, location.store_id, perms.EDITOR)
    try:
        return await repo.add_sub_location(location_id, payload)
    except InventoryError as e:
        raise http_error(e) from e


@router.patch("/{location_id}/sublocations/{sub_location_id}", response_model=LocationRead)
async def update_sub_location(
    location_id: str,
    sub_location_id: str,
    payload: SubLocationUpdate,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    location = await _load(repo, location_id)
    await require_store_role(repo, user, location.store_id, perms.EDITOR)
    try:
        return await repo.update_sub_location(location_id, sub_location_id, payload.model_dump(exclude_unset=True))
    except InventoryError as e:
        raise http_error(e) from e


@router.delete("/{location_id}/sublocations/{sub_location_id}", response_model=LocationRead)
async def delete_sub_location(
    location_id: str,
    sub_location_id: str,
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    location = await _load(repo, location_id)
    await require_store_role(repo, user, location.store_id, perms.EDITOR)
    try:
        return await repo.delete_sub_location(location_id, sub_location_id)
    except InventoryError as e:
        raise http_error(e) from e
