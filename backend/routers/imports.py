import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from core import permissions as perms
from core.auth import current_active_user
from core.csv_rows import parse_csv, write_csv
from core.exceptions import InventoryError
from core.import_results import summarize_results
from core.item_import import ITEM_TEMPLATE_HEADERS, reconcile_items
from core.location_import import LOCATION_TEMPLATE_HEADERS, reconcile_locations
from db.users import User
from routers.deps import csv_response, get_repository, http_error, require_catalog_role, require_store_role
from schemas.imports import ImportReport

logger = logging.getLogger(__name__)

router = APIRouter()

TEMPLATES = {
    "items": (ITEM_TEMPLATE_HEADERS, "item_template.csv"),
    "locations": (LOCATION_TEMPLATE_HEADERS, "location_template.csv"),
}


async def _read_text(file: UploadFile) -> str:
    data = await file.read()
    try:
        # utf-8-sig drops the BOM Excel writes
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="File must be UTF-8 encoded CSV")


@router.get("/templates/{kind}")
async def download_template(
    kind: str,
    user: User = Depends(current_active_user),
):
    if kind not in TEMPLATES:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown template")
    headers, filename = TEMPLATES[kind]
    return csv_response(write_csv(headers, []), filename)


@router.post("/items", response_model=ImportReport)
async def import_items(
    file: UploadFile = File(...),
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_catalog_role(repo, user, perms.ADMIN)
    parsed = parse_csv(await _read_text(file))
    logger.info("User %s importing %s item rows from %s", user.id, len(parsed.rows), file.filename)

    results = await reconcile_items(parsed, await repo.list_items(), repo)
    return ImportReport(results=results, summary=summarize_results(results))


@router.post("/locations", response_model=ImportReport)
async def import_locations(
    store_id: str,
    file: UploadFile = File(...),
    repo=Depends(get_repository),
    user: User = Depends(current_active_user),
):
    await require_store_role(repo, user, store_id, perms.ADMIN)
    try:
        await repo.get_store(store_id)
    except InventoryError as e:
        raise http_error(e) from e
    parsed = parse_csv(await _read_text(file))
    logger.info("User %s importing %s location rows into store %s", user.id, len(parsed.rows), store_id)

    results = await reconcile_locations(parsed, store_id, await repo.list_locations(store_id), repo)
    return ImportReport(results=results, summary=summarize_results(results))
