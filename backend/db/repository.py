"""
PostgreSQL-backed repository.

Every router and both bulk importers talk to storage through this class (or
its in-memory twin ``db.offline.OfflineInventoryRepository``). Each write
commits on its own, so one failed import row never rolls back its neighbours.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import DuplicateError, InventoryError, NotFoundError, StorageError, ValidationError
from core.human_ids import (
    ensure_item_human_id,
    ensure_location_human_id,
    generate_next_item_human_id,
    generate_next_location_human_id,
    generate_next_sub_location_human_id,
)
from core.text_search import fold_item_name
from db.models import Category, Item, Location, Permission, Stocktake, Store, Vendor
from schemas.catalog import CategoryCreate, CategoryRead, VendorCreate, VendorRead
from schemas.items import ItemCreate, ItemRead
from schemas.locations import LocationCreate, LocationRead, SubLocationCreate
from schemas.stocktakes import NEW_ID_PREFIX, StocktakeRead, StocktakeWrite
from schemas.stores import PermissionRead, PermissionUpsert, StoreCreate, StoreRead

logger = logging.getLogger(__name__)

ITEM_FIELDS = {
    "name", "human_id", "short_name", "description", "cost_a", "cost_b", "sku",
    "is_discontinued", "name_en", "jan_code", "supplier", "category_id", "vendor_id",
    "image_url", "image_file_id",
}
LOCATION_FIELDS = {"name", "human_id", "description", "image_url", "image_file_id"}
SUB_LOCATION_FIELDS = {"name", "description", "image_url", "image_file_id"}
VENDOR_FIELDS = {"name", "contact_name", "internal_contact_name", "email", "phone", "notes"}


def _maybe_uuid(value) -> Optional[UUID]:
    if value is None or value == "":
        return None
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _uuid_or_404(value, what: str) -> UUID:
    parsed = _maybe_uuid(value)
    if parsed is None:
        raise NotFoundError(f"{what} not found")
    return parsed


def _item_read(m: Item) -> ItemRead:
    data = m.to_schema
    data["human_id"] = ensure_item_human_id(data["id"], data["human_id"])
    return ItemRead(**data)


def _location_read(m: Location) -> LocationRead:
    data = m.to_schema
    data["human_id"] = ensure_location_human_id(data["id"], data["human_id"])
    return LocationRead(**data)


class SqlInventoryRepository:
    def __init__(self, session: AsyncSession):
        self.db = session

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning("Integrity error on commit: %s", e.orig)
            raise DuplicateError(f"Conflicting record: {e.orig}") from e
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.warning("Commit failed: %s", e)
            raise StorageError(f"Could not save record: {getattr(e, 'orig', None) or e}") from e

    # --- stores & permissions ---

    async def list_stores(self, store_ids: Optional[Iterable[str]] = None) -> List[StoreRead]:
        stmt = select(Store).order_by(func.lower(Store.name).asc())
        if store_ids is not None:
            ids = [u for u in (_maybe_uuid(s) for s in store_ids) if u is not None]
            if not ids:
                return []
            stmt = stmt.where(Store.id.in_(ids))
        res = await self.db.execute(stmt)
        return [StoreRead(**s.to_schema) for s in res.scalars().all()]

    async def _get_store_model(self, store_id) -> Store:
        res = await self.db.execute(select(Store).where(Store.id == _uuid_or_404(store_id, "Store")))
        m = res.scalar_one_or_none()
        if not m:
            raise NotFoundError("Store not found")
        return m

    async def get_store(self, store_id: str) -> StoreRead:
        return StoreRead(**(await self._get_store_model(store_id)).to_schema)

    async def add_store(self, payload: StoreCreate) -> StoreRead:
        existing = await self.db.execute(select(Store).where(func.lower(Store.name) == payload.name.lower()))
        if existing.scalar_one_or_none():
            raise DuplicateError("Store already exists")
        m = Store(name=payload.name)
        self.db.add(m)
        await self._commit()
        await self.db.refresh(m)
        return StoreRead(**m.to_schema)

    async def list_permissions(self, user_id: Optional[str] = None) -> List[PermissionRead]:
        stmt = select(Permission)
        if user_id is not None:
            parsed = _maybe_uuid(user_id)
            if parsed is None:
                return []
            stmt = stmt.where(Permission.user_id == parsed)
        res = await self.db.execute(stmt)
        return [PermissionRead(**p.to_schema) for p in res.scalars().all()]

    async def upsert_permission(self, payload: PermissionUpsert) -> PermissionRead:
        store = await self._get_store_model(payload.store_id)
        user_id = _maybe_uuid(payload.user_id)
        if user_id is None:
            raise ValidationError("user_id must be a UUID")

        res = await self.db.execute(
            select(Permission).where(Permission.user_id == user_id, Permission.store_id == store.id)
        )
        m = res.scalar_one_or_none()
        if m is None:
            m = Permission(user_id=user_id, store_id=store.id)
            self.db.add(m)
        m.role = payload.role
        m.can_view_cost = bool(payload.can_view_cost)
        await self._commit()
        await self.db.refresh(m)
        return PermissionRead(**m.to_schema)

    # --- categories ---

    async def list_categories(self) -> List[CategoryRead]:
        res = await self.db.execute(select(Category).order_by(func.lower(Category.name).asc()))
        return [CategoryRead(**c.to_schema) for c in res.scalars().all()]

    async def _category_name_taken(self, name: str, exclude_id: Optional[UUID] = None) -> bool:
        stmt = select(Category.id).where(func.lower(Category.name) == name.lower())
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        res = await self.db.execute(stmt)
        return res.first() is not None

    async def add_category(self, payload: CategoryCreate) -> CategoryRead:
        if await self._category_name_taken(payload.name):
            raise DuplicateError("Category already exists")
        m = Category(name=payload.name)
        self.db.add(m)
        await self._commit()
        await self.db.refresh(m)
        return CategoryRead(**m.to_schema)

    async def update_category(self, category_id: str, changes: dict) -> CategoryRead:
        res = await self.db.execute(select(Category).where(Category.id == _uuid_or_404(category_id, "Category")))
        m = res.scalar_one_or_none()
        if not m:
            raise NotFoundError("Category not found")
        name = (changes.get("name") or "").strip()
        if name:
            if await self._category_name_taken(name, exclude_id=m.id):
                raise DuplicateError("Category already exists")
            m.name = name
            await self._commit()
            await self.db.refresh(m)
        return CategoryRead(**m.to_schema)

    async def delete_category(self, category_id: str) -> None:
        cid = _uuid_or_404(category_id, "Category")
        res = await self.db.execute(select(Category).where(Category.id == cid))
        m = res.scalar_one_or_none()
        if not m:
            raise NotFoundError("Category not found")
        await self.db.execute(update(Item).where(Item.category_id == cid).values(category_id=None))
        await self.db.delete(m)
        await self._commit()

    # --- vendors ---

    async def list_vendors(self) -> List[VendorRead]:
        res = await self.db.execute(select(Vendor).order_by(func.lower(Vendor.name).asc()))
        return [VendorRead(**v.to_schema) for v in res.scalars().all()]

    async def _get_vendor_model(self, vendor_id) -> Vendor:
        res = await self.db.execute(select(Vendor).where(Vendor.id == _uuid_or_404(vendor_id, "Vendor")))
        m = res.scalar_one_or_none()
        if not m:
            raise NotFoundError("Vendor not found")
        return m

    async def get_vendor(self, vendor_id: str) -> VendorRead:
        return VendorRead(**(await self._get_vendor_model(vendor_id)).to_schema)

    async def add_vendor(self, payload: VendorCreate) -> VendorRead:
        existing = await self.db.execute(select(Vendor).where(func.lower(Vendor.name) == payload.name.lower()))
        if existing.scalar_one_or_none():
            raise DuplicateError("Vendor already exists")
        m = Vendor(**payload.model_dump())
        self.db.add(m)
        await self._commit()
        await self.db.refresh(m)
        return VendorRead(**m.to_schema)

    async def update_vendor(self, vendor_id: str, changes: dict) -> VendorRead:
        m = await self._get_vendor_model(vendor_id)
        data = {k: v for k, v in changes.items() if k in VENDOR_FIELDS}
        if "name" in data:
            name = (data.pop("name") or "").strip()
            if name:
                existing = await self.db.execute(
                    select(Vendor.id).where(func.lower(Vendor.name) == name.lower(), Vendor.id != m.id)
                )
                if existing.first() is not None:
                    raise DuplicateError("Vendor already exists")
                m.name = name
        for key, value in data.items():
            setattr(m, key, value)
        await self._commit()
        await self.db.refresh(m)
        return VendorRead(**m.to_schema)

    async def delete_vendor(self, vendor_id: str) -> None:
        m = await self._get_vendor_model(vendor_id)
        await self.db.execute(update(Item).where(Item.vendor_id == m.id).values(vendor_id=None))
        await self.db.delete(m)
        await self._commit()

    async def assign_vendor_items(self, vendor_id: str, assign_ids: List[str], unassign_ids: List[str]) -> List[ItemRead]:
        m = await self._get_vendor_model(vendor_id)
        assign = [u for u in (_maybe_uuid(i) for i in assign_ids) if u is not None]
        unassign = [u for u in (_maybe_uuid(i) for i in unassign_ids) if u is not None]
        if assign:
            await self.db.execute(update(Item).where(Item.id.in_(assign)).values(vendor_id=m.id))
        if unassign:
            await self.db.execute(
                update(Item).where(Item.id.in_(unassign), Item.vendor_id == m.id).values(vendor_id=None)
            )
        await self._commit()
        res = await self.db.execute(select(Item).where(Item.vendor_id == m.id).order_by(Item.name))
        return [_item_read(i) for i in res.scalars().all()]

    # --- items ---

    async def list_items(self) -> List[ItemRead]:
        res = await self.db.execute(select(Item).order_by(Item.name))
        return [_item_read(m) for m in res.scalars().all()]

    async def _get_item_model(self, item_id) -> Item:
        res = await self.db.execute(select(Item).where(Item.id == _uuid_or_404(item_id, "Item")))
        m = res.scalar_one_or_none()
        if not m:
            raise NotFoundError("Item not found")
        return m

    async def get_item(self, item_id: str) -> ItemRead:
        return _item_read(await self._get_item_model(item_id))

    async def next_item_human_id(self) -> str:
        res = await self.db.execute(select(Item.id, Item.human_id))
        return generate_next_item_human_id(
            ensure_item_human_id(str(row.id), row.human_id) for row in res.all()
        )

    async def _check_item_name(self, name: str, is_discontinued: bool, exclude_id: Optional[UUID] = None) -> None:
        if is_discontinued:
            return
        stmt = select(Item.name).where(func.lower(Item.name) == name.lower(), Item.is_discontinued.is_(False))
        if exclude_id is not None:
            stmt = stmt.where(Item.id != exclude_id)
        res = await self.db.execute(stmt)
        row = res.first()
        if row is not None:
            raise DuplicateError(f"An active item named '{row.name}' already exists")

    async def _check_item_human_id(self, human_id: str, exclude_id: Optional[UUID] = None) -> None:
        stmt = select(Item.id).where(func.lower(Item.human_id) == human_id.lower())
        if exclude_id is not None:
            stmt = stmt.where(Item.id != exclude_id)
        res = await self.db.execute(stmt)
        if res.first() is not None:
            raise DuplicateError(f"Human ID {human_id} is already used by another item")

    async def _resolve_item_refs(self, data: dict) -> None:
        if "category_id" in data:
            if data["category_id"]:
                cid = _maybe_uuid(data["category_id"])
                found = cid and (await self.db.execute(select(Category.id).where(Category.id == cid))).first()
                if not found:
                    raise ValidationError("Unknown category")
                data["category_id"] = cid
            else:
                data["category_id"] = None
        if "vendor_id" in data:
            if data["vendor_id"]:
                vid = _maybe_uuid(data["vendor_id"])
                found = vid and (await self.db.execute(select(Vendor.id).where(Vendor.id == vid))).first()
                if not found:
                    raise ValidationError("Unknown vendor")
                data["vendor_id"] = vid
            else:
                data["vendor_id"] = None

    async def add_item(self, payload: ItemCreate) -> ItemRead:
        data = payload.model_dump()
        await self._check_item_name(payload.name, payload.is_discontinued)
        await self._resolve_item_refs(data)
        if payload.human_id:
            await self._check_item_human_id(payload.human_id)
        else:
            data["human_id"] = await self.next_item_human_id()

        m = Item(id=uuid.uuid4(), normalized_name=fold_item_name(payload.name), **data)
        self.db.add(m)
        await self._commit()
        await self.db.refresh(m)
        return _item_read(m)

    async def update_item(self, item_id: str, changes: dict) -> ItemRead:
        m = await self._get_item_model(item_id)
        data = {k: v for k, v in changes.items() if k in ITEM_FIELDS}
        if "name" in data:
            data["name"] = (data["name"] or "").strip()
            if not data["name"]:
                raise ValidationError("name is required")

        name = data.get("name", m.name)
        is_discontinued = data.get("is_discontinued", m.is_discontinued)
        if "name" in data or "is_discontinued" in data:
            await self._check_item_name(name, is_discontinued, exclude_id=m.id)
        if data.get("human_id"):
            await self._check_item_human_id(data["human_id"], exclude_id=m.id)
        await self._resolve_item_refs(data)

        for key, value in data.items():
            setattr(m, key, value)
        m.normalized_name = fold_item_name(m.name)
        await self._commit()
        await self.db.refresh(m)
        return _item_read(m)

    async def delete_item(self, item_id: str) -> None:
        m = await self._get_item_model(item_id)
        await self.db.execute(delete(Stocktake).where(Stocktake.item_id == m.id))
        await self.db.delete(m)
        await self._commit()

    # --- locations ---

    async def list_locations(self, store_id: Optional[str] = None) -> List[LocationRead]:
        stmt = select(Location).order_by(Location.human_id)
        if store_id is not None:
            sid = _maybe_uuid(store_id)
            if sid is None:
                return []
            stmt = stmt.where(Location.store_id == sid)
        res = await self.db.execute(stmt)
        return [_location_read(m) for m in res.scalars().all()]

    async def _get_location_model(self, location_id, for_update: bool = False) -> Location:
        stmt = select(Location).where(Location.id == _uuid_or_404(location_id, "Location"))
        if for_update:
            stmt = stmt.with_for_update()
        res = await self.db.execute(stmt)
        m = res.scalar_one_or_none()
        if not m:
            raise NotFoundError("Location not found")
        return m

    async def get_location(self, location_id: str) -> LocationRead:
        return _location_read(await self._get_location_model(location_id))

    async def _check_location_human_id(self, store_id: UUID, human_id: str, exclude_id: Optional[UUID] = None) -> None:
        stmt = select(Location.id).where(
            Location.store_id == store_id,
            func.upper(Location.human_id) == human_id.upper(),
        )
        if exclude_id is not None:
            stmt = stmt.where(Location.id != exclude_id)
        res = await self.db.execute(stmt)
        if res.first() is not None:
            raise DuplicateError(f"Location ID {human_id} already exists in this store")

    async def next_location_human_id(self, store_id: str) -> str:
        sid = _uuid_or_404(store_id, "Store")
        res = await self.db.execute(select(Location.human_id).where(Location.store_id == sid))
        return generate_next_location_human_id(row.human_id for row in res.all())

    async def add_location(self, payload: LocationCreate) -> LocationRead:
        store = await self._get_store_model(payload.store_id)
        if payload.human_id:
            human_id = payload.human_id.upper()
            await self._check_location_human_id(store.id, human_id)
        else:
            human_id = await self.next_location_human_id(str(store.id))

        m = Location(
            store_id=store.id,
            human_id=human_id,
            name=payload.name,
            description=payload.description or "",
            sublocations=[],
        )
        self.db.add(m)
        await self._commit()
        await self.db.refresh(m)
        return _location_read(m)

    async def update_location(self, location_id: str, changes: dict) -> LocationRead:
        m = await self._get_location_model(location_id)
        data = {k: v for k, v in changes.items() if k in LOCATION_FIELDS}
        if data.get("human_id"):
            data["human_id"] = data["human_id"].strip().upper()
            await self._check_location_human_id(m.store_id, data["human_id"], exclude_id=m.id)
        for key, value in data.items():
            setattr(m, key, value)
        await self._commit()
        await self.db.refresh(m)
        return _location_read(m)

    async def delete_location(self, location_id: str) -> None:
        m = await self._get_location_model(location_id)
        await self.db.execute(delete(Stocktake).where(Stocktake.location_id == m.id))
        await self.db.delete(m)
        await self._commit()

    async def add_sub_location(self, location_id: str, payload: SubLocationCreate) -> LocationRead:
        # row lock so two writers cannot hand out the same sub-location number
        m = await self._get_location_model(location_id, for_update=True)
        subs = list(m.sublocations or [])
        subs.append({
            "id": uuid.uuid4().hex,
            "human_id": generate_next_sub_location_human_id(s.get("human_id") for s in subs),
            "name": payload.name.strip(),
            "description": payload.description or "",
            "image_url": None,
            "image_file_id": None,
        })
        m.sublocations = subs
        await self._commit()
        await self.db.refresh(m)
        return _location_read(m)

    async def update_sub_location(self, location_id: str, sub_location_id: str, changes: dict) -> LocationRead:
        m = await self._get_location_model(location_id, for_update=True)
        subs = [dict(s) for s in (m.sublocations or [])]
        target = next((s for s in subs if s.get("id") == sub_location_id), None)
        if target is None:
            raise NotFoundError("Sub-location not found")
        target.update({k: v for k, v in changes.items() if k in SUB_LOCATION_FIELDS})
        m.sublocations = subs
        await self._commit()
        await self.db.refresh(m)
        return _location_read(m)

    async def delete_sub_location(self, location_id: str, sub_location_id: str) -> LocationRead:
        m = await self._get_location_model(location_id, for_update=True)
        subs = [s for s in (m.sublocations or []) if s.get("id") != sub_location_id]
        if len(subs) == len(m.sublocations or []):
            raise NotFoundError("Sub-location not found")
        m.sublocations = subs
        await self.db.execute(
            delete(Stocktake).where(Stocktake.location_id == m.id, Stocktake.sub_location_id == sub_location_id)
        )
        await self._commit()
        await self.db.refresh(m)
        return _location_read(m)

    # --- stocktakes ---

    async def list_stocktakes(self, store_id: str) -> List[StocktakeRead]:
        sid = _maybe_uuid(store_id)
        if sid is None:
            return []
        res = await self.db.execute(
            select(Stocktake).where(Stocktake.store_id == sid).order_by(Stocktake.last_counted_at.desc())
        )
        return [StocktakeRead(**s.to_schema) for s in res.scalars().all()]

    async def _check_stocktake_refs(self, payload: StocktakeWrite) -> dict:
        item_id = _maybe_uuid(payload.item_id)
        if item_id is None or (await self.db.execute(select(Item.id).where(Item.id == item_id))).first() is None:
            raise ValidationError(f"Unknown item {payload.item_id}")
        location_id = _maybe_uuid(payload.location_id)
        location = None
        if location_id is not None:
            location = (await self.db.execute(select(Location).where(Location.id == location_id))).scalar_one_or_none()
        if location is None or str(location.store_id) != str(payload.store_id):
            raise ValidationError(f"Unknown location {payload.location_id} for store {payload.store_id}")
        if payload.sub_location_id and not any(
            s.get("id") == payload.sub_location_id for s in (location.sublocations or [])
        ):
            raise ValidationError(f"Unknown sub-location {payload.sub_location_id}")
        return {
            "store_id": location.store_id,
            "item_id": item_id,
            "location_id": location.id,
            "sub_location_id": payload.sub_location_id,
            "last_count": payload.last_count,
            "last_counted_at": payload.last_counted_at or datetime.now(timezone.utc),
            "description": payload.description,
        }

    async def save_stocktakes(self, payloads: List[StocktakeWrite]) -> List[StocktakeRead]:
        saved: List[Stocktake] = []
        try:
            for payload in payloads:
                values = await self._check_stocktake_refs(payload)
                if payload.is_new:
                    m = Stocktake(id=uuid.uuid4(), **values)
                    self.db.add(m)
                else:
                    res = await self.db.execute(
                        select(Stocktake).where(Stocktake.id == _uuid_or_404(payload.id, f"Stocktake {payload.id}"))
                    )
                    m = res.scalar_one_or_none()
                    if m is None:
                        raise NotFoundError(f"Stocktake {payload.id} not found")
                    for key, value in values.items():
                        setattr(m, key, value)
                saved.append(m)
        except InventoryError:
            # nothing from a rejected batch is kept
            await self.db.rollback()
            raise
        await self._commit()
        for m in saved:
            await self.db.refresh(m)
        return [StocktakeRead(**m.to_schema) for m in saved]

    async def delete_stocktakes(self, ids: List[str]) -> int:
        parsed = [
            u for u in (_maybe_uuid(i) for i in ids if not i.startswith(NEW_ID_PREFIX))
            if u is not None
        ]
        if not parsed:
            return 0
        res = await self.db.execute(delete(Stocktake).where(Stocktake.id.in_(parsed)))
        await self._commit()
        return res.rowcount or 0
