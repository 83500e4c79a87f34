"""
In-memory repository for offline demo mode.

Implements the same async interface as ``SqlInventoryRepository`` over plain
dicts of schema objects, seeded from ``db.fixtures``. Nothing is persisted;
restarting the process restores the demo data.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from core.exceptions import DuplicateError, NotFoundError, ValidationError
from core.human_ids import (
    ensure_item_human_id,
    ensure_location_human_id,
    generate_next_item_human_id,
    generate_next_location_human_id,
    generate_next_sub_location_human_id,
)
from core.text_search import fold_item_name
from db import fixtures
from schemas.catalog import CategoryCreate, CategoryRead, VendorCreate, VendorRead
from schemas.items import ItemCreate, ItemRead
from schemas.locations import LocationCreate, LocationRead, SubLocationCreate, SubLocationRead
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


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _pick(changes: dict, allowed: set) -> dict:
    return {k: v for k, v in changes.items() if k in allowed}


class OfflineInventoryRepository:
    def __init__(self, seed: bool = True):
        self.stores: Dict[str, StoreRead] = {}
        self.permissions: Dict[str, PermissionRead] = {}
        self.categories: Dict[str, CategoryRead] = {}
        self.vendors: Dict[str, VendorRead] = {}
        self.items: Dict[str, ItemRead] = {}
        self.locations: Dict[str, LocationRead] = {}
        self.stocktakes: Dict[str, StocktakeRead] = {}
        if seed:
            self.load_fixtures()

    def load_fixtures(self) -> None:
        for s in fixtures.STORES:
            self.stores[s["id"]] = StoreRead(**s)
        for c in fixtures.CATEGORIES:
            self.categories[c["id"]] = CategoryRead(**c)
        for v in fixtures.VENDORS:
            self.vendors[v["id"]] = VendorRead(**v)
        for i in fixtures.ITEMS:
            self.items[i["id"]] = ItemRead(**i)
        for loc in fixtures.LOCATIONS:
            self.locations[loc["id"]] = LocationRead(**loc)
        for st in fixtures.STOCKTAKES:
            self.stocktakes[st["id"]] = StocktakeRead(**st)
        logger.info(
            "Loaded offline demo data: %s stores, %s items, %s locations, %s stocktakes",
            len(self.stores), len(self.items), len(self.locations), len(self.stocktakes),
        )

    # --- stores & permissions ---

    async def list_stores(self, store_ids: Optional[Iterable[str]] = None) -> List[StoreRead]:
        wanted = None if store_ids is None else set(store_ids)
        stores = [s for s in self.stores.values() if wanted is None or s.id in wanted]
        return sorted(stores, key=lambda s: s.name.lower())

    async def get_store(self, store_id: str) -> StoreRead:
        store = self.stores.get(store_id)
        if not store:
            raise NotFoundError("Store not found")
        return store

    async def add_store(self, payload: StoreCreate) -> StoreRead:
        if any(s.name.lower() == payload.name.lower() for s in self.stores.values()):
            raise DuplicateError("Store already exists")
        store = StoreRead(id=_new_id("store"), name=payload.name)
        self.stores[store.id] = store
        return store

    async def list_permissions(self, user_id: Optional[str] = None) -> List[PermissionRead]:
        return [p for p in self.permissions.values() if user_id is None or p.user_id == user_id]

    async def upsert_permission(self, payload: PermissionUpsert) -> PermissionRead:
        await self.get_store(payload.store_id)
        for p in self.permissions.values():
            if p.user_id == payload.user_id and p.store_id == payload.store_id:
                updated = p.model_copy(update={"role": payload.role, "can_view_cost": bool(payload.can_view_cost)})
                self.permissions[p.id] = updated
                return updated
        created = PermissionRead(
            id=_new_id("perm"),
            user_id=payload.user_id,
            store_id=payload.store_id,
            role=payload.role,
            can_view_cost=bool(payload.can_view_cost),
        )
        self.permissions[created.id] = created
        return created

    # --- categories ---

    async def list_categories(self) -> List[CategoryRead]:
        return sorted(self.categories.values(), key=lambda c: c.name.lower())

    async def add_category(self, payload: CategoryCreate) -> CategoryRead:
        if any(c.name.lower() == payload.name.lower() for c in self.categories.values()):
            raise DuplicateError("Category already exists")
        category = CategoryRead(id=_new_id("cat"), name=payload.name)
        self.categories[category.id] = category
        return category

    async def update_category(self, category_id: str, changes: dict) -> CategoryRead:
        category = self.categories.get(category_id)
        if not category:
            raise NotFoundError("Category not found")
        name = (changes.get("name") or "").strip()
        if name:
            if any(c.id != category_id and c.name.lower() == name.lower() for c in self.categories.values()):
                raise DuplicateError("Category already exists")
            category = category.model_copy(update={"name": name})
            self.categories[category_id] = category
        return category

    async def delete_category(self, category_id: str) -> None:
        if self.categories.pop(category_id, None) is None:
            raise NotFoundError("Category not found")
        for item in list(self.items.values()):
            if item.category_id == category_id:
                self.items[item.id] = item.model_copy(update={"category_id": None})

    # --- vendors ---

    async def list_vendors(self) -> List[VendorRead]:
        return sorted(self.vendors.values(), key=lambda v: v.name.lower())

    async def get_vendor(self, vendor_id: str) -> VendorRead:
        vendor = self.vendors.get(vendor_id)
        if not vendor:
            raise NotFoundError("Vendor not found")
        return vendor

    async def add_vendor(self, payload: VendorCreate) -> VendorRead:
        if any(v.name.lower() == payload.name.lower() for v in self.vendors.values()):
            raise DuplicateError("Vendor already exists")
        vendor = VendorRead(id=_new_id("vendor"), **payload.model_dump())
        self.vendors[vendor.id] = vendor
        return vendor

    async def update_vendor(self, vendor_id: str, changes: dict) -> VendorRead:
        vendor = await self.get_vendor(vendor_id)
        data = _pick(changes, VENDOR_FIELDS)
        if data.get("name") is not None:
            data["name"] = data["name"].strip()
            if not data["name"]:
                raise ValidationError("name is required")
            if any(v.id != vendor_id and v.name.lower() == data["name"].lower() for v in self.vendors.values()):
                raise DuplicateError("Vendor already exists")
        elif "name" in data:
            del data["name"]
        vendor = vendor.model_copy(update=data)
        self.vendors[vendor_id] = vendor
        return vendor

    async def delete_vendor(self, vendor_id: str) -> None:
        if self.vendors.pop(vendor_id, None) is None:
            raise NotFoundError("Vendor not found")
        for item in list(self.items.values()):
            if item.vendor_id == vendor_id:
                self.items[item.id] = item.model_copy(update={"vendor_id": None})

    async def assign_vendor_items(self, vendor_id: str, assign_ids: List[str], unassign_ids: List[str]) -> List[ItemRead]:
        await self.get_vendor(vendor_id)
        for item_id in assign_ids:
            await self.update_item(item_id, {"vendor_id": vendor_id})
        for item_id in unassign_ids:
            item = await self.get_item(item_id)
            if item.vendor_id == vendor_id:
                await self.update_item(item_id, {"vendor_id": None})
        return [i for i in await self.list_items() if i.vendor_id == vendor_id]

    # --- items ---

    def _with_human_id(self, item: ItemRead) -> ItemRead:
        return item.model_copy(update={"human_id": ensure_item_human_id(item.id, item.human_id)})

    def _check_item_name(self, name: str, is_discontinued: bool, exclude_id: Optional[str] = None) -> None:
        if is_discontinued:
            return
        lowered = name.lower()
        for other in self.items.values():
            if other.id != exclude_id and not other.is_discontinued and other.name.lower() == lowered:
                raise DuplicateError(f"An active item named '{other.name}' already exists")

    def _check_item_human_id(self, human_id: str, exclude_id: Optional[str] = None) -> None:
        lowered = human_id.lower()
        for other in self.items.values():
            if other.id != exclude_id and ensure_item_human_id(other.id, other.human_id).lower() == lowered:
                raise DuplicateError(f"Human ID {human_id} is already used by another item")

    def _check_item_refs(self, data: dict) -> None:
        if data.get("category_id") and data["category_id"] not in self.categories:
            raise ValidationError("Unknown category")
        if data.get("vendor_id") and data["vendor_id"] not in self.vendors:
            raise ValidationError("Unknown vendor")

    async def list_items(self) -> List[ItemRead]:
        return [self._with_human_id(i) for i in self.items.values()]

    async def get_item(self, item_id: str) -> ItemRead:
        item = self.items.get(item_id)
        if not item:
            raise NotFoundError("Item not found")
        return self._with_human_id(item)

    async def next_item_human_id(self) -> str:
        return generate_next_item_human_id(i.human_id for i in await self.list_items())

    async def add_item(self, payload: ItemCreate) -> ItemRead:
        data = payload.model_dump()
        self._check_item_name(payload.name, payload.is_discontinued)
        self._check_item_refs(data)
        if payload.human_id:
            self._check_item_human_id(payload.human_id)
        else:
            data["human_id"] = await self.next_item_human_id()

        item = ItemRead(id=_new_id("item"), normalized_name=fold_item_name(payload.name), **data)
        self.items[item.id] = item
        return item

    async def update_item(self, item_id: str, changes: dict) -> ItemRead:
        current = await self.get_item(item_id)
        data = _pick(changes, ITEM_FIELDS)
        if "name" in data:
            data["name"] = (data["name"] or "").strip()
            if not data["name"]:
                raise ValidationError("name is required")

        merged = current.model_copy(update=data)
        if "name" in data or "is_discontinued" in data:
            self._check_item_name(merged.name, merged.is_discontinued, exclude_id=item_id)
        if data.get("human_id"):
            self._check_item_human_id(data["human_id"], exclude_id=item_id)
        self._check_item_refs(data)

        merged = merged.model_copy(update={"normalized_name": fold_item_name(merged.name)})
        self.items[item_id] = merged
        return merged

    async def delete_item(self, item_id: str) -> None:
        if self.items.pop(item_id, None) is None:
            raise NotFoundError("Item not found")
        for st in list(self.stocktakes.values()):
            if st.item_id == item_id:
                del self.stocktakes[st.id]

    # --- locations ---

    def _with_location_human_id(self, location: LocationRead) -> LocationRead:
        return location.model_copy(
            update={"human_id": ensure_location_human_id(location.id, location.human_id)},
            deep=True,
        )

    async def list_locations(self, store_id: Optional[str] = None) -> List[LocationRead]:
        return [
            self._with_location_human_id(loc) for loc in self.locations.values()
            if store_id is None or loc.store_id == store_id
        ]

    async def get_location(self, location_id: str) -> LocationRead:
        location = self.locations.get(location_id)
        if not location:
            raise NotFoundError("Location not found")
        return self._with_location_human_id(location)

    def _check_location_human_id(self, store_id: str, human_id: str, exclude_id: Optional[str] = None) -> None:
        for other in self.locations.values():
            if other.store_id == store_id and other.id != exclude_id and other.human_id.upper() == human_id.upper():
                raise DuplicateError(f"Location ID {human_id} already exists in this store")

    async def next_location_human_id(self, store_id: str) -> str:
        return generate_next_location_human_id(loc.human_id for loc in await self.list_locations(store_id))

    async def add_location(self, payload: LocationCreate) -> LocationRead:
        await self.get_store(payload.store_id)
        if payload.human_id:
            human_id = payload.human_id.upper()
            self._check_location_human_id(payload.store_id, human_id)
        else:
            human_id = await self.next_location_human_id(payload.store_id)

        location = LocationRead(
            id=_new_id("loc"),
            store_id=payload.store_id,
            human_id=human_id,
            name=payload.name,
            description=payload.description or "",
        )
        self.locations[location.id] = location
        return location.model_copy(deep=True)

    async def update_location(self, location_id: str, changes: dict) -> LocationRead:
        current = await self.get_location(location_id)
        data = _pick(changes, LOCATION_FIELDS)
        if data.get("human_id"):
            data["human_id"] = data["human_id"].strip().upper()
            self._check_location_human_id(current.store_id, data["human_id"], exclude_id=location_id)
        location = current.model_copy(update=data, deep=True)
        self.locations[location_id] = location
        return location.model_copy(deep=True)

    async def delete_location(self, location_id: str) -> None:
        if self.locations.pop(location_id, None) is None:
            raise NotFoundError("Location not found")
        for st in list(self.stocktakes.values()):
            if st.location_id == location_id:
                del self.stocktakes[st.id]

    async def add_sub_location(self, location_id: str, payload: SubLocationCreate) -> LocationRead:
        location = await self.get_location(location_id)
        sub = SubLocationRead(
            id=_new_id("sub"),
            human_id=generate_next_sub_location_human_id(s.human_id for s in location.sublocations),
            name=payload.name.strip(),
            description=payload.description or "",
        )
        location = location.model_copy(update={"sublocations": location.sublocations + [sub]}, deep=True)
        self.locations[location_id] = location
        return location.model_copy(deep=True)

    async def update_sub_location(self, location_id: str, sub_location_id: str, changes: dict) -> LocationRead:
        location = await self.get_location(location_id)
        if not any(s.id == sub_location_id for s in location.sublocations):
            raise NotFoundError("Sub-location not found")
        data = _pick(changes, SUB_LOCATION_FIELDS)
        subs = [s.model_copy(update=data) if s.id == sub_location_id else s for s in location.sublocations]
        location = location.model_copy(update={"sublocations": subs}, deep=True)
        self.locations[location_id] = location
        return location.model_copy(deep=True)

    async def delete_sub_location(self, location_id: str, sub_location_id: str) -> LocationRead:
        location = await self.get_location(location_id)
        subs = [s for s in location.sublocations if s.id != sub_location_id]
        if len(subs) == len(location.sublocations):
            raise NotFoundError("Sub-location not found")
        location = location.model_copy(update={"sublocations": subs}, deep=True)
        self.locations[location_id] = location
        for st in list(self.stocktakes.values()):
            if st.location_id == location_id and st.sub_location_id == sub_location_id:
                del self.stocktakes[st.id]
        return location.model_copy(deep=True)

    # --- stocktakes ---

    async def list_stocktakes(self, store_id: str) -> List[StocktakeRead]:
        return [st for st in self.stocktakes.values() if st.store_id == store_id]

    def _check_stocktake_refs(self, payload: StocktakeWrite) -> None:
        if payload.item_id not in self.items:
            raise ValidationError(f"Unknown item {payload.item_id}")
        location = self.locations.get(payload.location_id)
        if location is None or location.store_id != payload.store_id:
            raise ValidationError(f"Unknown location {payload.location_id} for store {payload.store_id}")
        if payload.sub_location_id and not any(s.id == payload.sub_location_id for s in location.sublocations):
            raise ValidationError(f"Unknown sub-location {payload.sub_location_id}")

    async def save_stocktakes(self, payloads: List[StocktakeWrite]) -> List[StocktakeRead]:
        for payload in payloads:
            self._check_stocktake_refs(payload)
            if not payload.is_new and payload.id not in self.stocktakes:
                raise NotFoundError(f"Stocktake {payload.id} not found")

        saved = []
        for payload in payloads:
            data = payload.model_dump(exclude={"id"})
            if data["last_counted_at"] is None:
                data["last_counted_at"] = datetime.now(timezone.utc)
            stocktake_id = _new_id("st") if payload.is_new else payload.id
            stocktake = StocktakeRead(id=stocktake_id, **data)
            self.stocktakes[stocktake_id] = stocktake
            saved.append(stocktake)
        return saved

    async def delete_stocktakes(self, ids: List[str]) -> int:
        deleted = 0
        for stocktake_id in ids:
            if stocktake_id.startswith(NEW_ID_PREFIX):
                continue
            if self.stocktakes.pop(stocktake_id, None) is not None:
                deleted += 1
        return deleted
