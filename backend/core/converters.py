from typing import Dict, Iterable, List, Optional

from schemas.items import ItemRead
from schemas.locations import LocationRead
from schemas.stocktakes import StocktakeRead
from schemas.stores import StoreRead

ITEM_EXPORT_HEADERS = [
    "itemId", "humanId", "nameJa", "nameEn", "shortName", "description",
    "sku", "costA", "costB", "supplier", "imageUrl", "categoryId",
]

LOCATION_EXPORT_HEADERS = [
    "storeId", "storeName", "locationId", "locationHumanId", "locationName", "locationDescription",
    "subLocationId", "subLocationHumanId", "subLocationName", "subLocationDescription",
]

STOCKTAKE_EXPORT_HEADERS = [
    "stocktakeId", "storeId", "storeName", "itemId", "itemNameJa", "itemNameEn",
    "locationId", "locationHumanId", "locationName", "subLocationId", "subLocationHumanId",
    "subLocationName", "lastCount", "lastCountedAt", "note",
]


def _cost(value: Optional[float]):
    if value is None:
        return ""
    # 450.0 -> 450
    return int(value) if float(value).is_integer() else value


def item_to_export_row(item: ItemRead) -> List:
    """Convert an item to a row under ITEM_EXPORT_HEADERS"""
    return [
        item.id,
        item.human_id,
        item.name,
        item.name_en,
        item.short_name,
        item.description,
        item.sku,
        _cost(item.cost_a),
        _cost(item.cost_b),
        item.supplier,
        item.image_url,
        item.category_id,
    ]


def location_to_export_rows(location: LocationRead, store: Optional[StoreRead]) -> List[List]:
    """One row per sub-location; a location without sub-locations still gets one row"""
    head = [
        location.store_id,
        store.name if store else "",
        location.id,
        location.human_id,
        location.name,
        location.description,
    ]
    if not location.sublocations:
        return [head + ["", "", "", ""]]
    return [
        head + [sub.id, sub.human_id, sub.name, sub.description]
        for sub in location.sublocations
    ]


def stocktakes_to_export_rows(
    stocktakes: Iterable[StocktakeRead],
    items: Dict[str, ItemRead],
    locations: Dict[str, LocationRead],
    stores: Dict[str, StoreRead],
) -> List[List]:
    rows = []
    for st in stocktakes:
        item = items.get(st.item_id)
        location = locations.get(st.location_id)
        store = stores.get(st.store_id)
        sub = None
        if location and st.sub_location_id:
            sub = next((s for s in location.sublocations if s.id == st.sub_location_id), None)
        rows.append([
            st.id,
            st.store_id,
            store.name if store else "",
            st.item_id,
            item.name if item else "",
            item.name_en if item else "",
            st.location_id,
            location.human_id if location else "",
            location.name if location else "",
            st.sub_location_id or "",
            sub.human_id if sub else "",
            sub.name if sub else "",
            st.last_count,
            st.last_counted_at.isoformat() if st.last_counted_at else "",
            st.description or "",
        ])
    return rows
