"""
Bulk item import.

Each CSV row is matched against the existing catalog (SKU, then human ID,
then name) and turned into a create, an update or a row error. Rows are
applied one at a time so later rows see the items written by earlier ones:
a second row with the same SKU updates the item the first row created, and
allocated ``ITM-####`` IDs keep counting up within the file.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Tuple, Union

from core.csv_rows import ParsedCsv, Row
from core.human_ids import ensure_item_human_id, generate_next_item_human_id
from core.import_results import ImportResult, created, failed, summarize_results, updated
from core.text_search import fold_item_name
from schemas.items import ItemCreate, ItemRead

logger = logging.getLogger(__name__)

ITEM_TEMPLATE_HEADERS = [
    "sku",
    "name",
    "shortName",
    "description",
    "costA",
    "costB",
    "isDiscontinued",
    "nameEn",
    "janCode",
    "supplier",
]
REQUIRED_ITEM_HEADERS = ("name",)


class ItemWriter(Protocol):
    async def add_item(self, payload: ItemCreate) -> ItemRead: ...

    async def update_item(self, item_id: str, changes: dict) -> ItemRead: ...


@dataclass(frozen=True)
class CreateItem:
    payload: ItemCreate
    message: str


@dataclass(frozen=True)
class UpdateItem:
    existing: ItemRead
    changes: dict
    message: str


@dataclass(frozen=True)
class RowError:
    reason: str


RowPlan = Union[CreateItem, UpdateItem, RowError]


@dataclass
class ItemImportState:
    by_sku: Dict[str, ItemRead] = field(default_factory=dict)
    by_human_id: Dict[str, ItemRead] = field(default_factory=dict)
    by_name: Dict[str, ItemRead] = field(default_factory=dict)
    # folded name -> item id
    name_owners: Dict[str, str] = field(default_factory=dict)
    # lowercased human ID -> item id
    human_id_owners: Dict[str, str] = field(default_factory=dict)
    # (item id, human ID) snapshot used for allocation
    allocations: List[Tuple[str, str]] = field(default_factory=list)

    @classmethod
    def from_items(cls, items: Iterable[ItemRead]) -> "ItemImportState":
        state = cls()
        for item in items:
            state.record(item)
        return state

    def match(self, sku: Optional[str], human_id: Optional[str], name: Optional[str]) -> Optional[ItemRead]:
        if sku and sku in self.by_sku:
            return self.by_sku[sku]
        if human_id and human_id.lower() in self.by_human_id:
            return self.by_human_id[human_id.lower()]
        if name and name.lower() in self.by_name:
            return self.by_name[name.lower()]
        return None

    def next_human_id(self) -> str:
        return generate_next_item_human_id(hid for _, hid in self.allocations)

    def record(self, item: ItemRead, previous: Optional[ItemRead] = None) -> None:
        """Index a freshly written item, dropping the keys its previous version held."""
        if previous is not None:
            self._forget(previous)
        item = item.model_copy(update={"human_id": ensure_item_human_id(item.id, item.human_id)})

        if item.sku:
            self.by_sku[item.sku] = item
        self.by_human_id[item.human_id.lower()] = item
        self.by_name[item.name.lower()] = item
        self.name_owners[fold_item_name(item.name)] = item.id
        self.human_id_owners[item.human_id.lower()] = item.id
        self.allocations = [(k, h) for k, h in self.allocations if k != item.id]
        self.allocations.append((item.id, item.human_id))

    def _forget(self, item: ItemRead) -> None:
        keys = [
            (self.by_sku, item.sku),
            (self.by_human_id, (item.human_id or "").lower()),
            (self.by_name, item.name.lower()),
        ]
        for index, key in keys:
            if key and key in index and index[key].id == item.id:
                del index[key]
        for owners, key in (
            (self.name_owners, fold_item_name(item.name)),
            (self.human_id_owners, (item.human_id or "").lower()),
        ):
            if owners.get(key) == item.id:
                del owners[key]


def _value(row: Row, key: str) -> Optional[str]:
    v = row.get(key)
    if v is None:
        return None
    v = v.strip()
    return v or None


def _parse_cost(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(raw)
    return value


def plan_item_row(row: Row, state: ItemImportState) -> RowPlan:
    sku = _value(row, "sku")
    name = _value(row, "name")
    row_human_id = _value(row, "humanId")

    existing = state.match(sku, row_human_id, name)

    costs = {}
    for column, attr in (("costA", "cost_a"), ("costB", "cost_b")):
        raw = _value(row, column)
        if raw is None:
            current = getattr(existing, attr) if existing else None
            costs[attr] = current if current is not None else 0
            continue
        try:
            costs[attr] = _parse_cost(raw)
        except ValueError:
            return RowError(f"Invalid number in {column}: {raw}")

    raw_flag = _value(row, "isDiscontinued")
    if raw_flag is None:
        is_discontinued = existing.is_discontinued if existing else False
    elif raw_flag.upper() in ("TRUE", "FALSE"):
        is_discontinued = raw_flag.upper() == "TRUE"
    else:
        return RowError(f"isDiscontinued must be TRUE or FALSE, got: {raw_flag}")

    human_id = row_human_id or (existing.human_id if existing else None) or state.next_human_id()
    owner = state.human_id_owners.get(human_id.lower())
    if owner is not None and (existing is None or owner != existing.id):
        return RowError(f"Duplicate human ID: {human_id}")

    short_name = _value(row, "shortName")
    description = _value(row, "description")
    name_en = _value(row, "nameEn")
    jan_code = _value(row, "janCode")
    supplier = _value(row, "supplier")
    image_url = _value(row, "imageUrl")

    if existing is None:
        if not name:
            return RowError("name is required")
        if fold_item_name(name) in state.name_owners:
            return RowError(f"Duplicate name: {name}")

        payload = ItemCreate(
            name=name,
            human_id=human_id,
            short_name=short_name or "",
            description=description or "",
            cost_a=costs["cost_a"],
            cost_b=costs["cost_b"],
            sku=sku or "",
            is_discontinued=is_discontinued,
            name_en=name_en or "",
            jan_code=jan_code or "",
            supplier=supplier or "",
            image_url=image_url,
        )
        parts = [f"Name: {name}"]
        if sku:
            parts.append(f"SKU: {sku}")
        if human_id:
            parts.append(f"ID: {human_id}")
        return CreateItem(payload=payload, message=", ".join(parts))

    # update_item refreshes normalized_name whenever name is written
    merged_name = name or existing.name
    changes = {
        "name": merged_name,
        "human_id": human_id,
        "short_name": short_name or existing.short_name,
        "description": description or existing.description,
        "cost_a": costs["cost_a"],
        "cost_b": costs["cost_b"],
        "sku": sku or existing.sku or "",
        "is_discontinued": is_discontinued,
        "name_en": name_en or existing.name_en or "",
        "jan_code": jan_code or existing.jan_code or "",
        "supplier": supplier or existing.supplier or "",
        "image_url": image_url or existing.image_url,
    }
    return UpdateItem(existing=existing, changes=changes, message=f"SKU: {sku}" if sku else merged_name)


async def _apply(row_number: int, plan: RowPlan, state: ItemImportState, writer: ItemWriter) -> ImportResult:
    if isinstance(plan, RowError):
        return failed(row_number, plan.reason)
    try:
        if isinstance(plan, CreateItem):
            item = await writer.add_item(plan.payload)
            state.record(item)
            return created(row_number, plan.message)
        item = await writer.update_item(plan.existing.id, plan.changes)
        state.record(item, previous=plan.existing)
        return updated(row_number, plan.message)
    except Exception as e:
        logger.warning("Item import row %s failed: %s", row_number, e)
        return failed(row_number, str(e))


async def reconcile_items(
    parsed: ParsedCsv,
    existing_items: Iterable[ItemRead],
    writer: ItemWriter,
    required_headers: Sequence[str] = REQUIRED_ITEM_HEADERS,
) -> List[ImportResult]:
    missing = [h for h in required_headers if h not in parsed.headers]
    if missing:
        return [failed(1, f"Missing required headers: {', '.join(missing)}")]

    state = ItemImportState.from_items(existing_items)
    results: List[ImportResult] = []
    # rows are applied in file order; each one sees the indexes left by the previous rows
    for index, row in enumerate(parsed.rows):
        plan = plan_item_row(row, state)
        results.append(await _apply(index + 2, plan, state, writer))

    summary = summarize_results(results)
    logger.info(
        "Item import finished: %s created, %s updated, %s errors",
        summary.created, summary.updated, summary.error,
    )
    return results
