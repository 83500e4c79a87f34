"""
Bulk location import for one store.

Rows without ``parentHumanId`` describe locations and are reconciled first;
rows with it describe sub-locations and are reconciled afterwards against the
updated location map, so a sub-location may appear above its parent in the
file.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Protocol, Sequence, Union

from core.csv_rows import ParsedCsv, Row
from core.human_ids import ensure_location_human_id
from core.import_results import ImportResult, created, failed, summarize_results, updated
from schemas.locations import LocationCreate, LocationRead, SubLocationCreate, SubLocationRead

logger = logging.getLogger(__name__)

LOCATION_TEMPLATE_HEADERS = ["humanId", "name", "description", "parentHumanId"]
REQUIRED_LOCATION_HEADERS = ("name",)


class LocationWriter(Protocol):
    async def add_location(self, payload: LocationCreate) -> LocationRead: ...

    async def update_location(self, location_id: str, changes: dict) -> LocationRead: ...

    async def add_sub_location(self, location_id: str, payload: SubLocationCreate) -> LocationRead: ...

    async def update_sub_location(self, location_id: str, sub_location_id: str, changes: dict) -> LocationRead: ...


@dataclass(frozen=True)
class CreateLocation:
    payload: LocationCreate
    message: str


@dataclass(frozen=True)
class UpdateLocation:
    existing: LocationRead
    changes: dict
    message: str


@dataclass(frozen=True)
class CreateSubLocation:
    parent: LocationRead
    payload: SubLocationCreate
    message: str


@dataclass(frozen=True)
class UpdateSubLocation:
    parent: LocationRead
    existing: SubLocationRead
    changes: dict
    message: str


@dataclass(frozen=True)
class RowError:
    reason: str


RowPlan = Union[CreateLocation, UpdateLocation, CreateSubLocation, UpdateSubLocation, RowError]


@dataclass
class LocationImportState:
    # lowercased human ID -> location
    by_human_id: Dict[str, LocationRead] = field(default_factory=dict)

    @classmethod
    def from_locations(cls, locations: Iterable[LocationRead]) -> "LocationImportState":
        state = cls()
        for loc in locations:
            state.record(loc)
        return state

    def get(self, human_id: str) -> Optional[LocationRead]:
        return self.by_human_id.get(human_id.lower())

    def record(self, location: LocationRead, previous: Optional[LocationRead] = None) -> None:
        if previous is not None:
            self.by_human_id.pop(previous.human_id.lower(), None)
        location = location.model_copy(
            update={"human_id": ensure_location_human_id(location.id, location.human_id)}
        )
        self.by_human_id[location.human_id.lower()] = location


def _value(row: Row, key: str) -> Optional[str]:
    v = row.get(key)
    if v is None:
        return None
    v = v.strip()
    return v or None


def plan_location_row(row: Row, store_id: str, state: LocationImportState) -> RowPlan:
    human_id = _value(row, "humanId")
    name = _value(row, "name")
    description = _value(row, "description") or ""

    if not human_id:
        return RowError("humanId is required for a location row")
    if not name:
        return RowError("name is required")

    message = f"Parent: [{human_id}] {name}"
    existing = state.get(human_id)
    if existing is not None:
        return UpdateLocation(
            existing=existing,
            changes={"name": name, "description": description},
            message=message,
        )
    payload = LocationCreate(store_id=store_id, name=name, human_id=human_id, description=description)
    return CreateLocation(payload=payload, message=message)


def plan_sub_location_row(row: Row, state: LocationImportState) -> RowPlan:
    name = _value(row, "name")
    parent_human_id = _value(row, "parentHumanId") or ""
    description = _value(row, "description") or ""

    if not name:
        return RowError("name is required")
    parent = state.get(parent_human_id)
    if parent is None:
        return RowError(f"Parent location not found: {parent_human_id}")

    message = f"Sub: {name} under [{parent.human_id}]"
    existing = next((s for s in parent.sublocations if s.name.lower() == name.lower()), None)
    if existing is not None:
        return UpdateSubLocation(
            parent=parent,
            existing=existing,
            changes={"description": description},
            message=message,
        )
    return CreateSubLocation(
        parent=parent,
        payload=SubLocationCreate(name=name, description=description),
        message=message,
    )


async def _apply(row_number: int, plan: RowPlan, state: LocationImportState, writer: LocationWriter) -> ImportResult:
    if isinstance(plan, RowError):
        return failed(row_number, plan.reason)
    try:
        if isinstance(plan, CreateLocation):
            state.record(await writer.add_location(plan.payload))
            return created(row_number, plan.message)
        if isinstance(plan, UpdateLocation):
            location = await writer.update_location(plan.existing.id, plan.changes)
            state.record(location, previous=plan.existing)
            return updated(row_number, plan.message)
        if isinstance(plan, CreateSubLocation):
            parent = await writer.add_sub_location(plan.parent.id, plan.payload)
            state.record(parent, previous=plan.parent)
            return created(row_number, plan.message)
        parent = await writer.update_sub_location(plan.parent.id, plan.existing.id, plan.changes)
        state.record(parent, previous=plan.parent)
        return updated(row_number, plan.message)
    except Exception as e:
        logger.warning("Location import row %s failed: %s", row_number, e)
        return failed(row_number, str(e))


async def reconcile_locations(
    parsed: ParsedCsv,
    store_id: str,
    existing_locations: Iterable[LocationRead],
    writer: LocationWriter,
    required_headers: Sequence[str] = REQUIRED_LOCATION_HEADERS,
) -> List[ImportResult]:
    missing = [h for h in required_headers if h not in parsed.headers]
    if missing:
        return [failed(1, f"Missing required headers: {', '.join(missing)}")]

    state = LocationImportState.from_locations(existing_locations)
    numbered = [(index + 2, row) for index, row in enumerate(parsed.rows)]
    parents = [(n, row) for n, row in numbered if not _value(row, "parentHumanId")]
    children = [(n, row) for n, row in numbered if _value(row, "parentHumanId")]

    results: List[ImportResult] = []
    for row_number, row in parents:
        results.append(await _apply(row_number, plan_location_row(row, store_id, state), state, writer))
    for row_number, row in children:
        results.append(await _apply(row_number, plan_sub_location_row(row, state), state, writer))

    results.sort(key=lambda r: r.row)
    summary = summarize_results(results)
    logger.info(
        "Location import for store %s finished: %s created, %s updated, %s errors",
        store_id, summary.created, summary.updated, summary.error,
    )
    return results
