from datetime import datetime

import pydantic
import pytest

from core.exceptions import DuplicateError, NotFoundError, ValidationError
from schemas.catalog import CategoryCreate
from schemas.items import ItemCreate
from schemas.locations import LocationCreate, SubLocationCreate
from schemas.stocktakes import StocktakeWrite


def count(**overrides) -> StocktakeWrite:
    data = {
        "store_id": "demo-gion",
        "item_id": "item-water",
        "location_id": "loc-gion-kitchen-pantry",
        "last_count": 3,
    }
    data.update(overrides)
    return StocktakeWrite(**data)


@pytest.mark.asyncio
async def test_fixture_items_get_derived_human_ids(repo):
    soy = await repo.get_item("item-soysauce")
    assert soy.human_id == "ITM-AUCE"
    assert await repo.next_item_human_id() == "ITM-0001"


@pytest.mark.asyncio
async def test_active_item_names_are_unique_ignoring_case(empty_repo):
    await empty_repo.add_item(ItemCreate(name="Widget"))
    with pytest.raises(DuplicateError):
        await empty_repo.add_item(ItemCreate(name="widget"))

    # a discontinued item may share the name
    old = await empty_repo.add_item(ItemCreate(name="widget", is_discontinued=True))
    with pytest.raises(DuplicateError):
        await empty_repo.update_item(old.id, {"is_discontinued": False})


@pytest.mark.asyncio
async def test_item_human_id_must_be_unique(empty_repo):
    await empty_repo.add_item(ItemCreate(name="Tea", human_id="ITM-0005"))
    with pytest.raises(DuplicateError):
        await empty_repo.add_item(ItemCreate(name="Coffee", human_id="itm-0005"))
    coffee = await empty_repo.add_item(ItemCreate(name="Coffee"))
    assert coffee.human_id == "ITM-0006"


@pytest.mark.asyncio
async def test_item_references_are_checked(repo):
    with pytest.raises(ValidationError):
        await repo.add_item(ItemCreate(name="Matcha", category_id="cat-missing"))
    with pytest.raises(ValidationError):
        await repo.update_item("item-water", {"vendor_id": "vendor-missing"})


@pytest.mark.asyncio
async def test_update_item_refreshes_normalized_name(repo):
    item = await repo.update_item("item-water", {"name": "Sparkling  Water"})
    assert item.normalized_name == "sparkling_water"
    with pytest.raises(ValidationError):
        await repo.update_item("item-water", {"name": "   "})


@pytest.mark.asyncio
async def test_delete_item_removes_its_counts(repo):
    await repo.delete_item("item-water")
    assert all(st.item_id != "item-water" for st in await repo.list_stocktakes("demo-gion"))
    with pytest.raises(NotFoundError):
        await repo.get_item("item-water")


@pytest.mark.asyncio
async def test_delete_category_clears_items(repo):
    await repo.delete_category("cat-coffee")
    blend = await repo.get_item("item-coffee-blend")
    assert blend.category_id is None
    with pytest.raises(DuplicateError):
        await repo.add_category(CategoryCreate(name="food"))


@pytest.mark.asyncio
async def test_vendor_assignment(repo):
    items = await repo.assign_vendor_items("vendor-local-dairy", ["item-sugar"], ["item-milk"])
    assert [i.id for i in items] == ["item-sugar"]
    assert (await repo.get_item("item-milk")).vendor_id is None


@pytest.mark.asyncio
async def test_next_location_human_id_continues_letters(repo):
    assert await repo.next_location_human_id("demo-gion") == "F"
    assert await repo.next_location_human_id("demo-shibuya") == "KU"

    created = await repo.add_location(LocationCreate(store_id="demo-shibuya", name="Terrace"))
    assert created.human_id == "KU"


@pytest.mark.asyncio
async def test_location_human_id_unique_per_store(repo):
    with pytest.raises(DuplicateError):
        await repo.add_location(LocationCreate(store_id="demo-gion", name="Another", human_id="a"))
    other = await repo.add_location(LocationCreate(store_id="demo-shibuya", name="Another", human_id="a"))
    assert other.human_id == "A"
    with pytest.raises(NotFoundError):
        await repo.add_location(LocationCreate(store_id="store-missing", name="Nowhere"))


@pytest.mark.asyncio
async def test_sub_location_ids_per_parent(repo):
    pantry = await repo.add_sub_location("loc-gion-kitchen-pantry", SubLocationCreate(name="Shelf"))
    assert [s.human_id for s in pantry.sublocations] == ["01"]
    shelves = await repo.add_sub_location("loc-gion-storage-3f", SubLocationCreate(name="D段"))
    assert shelves.sublocations[-1].human_id == "04"


@pytest.mark.asyncio
async def test_delete_sub_location_removes_its_counts(repo):
    await repo.delete_sub_location("loc-gion-kitchen-fridge", "loc-gion-kitchen-fridge-a")
    remaining = [st for st in await repo.list_stocktakes("demo-gion") if st.location_id == "loc-gion-kitchen-fridge"]
    assert [st.sub_location_id for st in remaining] == ["loc-gion-kitchen-fridge-b"]


def test_negative_count_rejected():
    with pytest.raises(pydantic.ValidationError):
        count(last_count=-1)


@pytest.mark.asyncio
async def test_save_stocktakes_creates_and_updates(repo):
    saved = await repo.save_stocktakes([
        count(id="new-1"),
        count(id="st-g-2", item_id="item-beans-brazil", last_count=9,
              last_counted_at=datetime(2024, 1, 5, 9, 0)),
    ])

    assert saved[0].id != "new-1"
    assert saved[0].last_counted_at is not None
    assert saved[1].id == "st-g-2"
    stored = {st.id: st for st in await repo.list_stocktakes("demo-gion")}
    assert stored["st-g-2"].last_count == 9
    assert saved[0].id in stored


@pytest.mark.asyncio
async def test_save_stocktakes_rejects_whole_batch(repo):
    before = len(await repo.list_stocktakes("demo-gion"))
    with pytest.raises(ValidationError):
        await repo.save_stocktakes([count(), count(item_id="item-missing")])
    with pytest.raises(ValidationError):
        await repo.save_stocktakes([count(location_id="loc-shibuya-floor")])
    with pytest.raises(ValidationError):
        await repo.save_stocktakes([count(sub_location_id="loc-gion-register-a")])
    assert len(await repo.list_stocktakes("demo-gion")) == before


@pytest.mark.asyncio
async def test_delete_stocktakes_skips_unsaved_rows(repo):
    deleted = await repo.delete_stocktakes(["new-3", "st-g-1", "st-missing"])
    assert deleted == 1
    assert "st-g-1" not in {st.id for st in await repo.list_stocktakes("demo-gion")}
