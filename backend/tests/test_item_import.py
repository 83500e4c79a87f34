import pytest

from core.csv_rows import parse_csv
from core.import_results import ImportStatus
from core.item_import import reconcile_items
from schemas.items import ItemCreate


async def run_import(repo, text):
    return await reconcile_items(parse_csv(text), await repo.list_items(), repo)


class FailingWriter:
    async def add_item(self, payload):
        raise RuntimeError("database unavailable")

    async def update_item(self, item_id, changes):
        raise RuntimeError("database unavailable")


@pytest.mark.asyncio
async def test_creates_rows_with_sequential_ids(empty_repo):
    results = await run_import(empty_repo, "name,sku,costA\nTea,T-1,100\nCoffee,,200\n")

    assert [r.status for r in results] == [ImportStatus.CREATED, ImportStatus.CREATED]
    assert results[0].row == 2
    assert results[0].message == "Name: Tea, SKU: T-1, ID: ITM-0001"
    assert results[1].message == "Name: Coffee, ID: ITM-0002"

    items = {i.name: i for i in await empty_repo.list_items()}
    assert items["Tea"].human_id == "ITM-0001"
    assert items["Tea"].cost_a == 100
    assert items["Coffee"].human_id == "ITM-0002"
    assert items["Coffee"].normalized_name == "coffee"


@pytest.mark.asyncio
async def test_ids_continue_after_existing_items(empty_repo):
    await empty_repo.add_item(ItemCreate(name="Milk", human_id="ITM-0007"))
    results = await run_import(empty_repo, "name\nSugar\n")
    assert results[0].message == "Name: Sugar, ID: ITM-0008"


@pytest.mark.asyncio
async def test_reimport_is_idempotent(empty_repo):
    text = "name,sku,costA,costB\nTea,T-1,100,120\nCoffee,,200,250\n"
    await run_import(empty_repo, text)
    before = {i.id: i for i in await empty_repo.list_items()}

    results = await run_import(empty_repo, text)

    assert [r.status for r in results] == [ImportStatus.UPDATED, ImportStatus.UPDATED]
    assert results[0].message == "SKU: T-1"
    assert results[1].message == "Coffee"
    after = {i.id: i for i in await empty_repo.list_items()}
    assert after == before


@pytest.mark.asyncio
async def test_bad_cost_only_fails_its_row(empty_repo):
    lines = ["name,costA"]
    for n in range(1, 11):
        lines.append(f"Item {n},{'abc' if n == 5 else n * 10}")

    results = await run_import(empty_repo, "\n".join(lines))

    errors = [r for r in results if r.status == ImportStatus.ERROR]
    assert len(errors) == 1
    assert errors[0].row == 6
    assert errors[0].message == "Invalid number in costA: abc"
    assert len([r for r in results if r.status == ImportStatus.CREATED]) == 9
    assert len(await empty_repo.list_items()) == 9
    assert sorted(i.human_id for i in await empty_repo.list_items())[-1] == "ITM-0009"


@pytest.mark.asyncio
async def test_non_finite_cost_rejected(empty_repo):
    results = await run_import(empty_repo, "name,costB\nTea,inf\n")
    assert results[0].message == "Invalid number in costB: inf"


@pytest.mark.asyncio
async def test_missing_required_header(empty_repo):
    results = await run_import(empty_repo, "sku,costA\nT-1,100\n")
    assert len(results) == 1
    assert results[0].row == 1
    assert results[0].status == ImportStatus.ERROR
    assert results[0].message == "Missing required headers: name"
    assert await empty_repo.list_items() == []


@pytest.mark.asyncio
async def test_duplicate_human_id_between_items(empty_repo):
    await empty_repo.add_item(ItemCreate(name="Tea", sku="S1", human_id="ITM-0001"))
    await empty_repo.add_item(ItemCreate(name="Coffee", sku="S2", human_id="ITM-0002"))

    results = await run_import(empty_repo, "sku,humanId,name\nS2,ITM-0001,Coffee\n")

    assert results[0].status == ImportStatus.ERROR
    assert results[0].message == "Duplicate human ID: ITM-0001"
    coffee = [i for i in await empty_repo.list_items() if i.sku == "S2"][0]
    assert coffee.human_id == "ITM-0002"


@pytest.mark.asyncio
async def test_duplicate_folded_name(empty_repo):
    await empty_repo.add_item(ItemCreate(name="Coffee Beans", sku="B-1"))
    results = await run_import(empty_repo, "sku,name\nB-2,coffee  beans\n")
    assert results[0].message == "Duplicate name: coffee  beans"


@pytest.mark.asyncio
async def test_name_required_for_new_rows(empty_repo):
    results = await run_import(empty_repo, "sku,name\nS9,\n")
    assert results[0].status == ImportStatus.ERROR
    assert results[0].message == "name is required"


@pytest.mark.asyncio
async def test_discontinued_flag(empty_repo):
    results = await run_import(empty_repo, "name,isDiscontinued\nTea,true\nCoffee,maybe\n")
    assert results[0].status == ImportStatus.CREATED
    assert results[1].message == "isDiscontinued must be TRUE or FALSE, got: maybe"
    tea = (await empty_repo.list_items())[0]
    assert tea.is_discontinued is True


@pytest.mark.asyncio
async def test_later_row_updates_item_from_earlier_row(empty_repo):
    results = await run_import(empty_repo, "sku,name,shortName\nS1,Tea,\nS1,Green Tea,GT\n")

    assert [r.status for r in results] == [ImportStatus.CREATED, ImportStatus.UPDATED]
    items = await empty_repo.list_items()
    assert len(items) == 1
    assert items[0].name == "Green Tea"
    assert items[0].short_name == "GT"
    assert items[0].human_id == "ITM-0001"


@pytest.mark.asyncio
async def test_blank_cells_keep_existing_values(repo):
    results = await run_import(repo, "sku,name,costA\nBEV-001,,\n")
    assert results[0].status == ImportStatus.UPDATED
    water = await repo.get_item("item-water")
    assert water.name == "ミネラルウォーター"
    assert water.cost_a == 80


@pytest.mark.asyncio
async def test_writer_failure_is_reported_per_row():
    results = await reconcile_items(parse_csv("name\nTea\nCoffee\n"), [], FailingWriter())
    assert [r.status for r in results] == [ImportStatus.ERROR, ImportStatus.ERROR]
    assert results[0].message == "database unavailable"
