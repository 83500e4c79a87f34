import asyncio
import sys
from pathlib import Path

"""
Seed the demo stores, catalog, locations and counts into the Postgres DB.

Uses the same fixtures offline mode serves, written through the repository so
every row gets real UUIDs and the usual validation. Skips seeding when any
store already exists.

This script can be run from either:
- backend/: `uv run python scripts/seed_demo_data.py`
- repo root: `uv run python backend/scripts/seed_demo_data.py`
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import select

from db import fixtures
from db.database import async_session_maker, create_db_and_tables
from db.repository import SqlInventoryRepository
from db.users import User
from schemas.catalog import CategoryCreate, VendorCreate
from schemas.items import ItemCreate
from schemas.locations import LocationCreate, SubLocationCreate
from schemas.stocktakes import StocktakeWrite
from schemas.stores import StoreCreate

from fastapi_users.password import PasswordHelper


password_helper = PasswordHelper()

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo1234"


async def get_or_create_user(session, email: str, password: str) -> User:
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user:
        return user

    user = User(
        email=email,
        hashed_password=password_helper.hash(password),
        is_active=True,
        is_superuser=True,
        is_verified=True,
        name="Demo User",
    )
    session.add(user)
    await session.commit()
    return user


async def seed(repo: SqlInventoryRepository) -> dict:
    # fixture id -> database id
    ids = {}

    for s in fixtures.STORES:
        ids[s["id"]] = (await repo.add_store(StoreCreate(name=s["name"]))).id
    for c in fixtures.CATEGORIES:
        ids[c["id"]] = (await repo.add_category(CategoryCreate(name=c["name"]))).id
    for v in fixtures.VENDORS:
        data = {k: val for k, val in v.items() if k != "id"}
        ids[v["id"]] = (await repo.add_vendor(VendorCreate(**data))).id

    for i in fixtures.ITEMS:
        data = {k: val for k, val in i.items() if k not in ("id", "normalized_name")}
        for ref in ("category_id", "vendor_id"):
            if data.get(ref):
                data[ref] = ids[data[ref]]
        ids[i["id"]] = (await repo.add_item(ItemCreate(**data))).id

    for loc in fixtures.LOCATIONS:
        created = await repo.add_location(LocationCreate(
            store_id=ids[loc["store_id"]],
            human_id=loc["human_id"],
            name=loc["name"],
            description=loc["description"],
        ))
        ids[loc["id"]] = created.id
        for sub in loc["sublocations"]:
            created = await repo.add_sub_location(
                created.id, SubLocationCreate(name=sub["name"], description=sub["description"])
            )
            ids[sub["id"]] = created.sublocations[-1].id

    counts = []
    for st in fixtures.STOCKTAKES:
        counts.append(StocktakeWrite(
            store_id=ids[st["store_id"]],
            item_id=ids[st["item_id"]],
            location_id=ids[st["location_id"]],
            sub_location_id=ids[st["sub_location_id"]] if st["sub_location_id"] else None,
            last_count=st["last_count"],
            last_counted_at=st["last_counted_at"],
            description=st["description"],
        ))
    await repo.save_stocktakes(counts)

    return {
        "stores": len(fixtures.STORES),
        "categories": len(fixtures.CATEGORIES),
        "vendors": len(fixtures.VENDORS),
        "items": len(fixtures.ITEMS),
        "locations": len(fixtures.LOCATIONS),
        "stocktakes": len(counts),
    }


async def main() -> None:
    await create_db_and_tables()
    async with async_session_maker() as session:
        user = await get_or_create_user(session, DEMO_EMAIL, DEMO_PASSWORD)
        repo = SqlInventoryRepository(session)
        if await repo.list_stores():
            print("Stores already exist; skipping demo data.")
            return
        summary = await seed(repo)

    print("Seed complete:")
    print(f"- user: {user.email} (password: {DEMO_PASSWORD})")
    for name, count in summary.items():
        print(f"- {name}: {count}")


if __name__ == "__main__":
    asyncio.run(main())
