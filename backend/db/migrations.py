"""Database migration utilities"""
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

# table -> {column: DDL type with default}; create_all never alters existing tables
ADDED_COLUMNS = {
    "users": {
        "name": "VARCHAR",
    },
    "items": {
        "human_id": "VARCHAR",
        "normalized_name": "VARCHAR NOT NULL DEFAULT ''",
        "short_name": "VARCHAR NOT NULL DEFAULT ''",
        "name_en": "VARCHAR",
        "jan_code": "VARCHAR",
        "supplier": "VARCHAR",
        "vendor_id": "UUID REFERENCES vendors(id) ON DELETE SET NULL",
        "image_url": "TEXT",
        "image_file_id": "VARCHAR",
    },
    "locations": {
        "image_url": "TEXT",
        "image_file_id": "VARCHAR",
        "sublocations": "JSONB NOT NULL DEFAULT '[]'::jsonb",
    },
}


async def _existing_columns(conn, table: str) -> set:
    result = await conn.execute(
        text("""
            SELECT column_name
            FROM information_schema.columns
            WHERE table_name = :table
        """),
        {"table": table},
    )
    return {row[0] for row in result.fetchall()}


async def add_missing_columns(engine: AsyncEngine):
    """Add columns introduced after a table was first created."""
    async with engine.begin() as conn:
        for table, columns in ADDED_COLUMNS.items():
            existing = await _existing_columns(conn, table)
            if not existing:
                continue
            for column_name, ddl in columns.items():
                if column_name in existing:
                    continue
                logger.info("Adding %s column to %s table", column_name, table)
                await conn.execute(text(f"ALTER TABLE {table} ADD COLUMN IF NOT EXISTS {column_name} {ddl}"))


async def backfill_item_search_names(engine: AsyncEngine):
    """Fill normalized_name for rows written before the column existed."""
    async with engine.begin() as conn:
        result = await conn.execute(
            text("""
                UPDATE items
                SET normalized_name = regexp_replace(lower(name), '\\s+', '_', 'g')
                WHERE normalized_name IS NULL OR normalized_name = ''
            """)
        )
        if result.rowcount:
            logger.info("Backfilled normalized_name on %s items", result.rowcount)


async def run_migrations(engine: AsyncEngine):
    await add_missing_columns(engine)
    await backfill_item_search_names(engine)
