import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.auth import auth_backend, current_active_superuser, current_active_user, fastapi_users
from core.config import settings
from db.database import create_db_and_tables, engine
from db.migrations import run_migrations
from db.offline import OfflineInventoryRepository
from routers.categories import router as categories_router
from routers.deps import get_repository, offline_user
from routers.exports import router as exports_router
from routers.images import router as images_router
from routers.imports import router as imports_router
from routers.items import router as items_router
from routers.locations import router as locations_router
from routers.stocktakes import router as stocktakes_router
from routers.stores import permissions_router
from routers.stores import router as stores_router
from routers.vendors import router as vendors_router
from schemas.users import UserCreate, UserRead, UserUpdate

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.offline_mode:
        logger.info("Offline mode: serving in-memory demo data")
    else:
        await create_db_and_tables()
        await run_migrations(engine)
    yield


app = FastAPI(
    title="Stocktake Inventory API",
    description="API for multi-store item catalogs, storage locations and stock counts",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.offline_mode:
    _offline_repo = OfflineInventoryRepository()
    app.dependency_overrides[get_repository] = lambda: _offline_repo
    app.dependency_overrides[current_active_user] = offline_user
    app.dependency_overrides[current_active_superuser] = offline_user


@app.get("/health")
async def health():
    return {"status": "ok", "offline": settings.offline_mode}


# Authentication routes (fastapi-users)
app.include_router(fastapi_users.get_auth_router(auth_backend), prefix="/auth/jwt", tags=["auth"])
app.include_router(fastapi_users.get_register_router(UserRead, UserCreate), prefix="/auth", tags=["auth"])
app.include_router(fastapi_users.get_reset_password_router(), prefix="/auth", tags=["auth"])
app.include_router(fastapi_users.get_users_router(UserRead, UserUpdate), prefix="/users", tags=["users"])

# Stores and access
app.include_router(stores_router, prefix="/stores", tags=["stores"])
app.include_router(permissions_router, prefix="/permissions", tags=["permissions"])

# Catalog
app.include_router(categories_router, prefix="/categories", tags=["categories"])
app.include_router(vendors_router, prefix="/vendors", tags=["vendors"])
app.include_router(items_router, prefix="/items", tags=["items"])

# Storage and counting
app.include_router(locations_router, prefix="/locations", tags=["locations"])
app.include_router(stocktakes_router, prefix="/stocktakes", tags=["stocktakes"])

# CSV and images
app.include_router(imports_router, prefix="/imports", tags=["imports"])
app.include_router(exports_router, prefix="/exports", tags=["exports"])
app.include_router(images_router, prefix="/images", tags=["images"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
