# app/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI
from sqlmodel import Session

from app.core.config import get_settings
from app.database import create_db_and_tables, engine

# Import models so SQLModel metadata is populated before create_all()
from app.models import admin_user as _admin_user_models  # noqa: F401
from app.models import category as _category_models  # noqa: F401
from app.models import product as _product_models  # noqa: F401
from app.models import order as _order_models  # noqa: F401
from app.models import site_settings as _site_settings_models  # noqa: F401

# Routers
from app.routers.admin_users import router as admin_users_router
from app.routers.auth import router as auth_router
from app.routers.cart import router as cart_router
from app.routers.categories import router as categories_router
from app.routers.exchange_rate import router as exchange_rate_router
from app.routers.orders import router as orders_router
from app.routers.products import admin_router as admin_products_router
from app.routers.products import router as products_router
from app.routers.settings import router as settings_router
from app.routers.uploads import router as uploads_router
from app.repositories.admin_user_repo import AdminUserRepository
from app.services.admin_user_service import AdminUserService

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.
      - Create the bootstrap superadmin when no admin exists yet.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        with Session(engine) as session:
            AdminUserService(AdminUserRepository()).ensure_bootstrap_admin(session, settings)
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
# Credentials are required for the session and cart cookies
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(categories_router, prefix=settings.API_PREFIX)
app.include_router(products_router, prefix=settings.API_PREFIX)
app.include_router(admin_products_router, prefix=settings.API_PREFIX)
app.include_router(cart_router, prefix=settings.API_PREFIX)
app.include_router(orders_router, prefix=settings.API_PREFIX)
app.include_router(uploads_router, prefix=settings.API_PREFIX)
app.include_router(settings_router, prefix=settings.API_PREFIX)
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(admin_users_router, prefix=settings.API_PREFIX)
app.include_router(exchange_rate_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "bodega-backend"}
