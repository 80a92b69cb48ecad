# storefront/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from storefront.core.config import get_settings
from storefront.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from storefront.models import user as _user_models  # noqa: F401
from storefront.models import product as _product_models  # noqa: F401
from storefront.models import order as _order_models  # noqa: F401
from storefront.models import review as _review_models  # noqa: F401
from storefront.models import wishlist as _wishlist_models  # noqa: F401
from storefront.models import address as _address_models  # noqa: F401
from storefront.models import custom_design as _custom_design_models  # noqa: F401
from storefront.models import notify as _notify_models  # noqa: F401

# Routers
from storefront.routers.users import router as users_router
from storefront.routers.products import router as products_router
from storefront.routers.maintenance import router as maintenance_router
from storefront.routers.cart import router as cart_router
from storefront.routers.orders import router as orders_router
from storefront.routers.reviews import router as reviews_router
from storefront.routers.wishlist import router as wishlist_router
from storefront.routers.addresses import router as addresses_router
from storefront.routers.custom_designs import router as custom_designs_router
from storefront.routers.notify import router as notify_router
from storefront.routers.webhooks import router as webhooks_router
from storefront.routers.system import router as system_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
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
origins = list(dict.fromkeys([*settings.CORS_ORIGINS, settings.APP_URL]))

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(users_router, prefix=settings.API_V1_STR)
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(maintenance_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(orders_router, prefix=settings.API_V1_STR)
app.include_router(reviews_router, prefix=settings.API_V1_STR)
app.include_router(wishlist_router, prefix=settings.API_V1_STR)
app.include_router(addresses_router, prefix=settings.API_V1_STR)
app.include_router(custom_designs_router, prefix=settings.API_V1_STR)
app.include_router(notify_router, prefix=settings.API_V1_STR)

# Fixed paths expected by the identity provider, Supabase and monitoring
app.include_router(webhooks_router)
app.include_router(system_router)


@app.get("/")
def root():
    """Root ping."""
    return {"status": "ok", "service": "storefront-backend"}
