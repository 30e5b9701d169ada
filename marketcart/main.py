# marketcart/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI
from sqlmodel import Session

from marketcart.core.config import get_settings
from marketcart.core.errors import register_exception_handlers
from marketcart.database import create_db_and_tables, engine
from marketcart.services.seed import seed_demo_catalog

# Import models so SQLModel metadata is populated before create_all()
from marketcart.models import user as _user_models  # noqa: F401
from marketcart.models import product as _product_models  # noqa: F401
from marketcart.models import cart as _cart_models  # noqa: F401

# Routers
from marketcart.routers.products import router as products_router
from marketcart.routers.cart import router as cart_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Create tables.
      - Seed the demo catalog when SEED_DEMO_DATA is set.
    """
    logger.info("🔄 Startup: preparing database...")
    try:
        create_db_and_tables()
        if settings.SEED_DEMO_DATA:
            with Session(engine) as session:
                seed_demo_catalog(session)
        logger.info("✅ Startup: tables verified.")
    except Exception as e:
        logger.error(f"❌ Startup: database setup FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Versioned API prefix, e.g. /api/v1
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "marketcart"}
