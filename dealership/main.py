import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dealership.config import get_settings
from dealership.database import engine, Base
from dealership.exceptions import DealershipError, dealership_exception_handler
from dealership.logging_config import setup_logging

# Import Routers
from dealership.routers import (
    auth, mechanic, boss, customers, vehicles, proposals, sales
)

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Initialize DB (migrations own the schema in production)
    Base.metadata.create_all(bind=engine)
    logger.info("%s started", settings.APP_NAME)
    yield
    engine.dispose()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(DealershipError, dealership_exception_handler)

# =================================================================
# REGISTER API ROUTERS
# =================================================================
app.include_router(auth.router)

# --- REPAIR SHOP ---
app.include_router(mechanic.router)
app.include_router(boss.router)

# --- SALES ---
app.include_router(customers.router)
app.include_router(vehicles.router)
app.include_router(proposals.router)
app.include_router(sales.router)


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}
