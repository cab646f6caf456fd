"""FastAPI application entrypoint. No business logic; only wiring, middleware and startup seeding."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from membership.api.v1 import router as v1_router
from membership.core.config import settings
from membership.core.database import SessionLocal
from membership.services.bootstrap import ensure_admin_seed
from membership.services.record_store import RecordStore, SqlStorage

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Seed or repair the default administrator before serving requests."""
    db = SessionLocal()
    try:
        outcome = ensure_admin_seed(RecordStore(SqlStorage(db), settings.STORAGE_KEY), settings)
        logger.info("Admin seed on startup: %s", outcome)
    finally:
        db.close()
    yield


app = FastAPI(
    title="Trapo Membership API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Trapo Membership API"}
