"""
FastAPI app entrypoint.

Inventory webhook, storefront proxy (settings + subscribe) and merchant admin API.
"""
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from backend/ before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from backinstock.api.routes import admin, proxy, webhooks
from backinstock.config import settings
from backinstock.db.base import Base
from backinstock.db.session import SessionLocal, engine as db_engine
from backinstock.services.engine import Engine, build_engine

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(app.state, "engine", None) is None:
        if settings.database_url.startswith("sqlite"):
            # Local runs without alembic
            Base.metadata.create_all(bind=db_engine)
        app.state.engine = build_engine(settings, SessionLocal)
    logger.info("Back in stock service ready (email backend: %s)", settings.email_backend)
    yield


def create_app(engine: Engine | None = None) -> FastAPI:
    app = FastAPI(title="Back in Stock", version="0.1.0", lifespan=lifespan)
    if engine is not None:
        app.state.engine = engine

    # Storefront calls come from the shop's own domain through the app proxy;
    # CORS_ORIGINS (comma-separated) adds origins for the admin frontend.
    cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    cors_extra = settings.cors_origins or os.getenv("CORS_ORIGINS", "")
    if cors_extra:
        cors_origins.extend(o.strip() for o in cors_extra.split(",") if o.strip())
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(webhooks.router, tags=["webhooks"])
    app.include_router(proxy.router, tags=["storefront"])
    app.include_router(admin.router, prefix="/admin", tags=["admin"])

    @app.get("/", include_in_schema=False)
    def root():
        return {"message": "Back in Stock API", "docs": "/docs", "health": "/health"}

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
