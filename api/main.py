"""HTTP API for the Inventory service.

Provides CRUD endpoints for items, locations and categories, append-only
gifters, and raw file and picture content backed by an S3-compatible object
store. Also serves a health probe and Prometheus metrics.

``create_app`` builds the database engine, the object store client and the
repositories once and keeps them on ``app.state`` for every request.

Copyright (c) Bryn Gwalad 2025
"""

import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Histogram, generate_latest
from sqlalchemy.engine import Engine

from utils.database import create_db_engine, init_db
from utils.object_store import ObjectStore
from utils.settings import Settings

from .content import FileStore, PictureStore
from .errors import InventoryError
from .repository import (
    CategoryRepository,
    FileInfoRepository,
    GifterRepository,
    ItemRepository,
    LocationRepository,
    PictureInfoRepository,
)
from .routes import blobs, gifters
from .routes.records import categories_router, items_router, locations_router

# Module logger
logger = logging.getLogger("inventory_api")

UNMATCHED_ROUTE = "<unmatched>"


def configure_logging(level: str) -> None:
    """Configure the root logger unless the host process already did."""
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=level.upper(),
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    object_store: Optional[ObjectStore] = None,
) -> FastAPI:
    """Build the application.

    ``engine`` and ``object_store`` default to clients built from
    ``settings``; tests pass their own.
    """
    settings = settings or Settings.from_env()
    engine = engine or create_db_engine(settings.database_url)
    object_store = object_store or ObjectStore.from_settings(settings)

    app = FastAPI(title="Inventory API")
    app.state.settings = settings
    app.state.engine = engine
    app.state.items = ItemRepository(engine)
    app.state.locations = LocationRepository(engine)
    app.state.categories = CategoryRepository(engine)
    app.state.gifters = GifterRepository(engine)
    app.state.files = FileStore(FileInfoRepository(engine), object_store)
    app.state.pictures = PictureStore(PictureInfoRepository(engine), app.state.items, object_store)

    registry = CollectorRegistry()
    request_duration = Histogram(
        "inventory_request_duration_seconds",
        "Time spent handling a request",
        ["method", "route"],
        registry=registry,
    )

    @app.on_event("startup")
    async def on_startup():
        """Configure logging and create missing tables."""
        configure_logging(settings.log_level)
        init_db(engine)
        logger.info("Inventory API ready; database=%s", engine.url.render_as_string(hide_password=True))

    @app.middleware("http")
    async def profile_endpoint(request: Request, call_next):
        """Log every request and record how long it took."""
        method = request.method
        path = request.url.path
        logger.info("Handling %s at %s", method, path)
        started = time.perf_counter()

        response = await call_next(request)

        elapsed = time.perf_counter() - started
        route = request.scope.get("route")
        # unmatched paths share one label so arbitrary URLs cannot grow the series
        request_duration.labels(method, getattr(route, "path", UNMATCHED_ROUTE)).observe(elapsed)
        logger.info("Finished handling %s at %s, used %d ms", method, path, elapsed * 1000)
        return response

    @app.exception_handler(InventoryError)
    async def handle_inventory_error(request: Request, exc: InventoryError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.info("%s %s: %s", request.method, request.url.path, exc)
        return PlainTextResponse(str(exc), status_code=exc.status_code)

    @app.get("/status/health", response_class=PlainTextResponse)
    def status():
        """Liveness probe. Does not touch the database or the object store."""
        return "Healthy"

    @app.get("/metrics")
    def metrics():
        if not settings.metrics_enabled:
            return Response(content=b"", media_type="text/plain")
        return Response(content=generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    app.include_router(items_router, prefix="/api")
    app.include_router(locations_router, prefix="/api")
    app.include_router(categories_router, prefix="/api")
    app.include_router(gifters.router, prefix="/api")
    app.include_router(blobs.router, prefix="/api")
    return app
