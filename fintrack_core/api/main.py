"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from fintrack_core.api.middleware import RequestIDMiddleware, MetricsMiddleware
from fintrack_core.api.v1 import accounts, categories, tags, transactions
from fintrack_core.infrastructure.database.session import create_schema
from fintrack_core.infrastructure.observability.logging import setup_logging
from fintrack_core.config import settings

setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_schema_on_startup:
        create_schema()
        logging.info("Database schema ensured", extra={"step": "startup"})
    yield


def create_app() -> FastAPI:
    """Build the API with tracing, latency metrics and the v1 routes"""
    app = FastAPI(
        title="FinTrack Core",
        description="Multi-tenant personal finance tracking API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Last added runs first
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(categories.router, prefix="/v1", tags=["categories"])
    app.include_router(tags.router, prefix="/v1", tags=["tags"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])

    return app


app = create_app()
