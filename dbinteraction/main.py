"""
FastAPI application entry point.
Challenge: Mount routes, middleware (Prometheus), logging setup, engine disposal on shutdown.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import make_asgi_app

from dbinteraction.api.v1.router import api_router
from dbinteraction.config import get_settings
from dbinteraction.core.dependencies import connections
from dbinteraction.core.log_config import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Shutdown: close pooled connections of every engine opened while serving."""
    yield
    await connections.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging("DEBUG" if settings.debug else settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        description="Data-access layer for the Users table: generic SQL statements and stored procedures behind one response envelope.",
        version="1.0.0",
        lifespan=lifespan,
    )

    # CORS for API consumers; no cookies or auth headers, so no credentials
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Prometheus metrics at /metrics (data-access outcomes and latency)
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)

    app.include_router(api_router, prefix="/api")

    return app


app = create_app()
