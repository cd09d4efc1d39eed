"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from rewards_recorder.api.middleware import RequestIDMiddleware, MetricsMiddleware
from rewards_recorder.api.v1 import awards, calendar, reports, transfer
from rewards_recorder.infrastructure.database.session import init_db
from rewards_recorder.infrastructure.observability.logging import setup_logging
from rewards_recorder.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Macau Spending Rewards Recorder",
        description="Personal tracker for spending-reward e-vouchers",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(awards.router, prefix="/v1", tags=["awards"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])
    app.include_router(calendar.router, prefix="/v1", tags=["calendar"])
    app.include_router(transfer.router, prefix="/v1", tags=["transfer"])

    return app


app = create_app()
