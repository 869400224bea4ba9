"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from payment_calendar.api.middleware import RequestIDMiddleware, MetricsMiddleware
from payment_calendar.api.v1 import bills, loans, savings, summary
from payment_calendar.infrastructure.database.session import init_db
from payment_calendar.infrastructure.observability.logging import setup_logging
from payment_calendar.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Payment Calendar",
        description="Loan, bill and income schedules projected onto a payment calendar",
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
    app.include_router(loans.router, prefix="/v1", tags=["loans"])
    app.include_router(bills.router, prefix="/v1", tags=["bills"])
    app.include_router(savings.router, prefix="/v1", tags=["savings"])
    app.include_router(summary.router, prefix="/v1", tags=["summary"])

    return app


app = create_app()
