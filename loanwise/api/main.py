"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from loanwise.api.middleware import RequestIDMiddleware, MetricsMiddleware
from loanwise.api.v1 import analytics, auth, loans, reference, transactions, users, utility_bills
from loanwise.infrastructure.database.seed import seed_reference_data
from loanwise.infrastructure.database.models import Base
from loanwise.infrastructure.database.session import SessionLocal, engine
from loanwise.infrastructure.observability.logging import setup_logging
from loanwise.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed default banks and wallets on startup"""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_reference_data(db)
    finally:
        db.close()
    yield


def create_app(seed_on_startup: bool = True) -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Loanwise Gateway",
        description="Loan applications, EMI schedules and personal finance tracking",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan if seed_on_startup else None,
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
    app.include_router(auth.router, prefix="/api", tags=["auth"])
    app.include_router(users.router, prefix="/api", tags=["users"])
    app.include_router(reference.router, prefix="/api", tags=["reference"])
    app.include_router(utility_bills.router, prefix="/api", tags=["utility-bills"])
    app.include_router(loans.router, prefix="/api", tags=["loans"])
    app.include_router(transactions.router, prefix="/api", tags=["transactions"])
    app.include_router(analytics.router, prefix="/api", tags=["analytics"])

    return app


app = create_app()
