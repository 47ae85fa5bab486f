"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from rimborsami_engine.api.middleware import MetricsMiddleware, RequestIDMiddleware
from rimborsami_engine.api.v1 import documents, forms, opportunities, quiz, refunds
from rimborsami_engine.config import settings
from rimborsami_engine.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Rimborsami Engine",
        description="Refund opportunity matching and document risk scoring",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
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
    app.include_router(quiz.router, prefix="/v1", tags=["quiz"])
    app.include_router(opportunities.router, prefix="/v1", tags=["opportunities"])
    app.include_router(documents.router, prefix="/v1", tags=["documents"])
    app.include_router(forms.router, prefix="/v1", tags=["forms"])
    app.include_router(refunds.router, prefix="/v1", tags=["refunds"])

    return app


app = create_app()
