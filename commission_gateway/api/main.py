"""FastAPI application factory"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from commission_gateway.api.errors import register_error_handlers
from commission_gateway.api.middleware import MetricsMiddleware, RequestIDMiddleware
from commission_gateway.api.v1 import transactions
from commission_gateway.config import Settings, settings
from commission_gateway.domain.rules import describe_rules, load_rules
from commission_gateway.infrastructure.database.session import create_schema
from commission_gateway.infrastructure.observability.logging import log_rules_loaded, setup_logging

# Setup structured logging
setup_logging(settings.log_level)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application"""
    app_settings = app_settings or settings

    # Fail fast on bad rule configuration, before serving anything
    rules = load_rules(app_settings.transaction.rules)
    log_rules_loaded(describe_rules(rules), len(rules))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app_settings.create_schema:
            await create_schema()
        logging.info(
            "API documentation available",
            extra={"step": "startup", "docs_url": f"http://{app_settings.host}:{app_settings.port}/docs"},
        )
        yield

    app = FastAPI(
        title="Commission Gateway",
        description="Transaction registration with bracket-based commissions",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.commission_rules = rules

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_allowed_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        allow_credentials=True,
    )

    register_error_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": app_settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(transactions.router, prefix="/api", tags=["transactions"])

    return app


app = create_app()
