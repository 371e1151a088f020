"""
Business dashboard backend — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from analytics.routes import router as analytics_router
from api.middleware import register_middleware
from auth.routes import router as auth_router
from business.routes import router as profile_router
from config.settings import config
from connectors.encryption import get_cipher
from connectors.registry import ConnectorRegistry
from connectors.routes import callback_router, router as connections_router
from database.session import dispose_engine, init_engine
from insights.routes import router as insights_router

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("httpcore", "httpx", "openai", "anthropic", "sqlalchemy.engine"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_engine()
    get_cipher()
    logger.info("Providers: %s", ", ".join(app.state.connector_registry.providers()))
    logger.info("Application ready to accept requests.")
    yield
    await dispose_engine()


def create_app(registry: Optional[ConnectorRegistry] = None) -> FastAPI:
    app = FastAPI(
        title="Business Dashboard API",
        version="1.0.0",
        description="Data-source connections, analytics import and insights for the client dashboard.",
        lifespan=lifespan,
    )
    app.state.connector_registry = registry or ConnectorRegistry()

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)

    # Routes
    app.include_router(auth_router, prefix="/api/auth")
    app.include_router(callback_router, prefix="/api/auth")
    app.include_router(connections_router, prefix="/api/connections")
    app.include_router(analytics_router, prefix="/api/analytics")
    app.include_router(profile_router, prefix="/api/profile")
    app.include_router(insights_router, prefix="/api/insights")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )
