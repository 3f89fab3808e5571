"""FastAPI application factory and entry point."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from landing_deploy import __version__
from landing_deploy.db.store import DeploymentStore
from landing_deploy.server.middleware import RequestIdMiddleware, add_exception_handlers
from landing_deploy.server.routes import router, system_router
from landing_deploy.services.deployment_orchestrator import DeploymentOrchestrator
from landing_deploy.utils.config import get_settings
from landing_deploy.utils.logger import get_logger

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Initialize the store and orchestrator on startup, cleanup on shutdown."""
    settings = get_settings()

    store = DeploymentStore(settings.database_url)
    store.init_schema()

    app.state.settings = settings
    app.state.store = store
    app.state.orchestrator = DeploymentOrchestrator(store=store, config=settings)

    logger.info(f"landing-deploy API started on {settings.api_host}:{settings.api_port}")
    yield

    store.close()
    logger.info("landing-deploy API shut down")


def include_routes(app: FastAPI) -> None:
    app.include_router(system_router)
    app.include_router(router)


def create_app() -> FastAPI:
    """Application factory."""
    app = FastAPI(
        title="landing-deploy",
        description="Publishes landing pages to S3 + CloudFront + Route 53",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(RequestIdMiddleware)
    add_exception_handlers(app)
    include_routes(app)

    return app


def main(host: str | None = None, port: int | None = None) -> None:
    """Entry point for the `landing-deploy-api` command."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "landing_deploy.server.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
    )
