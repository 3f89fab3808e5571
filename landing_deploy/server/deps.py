"""FastAPI dependency injection."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from landing_deploy.db.store import DeploymentStore
from landing_deploy.services.deployment_orchestrator import DeploymentOrchestrator


def _get_store(request: Request) -> DeploymentStore:
    """Get the deployment store from app state."""
    return request.app.state.store  # type: ignore[no-any-return]


def _get_orchestrator(request: Request) -> DeploymentOrchestrator:
    """Get the orchestrator from app state."""
    return request.app.state.orchestrator  # type: ignore[no-any-return]


StoreDep = Annotated[DeploymentStore, Depends(_get_store)]
OrchestratorDep = Annotated[DeploymentOrchestrator, Depends(_get_orchestrator)]
