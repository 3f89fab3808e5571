"""Deployment and health endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from landing_deploy.server.deps import OrchestratorDep, StoreDep
from landing_deploy.server.schemas import (
    DeleteResponse,
    DeploymentInfoResponse,
    DeploymentSummary,
    DeployRequest,
    DeployResponse,
    HealthResponse,
    InvalidateResponse,
    InvalidationResult,
    TestFormRequest,
    TestFormResponse,
)

router = APIRouter(prefix="/deployments", tags=["deployments"])
system_router = APIRouter(tags=["system"])


@system_router.get("/health", response_model=HealthResponse)
def health_check(store: StoreDep) -> HealthResponse:
    db_ok = False
    try:
        db_ok = store.check_connection()
    except Exception:
        pass

    return HealthResponse(status="ok" if db_ok else "unhealthy", db_connected=db_ok)


# Handlers are sync so blocking boto3 calls run in the threadpool.


@router.post("/{page_id}/deploy", response_model=DeployResponse)
def deploy_page(
    page_id: str,
    orchestrator: OrchestratorDep,
    body: DeployRequest | None = None,
) -> DeployResponse:
    body = body or DeployRequest()
    deployment = orchestrator.deploy(
        page_id,
        custom_domain=body.custom_domain,
        subdomain=body.subdomain,
    )
    return DeployResponse(deployment=DeploymentSummary.from_deployment(deployment))


@router.get("/{page_id}", response_model=DeploymentInfoResponse)
def get_deployment_info(page_id: str, orchestrator: OrchestratorDep) -> DeploymentInfoResponse:
    return DeploymentInfoResponse.from_deployment(orchestrator.get_info(page_id))


@router.post("/{page_id}/invalidate", response_model=InvalidateResponse)
def invalidate_cache(page_id: str, orchestrator: OrchestratorDep) -> InvalidateResponse:
    result = orchestrator.invalidate(page_id)
    return InvalidateResponse(invalidation=InvalidationResult(**result))


@router.delete("/{page_id}", response_model=DeleteResponse)
def delete_deployment(page_id: str, orchestrator: OrchestratorDep) -> DeleteResponse:
    orchestrator.delete(page_id)
    return DeleteResponse()


@router.post("/{page_id}/test-form", response_model=TestFormResponse)
def send_test_form(
    page_id: str,
    orchestrator: OrchestratorDep,
    body: TestFormRequest | None = None,
) -> TestFormResponse:
    body = body or TestFormRequest()
    result = orchestrator.test_form(page_id, form_id=body.form_id, form_data=body.form_data)
    return TestFormResponse(**result)
