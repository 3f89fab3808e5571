"""API request/response schemas (separate from domain models).

JSON is camelCase on the wire; Python attributes stay snake_case.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from landing_deploy.models.deployment import Deployment, LogEntry


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Requests ---


class DeployRequest(_CamelModel):
    custom_domain: str | None = None
    subdomain: str | None = None


class TestFormRequest(_CamelModel):
    __test__ = False  # not a pytest class

    form_id: str | None = None
    form_data: dict[str, Any] | None = None


# --- Responses ---


class DeploymentSummary(_CamelModel):
    status: str
    url: str | None
    distribution_hostname: str | None
    custom_domain: str | None
    subdomain: str | None
    last_deployed: datetime | None
    distribution_id: str | None

    @classmethod
    def from_deployment(cls, deployment: Deployment) -> DeploymentSummary:
        return cls(
            status=deployment.status.value,
            url=deployment.deployed_url,
            distribution_hostname=deployment.distribution_hostname,
            custom_domain=deployment.custom_domain,
            subdomain=deployment.subdomain,
            last_deployed=deployment.last_deployed,
            distribution_id=deployment.distribution_id,
        )


class DeployResponse(_CamelModel):
    success: bool = True
    message: str = "Deployment completed successfully"
    deployment: DeploymentSummary


class DeploymentInfoResponse(DeploymentSummary):
    deployment_count: int
    error_count: int
    last_error: str | None
    build_size: int
    build_time: int
    logs: list[LogEntry] = Field(default_factory=list)

    @classmethod
    def from_deployment(cls, deployment: Deployment) -> DeploymentInfoResponse:
        summary = DeploymentSummary.from_deployment(deployment)
        return cls(
            **summary.model_dump(),
            deployment_count=deployment.deployment_count,
            error_count=deployment.error_count,
            last_error=deployment.last_error,
            build_size=deployment.build_size,
            build_time=deployment.build_time,
            logs=deployment.logs,
        )


class InvalidationResult(_CamelModel):
    invalidation_id: str
    status: str


class InvalidateResponse(_CamelModel):
    success: bool = True
    message: str = "Cache invalidated successfully"
    invalidation: InvalidationResult


class DeleteResponse(_CamelModel):
    success: bool = True
    message: str = "Deployment deleted successfully"


class TestFormResponse(_CamelModel):
    __test__ = False

    success: bool
    status_code: int
    payload: dict[str, Any]


class HealthResponse(_CamelModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    status: str
    db_connected: bool
