"""Deployment model: the persisted state machine for one page's publication."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, Field

MAX_LOG_ENTRIES = 100


class DeploymentStatus(StrEnum):
    IDLE = "idle"
    DEPLOYING = "deploying"
    DEPLOYED = "deployed"
    FAILED = "failed"


class LogLevel(StrEnum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    SUCCESS = "success"


class LogEntry(BaseModel):
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    message: str
    level: LogLevel = LogLevel.INFO


class Deployment(BaseModel):
    """One page's deployment record.

    Mutated only by the orchestrator. ``status=deployed`` implies a
    distribution id and ``last_deployed``; ``status=failed`` implies
    ``last_error``.
    """

    page_id: str
    owner_id: str = ""
    status: DeploymentStatus = DeploymentStatus.IDLE

    # Storage
    s3_bucket: str | None = None
    s3_object_key: str | None = None
    s3_url: str | None = None

    # CDN
    distribution_id: str | None = None
    distribution_hostname: str | None = None

    # DNS
    hosted_zone_id: str | None = None
    custom_domain: str | None = None
    subdomain: str | None = None
    use_custom_domain: bool = False

    # Certificate
    certificate_arn: str | None = None
    ssl_enabled: bool = True

    # Outcome
    deployed_url: str | None = None
    last_deployed: datetime | None = None
    deployment_count: int = 0
    error_count: int = 0
    last_error: str | None = None

    # Last artifact
    build_size: int = 0
    build_time: int = 0

    logs: list[LogEntry] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def add_log(self, message: str, level: LogLevel = LogLevel.INFO) -> None:
        """Append a log entry, keeping only the most recent MAX_LOG_ENTRIES."""
        self.logs.append(LogEntry(message=message, level=level))
        if len(self.logs) > MAX_LOG_ENTRIES:
            self.logs = self.logs[-MAX_LOG_ENTRIES:]

    def update_status(self, status: DeploymentStatus, error_message: str | None = None) -> None:
        """Transition to ``status`` and apply its bookkeeping."""
        self.status = status

        if status == DeploymentStatus.DEPLOYED:
            self.last_deployed = datetime.now(UTC)
            self.deployment_count += 1
            self.last_error = None
            self.add_log("Deployment completed successfully", LogLevel.SUCCESS)
        elif status == DeploymentStatus.FAILED:
            self.last_error = error_message or "Unknown error"
            self.error_count += 1
            self.add_log(f"Deployment failed: {self.last_error}", LogLevel.ERROR)
        elif status == DeploymentStatus.DEPLOYING:
            self.add_log("Deployment started")

    def public_url(self, base_domain: str | None) -> str | None:
        """Custom domain > subdomain > distribution hostname."""
        if self.use_custom_domain and self.custom_domain:
            return f"https://{self.custom_domain}"
        if self.subdomain and base_domain:
            return f"https://{self.subdomain}.{base_domain}"
        if self.distribution_hostname:
            return f"https://{self.distribution_hostname}"
        return None

    def recent_logs(self, limit: int = 20) -> list[LogEntry]:
        return self.logs[-limit:]
