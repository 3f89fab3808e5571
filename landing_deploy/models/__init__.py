"""Domain models for deployments and the pages they publish."""

from landing_deploy.models.deployment import (
    MAX_LOG_ENTRIES,
    Deployment,
    DeploymentStatus,
    LogEntry,
    LogLevel,
)
from landing_deploy.models.page import Page, PublishResult

__all__ = [
    "MAX_LOG_ENTRIES",
    "Deployment",
    "DeploymentStatus",
    "LogEntry",
    "LogLevel",
    "Page",
    "PublishResult",
]
