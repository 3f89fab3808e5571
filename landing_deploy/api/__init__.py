"""
API Layer - page service client and shared exceptions
"""

# Base Provider
from landing_deploy.api.base_provider import BasePageProvider

# Provider Implementations
from landing_deploy.api.pages_client import HTTPPageProvider

# Provider Factory
from landing_deploy.api.provider_factory import get_page_provider

# Exceptions (shared across the package)
from landing_deploy.api.exceptions import (
    APIError,
    ConfigurationError,
    StorageError,
    DistributionError,
    DNSError,
    InvalidationError,
    ArtifactNotFoundError,
    ArtifactFetchError,
    PageServiceError,
    PageNotFoundError,
    NetworkError,
    ServerError,
    DeploymentNotFoundError,
    DeploymentInProgressError,
    DeploymentFailedError,
)

__all__ = [
    # Base
    "BasePageProvider",

    # Providers
    "HTTPPageProvider",

    # Factory
    "get_page_provider",

    # Exceptions
    "APIError",
    "ConfigurationError",
    "StorageError",
    "DistributionError",
    "DNSError",
    "InvalidationError",
    "ArtifactNotFoundError",
    "ArtifactFetchError",
    "PageServiceError",
    "PageNotFoundError",
    "NetworkError",
    "ServerError",
    "DeploymentNotFoundError",
    "DeploymentInProgressError",
    "DeploymentFailedError",
]
