"""
Custom exceptions for the deployment pipeline and its collaborators
"""


class APIError(Exception):
    """Base exception for all errors raised by this package"""

    def __init__(self, message: str, status_code: int = None, response_data: dict = None):
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
        super().__init__(self.message)

    def __str__(self):
        if self.status_code:
            return f"{self.message} (HTTP {self.status_code})"
        return self.message


class ConfigurationError(APIError):
    """Raised when required configuration is missing, before any network call"""
    pass


# ---------------------------------------------------------------------------
# AWS provider errors
# ---------------------------------------------------------------------------

class StorageError(APIError):
    """Raised when an S3 operation fails"""
    pass


class DistributionError(APIError):
    """Raised when a CloudFront distribution operation fails"""
    pass


class DNSError(APIError):
    """Raised when a Route 53 operation fails"""
    pass


class InvalidationError(APIError):
    """Raised when a CloudFront invalidation request fails"""
    pass


# ---------------------------------------------------------------------------
# Artifact fetch outcomes
# ---------------------------------------------------------------------------

class ArtifactNotFoundError(APIError):
    """Raised when a pre-built artifact does not exist"""
    pass


class ArtifactFetchError(APIError):
    """Raised when a pre-built artifact could not be fetched (transient)"""
    pass


# ---------------------------------------------------------------------------
# Page service
# ---------------------------------------------------------------------------

class PageServiceError(APIError):
    """Raised when the page service rejects a request"""
    pass


class PageNotFoundError(PageServiceError):
    """Raised when a page does not exist"""
    pass


class NetworkError(PageServiceError):
    """Raised when network/connection errors occur"""
    pass


class ServerError(PageServiceError):
    """Raised when the page service returns 5xx errors"""
    pass


# ---------------------------------------------------------------------------
# Deployment state machine
# ---------------------------------------------------------------------------

class DeploymentNotFoundError(APIError):
    """Raised when no deployment record exists for a page"""
    pass


class DeploymentInProgressError(APIError):
    """Raised when another operation already holds the page's lock"""
    pass


class DeploymentFailedError(APIError):
    """Raised after a deploy attempt was persisted as failed"""

    def __init__(self, message: str, page_id: str = None):
        self.page_id = page_id
        super().__init__(message, status_code=None)
