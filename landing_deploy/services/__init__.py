"""
Business logic and service layer
"""

from landing_deploy.services.aws_storage_service import AWSStorageService
from landing_deploy.services.aws_cdn_service import (
    AWSCloudFrontService,
    CreateDistributionStrategy,
    DistributionStrategy,
    OriginScanStrategy,
    StaticOverrideStrategy,
)
from landing_deploy.services.aws_domain_service import AWSDomainService
from landing_deploy.services.cache_invalidator import CacheInvalidator
from landing_deploy.services.content_resolver import ContentResolver
from landing_deploy.services.html_builder import HTMLBuilder
from landing_deploy.services.form_submission import FormSubmissionService, build_form_payload
from landing_deploy.services.locks import PageLockRegistry
from landing_deploy.services.deployment_orchestrator import DeploymentOrchestrator

__all__ = [
    # AWS S3
    "AWSStorageService",
    # AWS CloudFront
    "AWSCloudFrontService",
    "DistributionStrategy",
    "StaticOverrideStrategy",
    "OriginScanStrategy",
    "CreateDistributionStrategy",
    "CacheInvalidator",
    # AWS Route 53
    "AWSDomainService",
    # Content
    "ContentResolver",
    "HTMLBuilder",
    "FormSubmissionService",
    "build_form_payload",
    # Pipeline orchestrator
    "PageLockRegistry",
    "DeploymentOrchestrator",
]
