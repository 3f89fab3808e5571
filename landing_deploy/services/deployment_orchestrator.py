"""
Deployment Orchestrator
Combines the storage, CloudFront, Route 53 and invalidation services into a
single pipeline that publishes a page and records the outcome.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from landing_deploy.api.base_provider import BasePageProvider
from landing_deploy.api.exceptions import (
    DeploymentFailedError,
    DeploymentNotFoundError,
)
from landing_deploy.api.provider_factory import get_page_provider
from landing_deploy.db.store import DeploymentStore
from landing_deploy.models.deployment import Deployment, DeploymentStatus, LogLevel
from landing_deploy.models.page import Page, PublishResult
from landing_deploy.services.aws_cdn_service import AWSCloudFrontService
from landing_deploy.services.aws_domain_service import AWSDomainService
from landing_deploy.services.aws_storage_service import AWSStorageService
from landing_deploy.services.cache_invalidator import CacheInvalidator
from landing_deploy.services.content_resolver import ContentResolver
from landing_deploy.services.form_submission import FormSubmissionService
from landing_deploy.services.locks import PageLockRegistry
from landing_deploy.utils.config import get_settings, Settings
from landing_deploy.utils.logger import get_logger
from landing_deploy.utils.validators import (
    SubdomainValidator,
    validate_domain,
    validate_subdomain,
)

logger = get_logger(__name__)

AUTO_SUBDOMAIN_ID_CHARS = 8


class DeploymentOrchestrator:
    """
    End-to-end page deployment pipeline.

    ``deploy`` runs these steps strictly in order, persisting the record
    after each one so a failed attempt keeps its partial progress:

    1. Load page, load or create the record, transition to ``deploying``
    2. Resolve content                  (artifact or synthesized shell)
    3. Publish to S3                    (``{path}/index.html``)
    4. Compute the final hostname
    5. Find or create the distribution  (override > scan > create)
    6. Upsert the DNS alias             (only with a hostname)
    7. Invalidate ``/*``
    8. Write back the page, transition to ``deployed``

    Any exception transitions the record to ``failed`` and is re-raised as
    ``DeploymentFailedError``. There is no retry: re-invoking ``deploy``
    reuses the bucket, distribution and DNS record the last attempt left.
    """

    def __init__(
        self,
        store: DeploymentStore,
        page_provider: Optional[BasePageProvider] = None,
        config: Optional[Settings] = None,
        storage: Optional[AWSStorageService] = None,
        distributions: Optional[AWSCloudFrontService] = None,
        dns: Optional[AWSDomainService] = None,
        invalidator: Optional[CacheInvalidator] = None,
        content_resolver: Optional[ContentResolver] = None,
        form_sender: Optional[FormSubmissionService] = None,
        locks: Optional[PageLockRegistry] = None,
    ):
        """
        Initialize the orchestrator with a shared configuration.

        Collaborators not passed in are built from ``config``.
        """
        self.config = config or get_settings()
        self.store = store
        self.page_provider = page_provider or get_page_provider(self.config)
        self.storage = storage or AWSStorageService(config=self.config)
        self.distributions = distributions or AWSCloudFrontService(config=self.config)
        self.dns = dns or AWSDomainService(config=self.config)
        self.invalidator = invalidator or CacheInvalidator(
            config=self.config, cloudfront_client=self.distributions.cloudfront_client
        )
        self.content_resolver = content_resolver or ContentResolver(self.storage, config=self.config)
        self.form_sender = form_sender or FormSubmissionService(config=self.config)
        self.locks = locks or PageLockRegistry()

    # ------------------------------------------------------------------ #
    #  Deploy                                                              #
    # ------------------------------------------------------------------ #

    def deploy(
        self,
        page_id: str,
        custom_domain: Optional[str] = None,
        subdomain: Optional[str] = None,
    ) -> Deployment:
        """
        Publish a page.

        Args:
            page_id:       Page to publish
            custom_domain: Fully qualified hostname, e.g. "foo.example.com"
            subdomain:     Label under the configured base domain

        Returns:
            The deployed record

        Raises:
            PageNotFoundError:         The page does not exist (no record is touched)
            ValidationError:           Malformed domain or subdomain
            DeploymentInProgressError: Another operation holds the page
            DeploymentFailedError:     Any pipeline step failed; the record is ``failed``
        """
        if custom_domain:
            custom_domain = validate_domain(custom_domain)
        if subdomain:
            subdomain = validate_subdomain(subdomain)

        with self.locks.hold(page_id):
            page = self.page_provider.get_page(page_id)
            logger.info(f"🚀 Starting deployment for page {page_id}")

            deployment = self.store.get(page_id) or Deployment(
                page_id=page_id, owner_id=page.owner_id
            )
            try:
                self._run_pipeline(deployment, page, custom_domain, subdomain)
            except Exception as e:
                message = str(e) or e.__class__.__name__
                logger.error(f"❌ Deployment for page {page_id} failed: {message}")
                deployment.update_status(DeploymentStatus.FAILED, message)
                self.store.save(deployment)
                raise DeploymentFailedError(message, page_id=page_id) from e

        logger.info(f"✅ Page {page_id} live at {deployment.deployed_url}")
        return deployment

    def _run_pipeline(
        self,
        deployment: Deployment,
        page: Page,
        custom_domain: Optional[str],
        subdomain: Optional[str],
    ) -> None:
        base_domain = self.config.base_domain

        # ── Step 1: Record ───────────────────────────────────────────────
        deployment.use_custom_domain = bool(custom_domain)
        deployment.custom_domain = custom_domain
        deployment.subdomain = subdomain or self._auto_subdomain(page, custom_domain)
        deployment.update_status(DeploymentStatus.DEPLOYING)
        deployment.add_log("Preparing HTML")
        self.store.save(deployment)

        # ── Step 2: Content ──────────────────────────────────────────────
        document, build_time, build_size = self.content_resolver.resolve(page)
        deployment.build_time = build_time
        deployment.build_size = build_size
        deployment.add_log(f"HTML ready ({build_size} bytes)")
        self.store.save(deployment)

        # ── Step 3: Storage ──────────────────────────────────────────────
        target_path = deployment.subdomain or page.id
        deployment.add_log("Uploading to S3")
        self.store.save(deployment)

        upload = self.storage.publish(document, target_path)
        deployment.s3_bucket = upload["bucket"]
        deployment.s3_object_key = upload["object_key"]
        deployment.s3_url = upload["public_url"]
        self.store.save(deployment)

        # ── Step 4: Hostname ─────────────────────────────────────────────
        hostname = self._final_hostname(custom_domain, deployment.subdomain, base_domain)

        # ── Step 5: Distribution ─────────────────────────────────────────
        deployment.add_log("Resolving CloudFront distribution")
        self.store.save(deployment)

        distribution = self.distributions.find_or_create(upload["bucket"], hostname)
        deployment.distribution_id = distribution["distribution_id"]
        deployment.distribution_hostname = distribution["distribution_hostname"]
        if hostname and self.config.has_custom_certificate():
            deployment.certificate_arn = self.config.acm_certificate_arn
        self.store.save(deployment)

        # ── Step 6: DNS ──────────────────────────────────────────────────
        if hostname:
            deployment.add_log(f"Configuring DNS for {hostname}")
            self.store.save(deployment)

            dns_result = self.dns.ensure_alias(hostname, deployment.distribution_hostname)
            deployment.hosted_zone_id = dns_result["hosted_zone_id"]
            if dns_result["skipped"]:
                deployment.add_log(f"{hostname} covered by wildcard DNS")
            self.store.save(deployment)

        # ── Step 7: Cache ────────────────────────────────────────────────
        deployment.add_log("Invalidating CloudFront cache")
        self.store.save(deployment)
        self.invalidator.invalidate_all(deployment.distribution_id)

        # ── Step 8: Finalize ─────────────────────────────────────────────
        deployment.deployed_url = deployment.public_url(base_domain)
        self.page_provider.set_published(
            page.id,
            PublishResult(
                url=deployment.deployed_url,
                distribution_hostname=deployment.distribution_hostname,
                published_at=datetime.now(timezone.utc),
            ),
        )
        deployment.update_status(DeploymentStatus.DEPLOYED)
        self.store.save(deployment)

    def _auto_subdomain(self, page: Page, custom_domain: Optional[str]) -> Optional[str]:
        """Label derived from the slug (or id prefix) when auto-subdomains are on"""
        if custom_domain or not self.config.auto_subdomain or not self.config.base_domain:
            return None
        return SubdomainValidator.from_slug(page.slug) or SubdomainValidator.from_slug(
            page.id[:AUTO_SUBDOMAIN_ID_CHARS]
        )

    @staticmethod
    def _final_hostname(
        custom_domain: Optional[str], subdomain: Optional[str], base_domain: Optional[str]
    ) -> Optional[str]:
        if custom_domain:
            return custom_domain
        if subdomain and base_domain:
            return f"{subdomain}.{base_domain}"
        return None

    # ------------------------------------------------------------------ #
    #  Other operations                                                    #
    # ------------------------------------------------------------------ #

    def _require(self, page_id: str) -> Deployment:
        deployment = self.store.get(page_id)
        if deployment is None:
            raise DeploymentNotFoundError(f"No deployment found for page {page_id}", status_code=404)
        return deployment

    def get_info(self, page_id: str) -> Deployment:
        """
        Read-only view of the record carrying only the last 20 log lines.

        Raises:
            DeploymentNotFoundError: No record for the page
        """
        deployment = self._require(page_id)
        return deployment.model_copy(update={"logs": deployment.recent_logs()})

    def invalidate(self, page_id: str) -> Dict[str, str]:
        """
        Re-run the cache invalidation step.

        Raises:
            DeploymentNotFoundError: No record, or the record has no distribution
            InvalidationError:       On CloudFront failure
        """
        with self.locks.hold(page_id):
            deployment = self._require(page_id)
            if not deployment.distribution_id:
                raise DeploymentNotFoundError(
                    f"No active deployment found for page {page_id}", status_code=404
                )

            result = self.invalidator.invalidate_all(deployment.distribution_id)
            deployment.add_log("Cache invalidated manually")
            self.store.save(deployment)
        return result

    def delete(self, page_id: str) -> None:
        """
        Disable the distribution (best effort) and remove the record.

        The S3 object and DNS record are left in place; both can be shared
        with other pages in the wildcard topology.

        Raises:
            DeploymentNotFoundError: No record for the page
        """
        with self.locks.hold(page_id):
            deployment = self._require(page_id)

            if deployment.distribution_id:
                try:
                    self.distributions.disable(deployment.distribution_id)
                except Exception as e:
                    logger.warning(
                        f"⚠️ Failed to disable distribution {deployment.distribution_id}: {e}"
                    )

            self.store.delete(page_id)
        logger.info(f"🗑️ Deployment for page {page_id} deleted")

    def test_form(
        self,
        page_id: str,
        form_id: Optional[str] = None,
        form_data: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Send a synthetic form submission on behalf of a deployed page.

        Raises:
            DeploymentNotFoundError:   No record, or the page is not live
            DeploymentInProgressError: Another operation holds the page
        """
        with self.locks.hold(page_id):
            deployment = self._require(page_id)
            if deployment.status != DeploymentStatus.DEPLOYED or not deployment.deployed_url:
                raise DeploymentNotFoundError(
                    f"No active deployment found for page {page_id}", status_code=404
                )

            result = self.form_sender.submit_test(
                page_id=page_id,
                page_url=deployment.deployed_url,
                form_id=form_id or "test-form",
                form_data=form_data,
            )
            level = LogLevel.SUCCESS if result["success"] else LogLevel.WARN
            deployment.add_log(f"Test form submitted (HTTP {result['status_code']})", level)
            self.store.save(deployment)
        return result
