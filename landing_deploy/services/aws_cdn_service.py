"""
AWS CloudFront Service
Finds or creates the CloudFront distribution fronting the hosting bucket,
and disables distributions on teardown.
"""

import time
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List, TypedDict

from botocore.exceptions import ClientError

from landing_deploy.api.exceptions import ConfigurationError, DistributionError
from landing_deploy.services.aws_storage_service import INDEX_DOCUMENT
from landing_deploy.utils.aws import make_client
from landing_deploy.utils.config import get_settings, Settings
from landing_deploy.utils.logger import get_logger

logger = get_logger(__name__)

ORIGIN_ID = "S3Origin"


class DistributionInfo(TypedDict):
    """Reference to a CloudFront distribution"""
    distribution_id: str
    distribution_hostname: str
    status: str


# ---------------------------------------------------------------------- #
#  Resolution strategies                                                  #
# ---------------------------------------------------------------------- #

class DistributionStrategy(ABC):
    """One step of the override > scan > create resolution chain."""

    name = "strategy"

    @abstractmethod
    def resolve(
        self, origin_domain: str, custom_hostname: Optional[str]
    ) -> Optional[DistributionInfo]:
        """Return a distribution, or None to defer to the next strategy."""
        pass


class StaticOverrideStrategy(DistributionStrategy):
    """
    Operator-provisioned wildcard distribution.

    When configured it is returned for every page, so no per-page
    distribution is ever created.
    """

    name = "override"

    def __init__(self, config: Settings):
        self.config = config

    def resolve(self, origin_domain, custom_hostname):
        if not self.config.has_distribution_override():
            return None
        return {
            "distribution_id": self.config.cloudfront_distribution_id,
            "distribution_hostname": self.config.cloudfront_distribution_domain,
            "status": "Deployed",
        }


class OriginScanStrategy(DistributionStrategy):
    """Reuse an existing distribution whose origin already points at the bucket."""

    name = "scan"

    def __init__(self, cloudfront_client: Any):
        self.cloudfront_client = cloudfront_client

    def resolve(self, origin_domain, custom_hostname):
        for summary in self._iter_distributions():
            origins = summary.get("Origins", {}).get("Items", [])
            if any(o.get("DomainName") == origin_domain for o in origins):
                logger.info(f"Reusing distribution {summary['Id']} for origin {origin_domain}")
                return {
                    "distribution_id": summary["Id"],
                    "distribution_hostname": summary["DomainName"],
                    "status": summary.get("Status", ""),
                }
        return None

    def _iter_distributions(self):
        marker = None
        while True:
            kwargs = {"Marker": marker} if marker else {}
            try:
                response = self.cloudfront_client.list_distributions(**kwargs)
            except ClientError as e:
                logger.error(f"list_distributions failed: {e}")
                raise DistributionError(f"CloudFront listing failed: {e}") from e

            dist_list = response.get("DistributionList", {})
            for item in dist_list.get("Items", []) or []:
                yield item

            if not dist_list.get("IsTruncated"):
                return
            marker = dist_list.get("NextMarker")


class CreateDistributionStrategy(DistributionStrategy):
    """Create a new distribution for the bucket. Always returns a result."""

    name = "create"

    def __init__(self, cloudfront_client: Any, config: Settings):
        self.cloudfront_client = cloudfront_client
        self.config = config

    def build_config(self, origin_domain: str, custom_hostname: Optional[str]) -> Dict[str, Any]:
        """
        DistributionConfig for a new S3-backed distribution

        Raises:
            ConfigurationError: An alias is requested without an ACM certificate
        """
        if custom_hostname and not self.config.has_custom_certificate():
            raise ConfigurationError(
                f"Cannot alias {custom_hostname} on a new distribution: "
                "ACM_CERTIFICATE_ARN is not configured"
            )
        aliases: List[str] = [custom_hostname] if custom_hostname else []

        viewer_certificate: Dict[str, Any]
        if custom_hostname:
            viewer_certificate = {
                "ACMCertificateArn": self.config.acm_certificate_arn,
                "SSLSupportMethod": "sni-only",
                "MinimumProtocolVersion": "TLSv1.2_2021",
            }
        else:
            viewer_certificate = {"CloudFrontDefaultCertificate": True}

        default_cache_behavior: Dict[str, Any] = {
            "TargetOriginId": ORIGIN_ID,
            "ViewerProtocolPolicy": "redirect-to-https",
            "AllowedMethods": {
                "Quantity": 2,
                "Items": ["GET", "HEAD"],
                "CachedMethods": {"Quantity": 2, "Items": ["GET", "HEAD"]},
            },
            "ForwardedValues": {
                "QueryString": False,
                "Cookies": {"Forward": "none"},
            },
            "TrustedSigners": {"Enabled": False, "Quantity": 0},
            "MinTTL": self.config.cloudfront_min_ttl,
            "DefaultTTL": self.config.cloudfront_default_ttl,
            "MaxTTL": self.config.cloudfront_max_ttl,
            "Compress": True,
        }
        if self.config.cloudfront_function_arn:
            default_cache_behavior["FunctionAssociations"] = {
                "Quantity": 1,
                "Items": [
                    {
                        "FunctionARN": self.config.cloudfront_function_arn,
                        "EventType": "viewer-request",
                    }
                ],
            }

        return {
            "CallerReference": f"landing-deploy-{int(time.time() * 1000)}",
            "Comment": f"Landing page distribution for {custom_hostname or origin_domain}",
            "Enabled": True,
            "Origins": {
                "Quantity": 1,
                "Items": [
                    {
                        "Id": ORIGIN_ID,
                        "DomainName": origin_domain,
                        "S3OriginConfig": {"OriginAccessIdentity": ""},
                    }
                ],
            },
            "DefaultCacheBehavior": default_cache_behavior,
            "Aliases": {"Quantity": len(aliases), "Items": aliases},
            "DefaultRootObject": INDEX_DOCUMENT,
            "PriceClass": self.config.cloudfront_price_class,
            "ViewerCertificate": viewer_certificate,
        }

    def resolve(self, origin_domain, custom_hostname):
        distribution_config = self.build_config(origin_domain, custom_hostname)
        logger.info(
            f"Creating CloudFront distribution: origin={origin_domain}, "
            f"alias={custom_hostname or '-'}, "
            f"cert={'custom' if 'ACMCertificateArn' in distribution_config['ViewerCertificate'] else 'default'}"
        )

        try:
            response = self.cloudfront_client.create_distribution(
                DistributionConfig=distribution_config
            )
        except ClientError as e:
            logger.error(f"CloudFront creation failed: {e}")
            raise DistributionError(f"CloudFront creation failed: {e}") from e

        dist = response["Distribution"]
        logger.info(f"✅ Distribution created: {dist['Id']} ({dist['DomainName']})")
        return {
            "distribution_id": dist["Id"],
            "distribution_hostname": dist["DomainName"],
            "status": dist["Status"],
        }


# ---------------------------------------------------------------------- #
#  Service                                                                #
# ---------------------------------------------------------------------- #

class AWSCloudFrontService:
    """
    AWS CloudFront distribution manager.

    Resolution order for ``find_or_create``:
    1. Static override (wildcard distribution from configuration)
    2. Existing distribution whose origin is the bucket
    3. New distribution
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        strategies: Optional[List[DistributionStrategy]] = None,
    ):
        """
        Initialize the CloudFront service.

        Args:
            config:     Optional Settings object. Defaults to get_settings().
            strategies: Override the resolution chain (evaluated in order)
        """
        self.config = config or get_settings()

        # CloudFront is a global service addressed through us-east-1
        self.cloudfront_client = make_client("cloudfront", self.config, region="us-east-1")

        self.strategies = strategies if strategies is not None else [
            StaticOverrideStrategy(self.config),
            OriginScanStrategy(self.cloudfront_client),
            CreateDistributionStrategy(self.cloudfront_client, self.config),
        ]

        logger.info("AWSCloudFrontService initialized")

    def origin_domain(self, bucket_name: str) -> str:
        """S3 REST endpoint of the bucket, matched against distribution origins"""
        return self.config.s3_origin_domain(bucket_name)

    def find_or_create(
        self, bucket_name: str, custom_hostname: Optional[str] = None
    ) -> DistributionInfo:
        """
        Return the distribution fronting ``bucket_name``.

        No retry is attempted: a blind second create would duplicate the
        distribution. Re-invoking the whole call is safe because the scan
        strategy finds what a previous attempt created.

        Args:
            bucket_name:     Hosting bucket
            custom_hostname: Alias for a newly created distribution

        Raises:
            DistributionError: On CloudFront API failure, or if no strategy resolved
        """
        origin_domain = self.origin_domain(bucket_name)
        for strategy in self.strategies:
            result = strategy.resolve(origin_domain, custom_hostname)
            if result is not None:
                logger.info(f"Distribution resolved by '{strategy.name}': {result['distribution_id']}")
                return result

        raise DistributionError(f"No distribution could be resolved for {origin_domain}")

    def get(self, distribution_id: str) -> Dict[str, Any]:
        """
        Raises:
            DistributionError: On CloudFront API failure
        """
        try:
            response = self.cloudfront_client.get_distribution(Id=distribution_id)
        except ClientError as e:
            raise DistributionError(f"get_distribution failed: {e}") from e
        return response["Distribution"]

    def disable(self, distribution_id: str) -> bool:
        """
        Flip ``Enabled`` to False.

        Returns:
            True if the distribution was disabled, False if it already was

        Raises:
            DistributionError: On CloudFront API failure
        """
        try:
            response = self.cloudfront_client.get_distribution_config(Id=distribution_id)
            dist_config = response["DistributionConfig"]

            if not dist_config.get("Enabled", False):
                logger.info(f"Distribution {distribution_id} already disabled")
                return False

            dist_config["Enabled"] = False
            self.cloudfront_client.update_distribution(
                Id=distribution_id,
                DistributionConfig=dist_config,
                IfMatch=response["ETag"],
            )
        except ClientError as e:
            logger.error(f"Disabling distribution {distribution_id} failed: {e}")
            raise DistributionError(f"Disabling distribution failed: {e}") from e

        logger.info(f"✅ Distribution {distribution_id} disabled")
        return True
