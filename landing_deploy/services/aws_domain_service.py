"""
AWS Route 53 Domain Service
Points a page hostname at its CloudFront distribution with an alias record.
"""

from typing import Any, Dict, Optional

from botocore.exceptions import ClientError

from landing_deploy.api.exceptions import ConfigurationError, DNSError
from landing_deploy.utils.aws import make_client
from landing_deploy.utils.config import get_settings, Settings
from landing_deploy.utils.logger import get_logger
from landing_deploy.utils.validators import DomainValidator

logger = get_logger(__name__)

# Fixed hosted zone for every CloudFront distribution
# Reference: https://docs.aws.amazon.com/Route53/latest/APIReference/API_AliasTarget.html
CLOUDFRONT_HOSTED_ZONE_ID = "Z2FDTNDATAQYW2"


class AWSDomainService:
    """
    Route 53 DNS configurator.

    Alias records are UPSERTed, so re-running a deploy leaves exactly one
    record per hostname.
    """

    def __init__(self, config: Optional[Settings] = None, route53_client: Any = None):
        """
        Args:
            config:         Optional Settings object. Defaults to get_settings().
            route53_client: Pre-built boto3 client (tests)
        """
        self.config = config or get_settings()
        self.route53_client = route53_client or make_client(
            "route53", self.config, region="us-east-1"
        )

    def covered_by_wildcard(self, hostname: str) -> bool:
        """True if a ``*.base_domain`` record already resolves ``hostname``"""
        base_domain = self.config.base_domain
        return bool(
            self.config.wildcard_dns_enabled
            and base_domain
            and DomainValidator.is_direct_subdomain(hostname, base_domain)
        )

    def ensure_alias(self, hostname: str, distribution_hostname: str) -> Dict[str, Any]:
        """
        Make ``hostname`` resolve to ``distribution_hostname``.

        Returns:
            Dict with keys: hosted_zone_id, skipped, change_id

        Raises:
            ConfigurationError: No hosted zone configured (raised before any API call)
            DNSError:           On Route 53 failure
        """
        if self.covered_by_wildcard(hostname):
            logger.info(f"{hostname} is covered by wildcard DNS, skipping alias record")
            return {"hosted_zone_id": self.config.route53_hosted_zone_id or None,
                    "skipped": True, "change_id": None}

        hosted_zone_id = self.config.route53_hosted_zone_id
        if not hosted_zone_id:
            raise ConfigurationError(
                f"ROUTE53_HOSTED_ZONE_ID is not configured; cannot create a record for {hostname}"
            )

        logger.info(f"Setting up DNS for {hostname} pointing to CloudFront {distribution_hostname}")
        change_batch = {
            "Comment": f"Alias record for {hostname}",
            "Changes": [
                {
                    "Action": "UPSERT",
                    "ResourceRecordSet": {
                        "Name": hostname,
                        "Type": "A",
                        "AliasTarget": {
                            "HostedZoneId": CLOUDFRONT_HOSTED_ZONE_ID,
                            "DNSName": distribution_hostname,
                            "EvaluateTargetHealth": False,
                        },
                    },
                }
            ],
        }

        try:
            response = self.route53_client.change_resource_record_sets(
                HostedZoneId=hosted_zone_id,
                ChangeBatch=change_batch,
            )
        except ClientError as e:
            logger.error(f"DNS setup failed: {e}")
            raise DNSError(f"DNS setup failed for {hostname}: {e}") from e

        logger.info(f"✅ DNS record upserted for {hostname}")
        return {
            "hosted_zone_id": hosted_zone_id,
            "skipped": False,
            "change_id": response["ChangeInfo"]["Id"],
        }
