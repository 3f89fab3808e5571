"""
CloudFront Cache Invalidator
"""

import uuid
from typing import Any, Dict, Optional

from botocore.exceptions import ClientError

from landing_deploy.api.exceptions import InvalidationError
from landing_deploy.utils.aws import make_client
from landing_deploy.utils.config import get_settings, Settings
from landing_deploy.utils.logger import get_logger

logger = get_logger(__name__)

INVALIDATE_ALL_PATHS = ["/*"]


class CacheInvalidator:
    """Purges every cached path of a distribution."""

    def __init__(self, config: Optional[Settings] = None, cloudfront_client: Any = None):
        self.config = config or get_settings()
        self.cloudfront_client = cloudfront_client or make_client(
            "cloudfront", self.config, region="us-east-1"
        )

    def invalidate_all(self, distribution_id: str) -> Dict[str, str]:
        """
        Request invalidation of ``/*``.

        Returns:
            Dict with keys: invalidation_id, status

        Raises:
            InvalidationError: On CloudFront API failure
        """
        logger.info(f"Invalidating {INVALIDATE_ALL_PATHS} on {distribution_id}")
        try:
            response = self.cloudfront_client.create_invalidation(
                DistributionId=distribution_id,
                InvalidationBatch={
                    "CallerReference": f"invalidation-{uuid.uuid4().hex}",
                    "Paths": {
                        "Quantity": len(INVALIDATE_ALL_PATHS),
                        "Items": list(INVALIDATE_ALL_PATHS),
                    },
                },
            )
        except ClientError as e:
            logger.error(f"Cache invalidation failed: {e}")
            raise InvalidationError(f"Cache invalidation failed: {e}") from e

        invalidation = response["Invalidation"]
        logger.info(f"✅ Invalidation {invalidation['Id']} ({invalidation['Status']})")
        return {
            "invalidation_id": invalidation["Id"],
            "status": invalidation["Status"],
        }
