"""
AWS S3 Storage Service
Ensures the hosting bucket exists with a public-read policy and writes
published documents under a deterministic per-page key.
"""

import json
from typing import Dict, Any, Optional

from botocore.exceptions import ClientError

from landing_deploy.api.exceptions import ArtifactNotFoundError, ConfigurationError, StorageError
from landing_deploy.utils.aws import client_error_code, make_client
from landing_deploy.utils.config import get_settings, Settings
from landing_deploy.utils.logger import get_logger

logger = get_logger(__name__)

INDEX_DOCUMENT = "index.html"
HTML_CONTENT_TYPE = "text/html"
# The CDN is the durable cache; the object itself stays short-lived
OBJECT_CACHE_CONTROL = "max-age=300"

_MISSING_CODES = {"404", "NoSuchBucket", "NotFound", "NoSuchKey"}


class AWSStorageService:
    """
    S3 publisher for page documents.

    Handles:
    - Bucket existence check and creation (region-aware)
    - Public-read bucket policy scoped to the bucket
    - Writing ``{target_path}/index.html``
    - Reading pre-built artifacts back
    """

    def __init__(self, config: Optional[Settings] = None):
        """
        Initialize the storage service.

        Args:
            config: Optional Settings object. Defaults to get_settings().
        """
        self.config = config or get_settings()
        self.region = self.config.aws_region
        self.s3_client = make_client("s3", self.config)

        logger.info(f"AWSStorageService initialized (Region: {self.region})")

    # ------------------------------------------------------------------ #
    #  Naming                                                              #
    # ------------------------------------------------------------------ #

    def origin_domain(self, bucket_name: str) -> str:
        """Bucket endpoint that CloudFront uses as its origin"""
        return self.config.s3_origin_domain(bucket_name)

    def object_url(self, bucket_name: str, object_key: str) -> str:
        return f"https://{self.origin_domain(bucket_name)}/{object_key}"

    @staticmethod
    def object_key_for(target_path: str) -> str:
        return f"{target_path.strip('/')}/{INDEX_DOCUMENT}"

    # ------------------------------------------------------------------ #
    #  Bucket                                                              #
    # ------------------------------------------------------------------ #

    def ensure_bucket(self, bucket_name: str) -> bool:
        """
        Create the bucket with a public-read policy if it doesn't exist.

        Returns:
            True if the bucket was just created, False if it already existed

        Raises:
            StorageError: On any S3 failure other than "bucket missing"
        """
        try:
            self.s3_client.head_bucket(Bucket=bucket_name)
            logger.debug(f"Bucket {bucket_name} already exists")
            return False
        except ClientError as e:
            if client_error_code(e) not in _MISSING_CODES:
                logger.error(f"head_bucket failed: {e}")
                raise StorageError(f"S3 bucket check failed: {e}") from e

        logger.info(f"Creating bucket {bucket_name} in {self.region}")
        try:
            params: Dict[str, Any] = {"Bucket": bucket_name}
            if self.region != "us-east-1":
                params["CreateBucketConfiguration"] = {"LocationConstraint": self.region}
            self.s3_client.create_bucket(**params)

            # New buckets block public policies by default
            self.s3_client.put_public_access_block(
                Bucket=bucket_name,
                PublicAccessBlockConfiguration={
                    "BlockPublicAcls": False,
                    "IgnorePublicAcls": False,
                    "BlockPublicPolicy": False,
                    "RestrictPublicBuckets": False,
                },
            )

            policy = {
                "Version": "2012-10-17",
                "Statement": [
                    {
                        "Sid": "PublicReadGetObject",
                        "Effect": "Allow",
                        "Principal": "*",
                        "Action": "s3:GetObject",
                        "Resource": f"arn:aws:s3:::{bucket_name}/*",
                    }
                ],
            }
            self.s3_client.put_bucket_policy(Bucket=bucket_name, Policy=json.dumps(policy))

        except ClientError as e:
            logger.error(f"Bucket creation failed: {e}")
            raise StorageError(f"S3 bucket creation failed: {e}") from e

        logger.info(f"✅ Bucket {bucket_name} created with public-read policy")
        return True

    # ------------------------------------------------------------------ #
    #  Objects                                                             #
    # ------------------------------------------------------------------ #

    def publish(
        self,
        document: str,
        target_path: str,
        bucket_name: Optional[str] = None,
    ) -> Dict[str, str]:
        """
        Write ``document`` to ``{target_path}/index.html``.

        Re-publishing the same target path overwrites in place.

        Args:
            document:    Full HTML document
            target_path: Per-deployment namespace (subdomain or page id)
            bucket_name: Override the configured default bucket

        Returns:
            Dict with keys: bucket, object_key, public_url

        Raises:
            ConfigurationError: If no bucket is configured
            StorageError:       On S3 failure
        """
        bucket_name = bucket_name or self.config.aws_s3_bucket
        if not bucket_name:
            raise ConfigurationError("AWS_S3_BUCKET is not configured")
        if not target_path or not target_path.strip("/"):
            raise ValueError("target_path must be a non-empty path segment")

        object_key = self.object_key_for(target_path)
        logger.info(f"Publishing s3://{bucket_name}/{object_key} ({len(document)} chars)")

        self.ensure_bucket(bucket_name)

        try:
            self.s3_client.put_object(
                Bucket=bucket_name,
                Key=object_key,
                Body=document.encode("utf-8"),
                ContentType=HTML_CONTENT_TYPE,
                CacheControl=OBJECT_CACHE_CONTROL,
            )
        except ClientError as e:
            logger.error(f"put_object failed: {e}")
            raise StorageError(f"S3 upload failed: {e}") from e

        public_url = self.object_url(bucket_name, object_key)
        logger.info(f"✅ Uploaded {public_url}")

        return {
            "bucket": bucket_name,
            "object_key": object_key,
            "public_url": public_url,
        }

    def get_object_text(self, bucket_name: str, object_key: str) -> str:
        """
        Read an object as UTF-8 text.

        Raises:
            ArtifactNotFoundError: If the bucket or key doesn't exist
            StorageError:          On any other S3 failure
        """
        try:
            response = self.s3_client.get_object(Bucket=bucket_name, Key=object_key)
            return response["Body"].read().decode("utf-8")
        except ClientError as e:
            if client_error_code(e) in _MISSING_CODES:
                raise ArtifactNotFoundError(f"s3://{bucket_name}/{object_key} not found") from e
            raise StorageError(f"S3 read failed: {e}") from e
