"""
boto3 client construction shared by the AWS services
"""

from typing import Any, Optional

import boto3
from botocore.config import Config

from landing_deploy.utils.config import Settings


def make_client(service: str, config: Settings, region: Optional[str] = None) -> Any:
    """
    Create a boto3 client using the configured credentials and timeouts.

    Empty credentials fall through to the default AWS credential chain
    (environment, profile, instance role).

    Args:
        service: boto3 service name, e.g. "s3" or "cloudfront"
        config:  Settings instance
        region:  Region override (CloudFront, ACM and Route 53 are global
                 and addressed through us-east-1)
    """
    kwargs = {
        "region_name": region or config.aws_region,
        "config": Config(
            connect_timeout=config.aws_connect_timeout,
            read_timeout=config.aws_read_timeout,
        ),
    }
    if config.has_aws_config():
        kwargs["aws_access_key_id"] = config.aws_access_key_id
        kwargs["aws_secret_access_key"] = config.aws_secret_access_key

    return boto3.client(service, **kwargs)


def client_error_code(error: Exception) -> str:
    """Return the AWS error code of a botocore ClientError ("" otherwise)"""
    response = getattr(error, "response", None) or {}
    return str(response.get("Error", {}).get("Code", ""))
