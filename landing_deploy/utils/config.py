"""
Configuration management using Pydantic Settings
Loads and validates environment variables from .env file
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Every AWS resource the deployment pipeline touches is configured here.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    log_dir: str = Field(
        default="logs",
        description="Directory for daily log files"
    )

    # AWS Credentials
    aws_access_key_id: str = Field(
        default="",
        description="AWS Access Key ID (empty = default credential chain)"
    )
    aws_secret_access_key: str = Field(
        default="",
        description="AWS Secret Access Key"
    )
    aws_region: str = Field(
        default="ap-southeast-1",
        description="AWS region for the storage bucket"
    )
    aws_connect_timeout: int = Field(
        default=10,
        description="Connect timeout (seconds) for AWS API clients"
    )
    aws_read_timeout: int = Field(
        default=60,
        description="Read timeout (seconds) for AWS API clients"
    )

    # S3
    aws_s3_bucket: str = Field(
        default="landing-hub-pages",
        description="Default bucket that hosts published pages"
    )

    # CloudFront
    cloudfront_distribution_id: str = Field(
        default="",
        description="Operator-provisioned wildcard distribution ID (static override)"
    )
    cloudfront_distribution_domain: str = Field(
        default="",
        description="Hostname of the wildcard distribution, e.g. d123.cloudfront.net"
    )
    cloudfront_default_ttl: int = Field(default=300, ge=0)
    cloudfront_min_ttl: int = Field(default=0, ge=0)
    cloudfront_max_ttl: int = Field(default=86400, ge=0)
    cloudfront_price_class: str = Field(
        default="PriceClass_100",
        description="PriceClass_100, PriceClass_200 or PriceClass_All"
    )
    cloudfront_function_arn: str = Field(
        default="",
        description="Optional viewer-request CloudFront Function ARN for new distributions"
    )

    # ACM (must live in us-east-1 for CloudFront)
    acm_certificate_arn: str = Field(
        default="",
        description="Pre-issued certificate ARN attached to custom hostnames"
    )

    # Route 53
    route53_hosted_zone_id: str = Field(
        default="",
        description="Hosted zone receiving alias records"
    )
    route53_base_domain: str = Field(
        default="",
        description="Base domain for generated subdomains, e.g. landinghub.app"
    )
    wildcard_dns_enabled: bool = Field(
        default=False,
        description="A *.base_domain record already points at the wildcard distribution"
    )
    auto_subdomain: bool = Field(
        default=False,
        description="Generate {slug}.{base_domain} when no domain is requested"
    )

    # Published artifacts
    api_origin: str = Field(
        default="",
        description="Origin that receives form submissions from published pages"
    )
    artifact_fetch_strict: bool = Field(
        default=False,
        description="Fail the deploy on transient artifact fetch errors instead of regenerating"
    )

    # Page service
    pages_api_url: str = Field(
        default="http://localhost:5000",
        description="Base URL of the page service"
    )
    pages_api_token: str = Field(
        default="",
        description="Bearer token for the page service"
    )

    # Persistence / HTTP server
    database_url: str = Field(
        default="sqlite:///landing_deploy.db",
        description="SQLAlchemy URL for the deployments table"
    )
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper

    @field_validator("route53_base_domain")
    @classmethod
    def normalize_base_domain(cls, v: str) -> str:
        """Strip whitespace, trailing dots and case"""
        return v.strip().rstrip(".").lower()

    @field_validator("cloudfront_price_class")
    @classmethod
    def validate_price_class(cls, v: str) -> str:
        """Validate CloudFront price class"""
        valid = ["PriceClass_100", "PriceClass_200", "PriceClass_All"]
        if v not in valid:
            raise ValueError(f"cloudfront_price_class must be one of {valid}")
        return v

    def s3_origin_domain(self, bucket_name: str) -> str:
        """Regional REST endpoint of a bucket, used as the CloudFront origin"""
        return f"{bucket_name}.s3.{self.aws_region}.amazonaws.com"

    def has_aws_config(self) -> bool:
        """Check if explicit AWS credentials are configured"""
        return bool(self.aws_access_key_id and self.aws_secret_access_key)

    def has_distribution_override(self) -> bool:
        """Check if a wildcard distribution is configured"""
        return bool(self.cloudfront_distribution_id and self.cloudfront_distribution_domain)

    def has_custom_certificate(self) -> bool:
        """Check if an ACM certificate is configured"""
        return bool(self.acm_certificate_arn)

    @property
    def base_domain(self) -> Optional[str]:
        """Configured base domain, or None"""
        return self.route53_base_domain or None


# Singleton instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get or create the settings singleton instance.
    Loads configuration from the environment (and .env if present) on first call.

    Returns:
        Settings instance

    Raises:
        ValidationError: If environment variables are invalid
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reset_settings():
    """
    Reset the settings singleton (useful for testing)
    """
    global _settings
    _settings = None
