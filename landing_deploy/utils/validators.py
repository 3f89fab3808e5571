"""
Input validation utilities for hostnames and subdomain labels
"""

import re
from typing import Optional


class ValidationError(ValueError):
    """Custom exception for validation errors"""
    pass


class DomainValidator:
    """Validator for fully qualified custom domains"""

    # RFC-compliant hostname regex (at least one dot, alphabetic TLD)
    DOMAIN_REGEX = re.compile(
        r'^(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,}$'
    )

    @classmethod
    def validate(cls, domain: str) -> str:
        """
        Validate a custom domain.

        Args:
            domain: Domain name to validate

        Returns:
            Cleaned domain name (lowercase, stripped, no scheme)

        Raises:
            ValidationError: If domain is invalid
        """
        if not domain:
            raise ValidationError("Domain name cannot be empty")

        domain = domain.strip().lower()
        domain = re.sub(r'^https?://', '', domain)
        domain = domain.rstrip('/').rstrip('.')

        if len(domain) > 253:  # RFC 1035
            raise ValidationError("Domain name too long (max 253 characters)")

        if not cls.DOMAIN_REGEX.match(domain):
            raise ValidationError(
                f"Invalid domain format: {domain}. "
                "Domain must contain only letters, numbers, hyphens and dots."
            )

        return domain

    @classmethod
    def is_direct_subdomain(cls, hostname: str, base_domain: str) -> bool:
        """
        True when hostname is exactly one label below base_domain
        (the set a ``*.base_domain`` record covers).
        """
        hostname = hostname.lower().rstrip('.')
        base_domain = base_domain.lower().rstrip('.')
        suffix = f".{base_domain}"
        if not base_domain or not hostname.endswith(suffix):
            return False
        label = hostname[:-len(suffix)]
        return bool(label) and '.' not in label


class SubdomainValidator:
    """Validator for a single DNS label"""

    LABEL_REGEX = re.compile(r'^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$')

    @classmethod
    def validate(cls, label: str) -> str:
        """
        Validate a subdomain label.

        Raises:
            ValidationError: If the label is not a valid DNS label
        """
        if not label:
            raise ValidationError("Subdomain cannot be empty")

        label = label.strip().lower()
        if not cls.LABEL_REGEX.match(label):
            raise ValidationError(
                f"Invalid subdomain: {label}. "
                "Use 1-63 letters, numbers or hyphens, not starting or ending with a hyphen."
            )
        return label

    @classmethod
    def from_slug(cls, slug: Optional[str]) -> Optional[str]:
        """
        Turn a page slug into a DNS label, or None if nothing usable remains.
        """
        if not slug:
            return None
        label = re.sub(r'[^a-z0-9-]+', '-', slug.strip().lower())
        label = re.sub(r'-{2,}', '-', label).strip('-')[:63].rstrip('-')
        return label or None


def validate_domain(domain: str) -> str:
    """Convenience function for domain validation"""
    return DomainValidator.validate(domain)


def validate_subdomain(label: str) -> str:
    """Convenience function for subdomain validation"""
    return SubdomainValidator.validate(label)
