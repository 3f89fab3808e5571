"""
Page Provider Factory
Creates the page provider used by the orchestrator
"""

from typing import Optional

from landing_deploy.api.base_provider import BasePageProvider
from landing_deploy.api.pages_client import HTTPPageProvider
from landing_deploy.utils.config import get_settings, Settings
from landing_deploy.utils.logger import get_logger

logger = get_logger(__name__)


def get_page_provider(config: Optional[Settings] = None) -> BasePageProvider:
    """
    Factory function to create the page provider.

    Args:
        config: Optional Settings instance. Uses default if None.

    Raises:
        ValueError: If no page service URL is configured
    """
    if config is None:
        config = get_settings()

    if not config.pages_api_url:
        raise ValueError("PAGES_API_URL must be set to reach the page service")

    logger.info(f"Creating page provider for {config.pages_api_url}")
    return HTTPPageProvider(config)
