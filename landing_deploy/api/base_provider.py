"""
Base Page Provider Interface
Abstract base class for the page service the deployment pipeline consumes
"""

from abc import ABC, abstractmethod

from landing_deploy.models.page import Page, PublishResult


class BasePageProvider(ABC):
    """
    Abstract base class for page providers.
    The pipeline only reads page content and writes back publish results.
    """

    @abstractmethod
    def get_page(self, page_id: str) -> Page:
        """
        Fetch a page's content and metadata.

        Args:
            page_id: Page identifier

        Returns:
            Page instance

        Raises:
            PageNotFoundError: If the page does not exist
        """
        pass

    @abstractmethod
    def set_published(self, page_id: str, result: PublishResult) -> None:
        """
        Write the publish result fields back to the page.

        Args:
            page_id: Page identifier
            result:  status, url, distribution hostname and publish time
        """
        pass

    def get_provider_name(self) -> str:
        """
        Get provider name.
        Default implementation returns class name.
        """
        return self.__class__.__name__.replace("Provider", "")
