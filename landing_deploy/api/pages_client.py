"""
Page Service API Client
Reads page content and writes back publish results over HTTP
"""

from typing import Dict, Any, Optional

import requests
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type
)

from landing_deploy.api.base_provider import BasePageProvider
from landing_deploy.api.exceptions import (
    PageNotFoundError,
    PageServiceError,
    NetworkError,
    ServerError
)
from landing_deploy.models.page import Page, PublishResult
from landing_deploy.utils.config import get_settings, Settings
from landing_deploy.utils.logger import get_logger

logger = get_logger(__name__)


class HTTPPageProvider(BasePageProvider):
    """
    Page service client.

    Endpoints:
      GET   {pages_api_url}/api/pages/{page_id}
      PATCH {pages_api_url}/api/pages/{page_id}/publish
    """

    def __init__(self, config: Optional[Settings] = None, session: Optional[requests.Session] = None):
        """
        Initialize the page service client.

        Args:
            config:  Optional Settings object. Defaults to get_settings().
            session: Optional requests.Session (shared connection pool)
        """
        self.config = config or get_settings()
        self.base_url = self.config.pages_api_url.rstrip("/")
        self.session = session or requests.Session()
        self.headers = {
            "Content-Type": "application/json",
            "Accept": "application/json"
        }
        if self.config.pages_api_token:
            self.headers["Authorization"] = f"Bearer {self.config.pages_api_token}"

        logger.info(f"HTTPPageProvider initialized - Base URL: {self.base_url}")

    def _make_request(
        self,
        method: str,
        endpoint: str,
        json_data: Optional[Dict] = None
    ) -> Dict[str, Any]:
        """
        Make an HTTP request to the page service with error handling.

        Raises:
            PageNotFoundError: On 404
            ServerError:       On 5xx
            NetworkError:      On timeouts / connection errors
            PageServiceError:  On any other non-2xx status
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=self.headers,
                json=json_data,
                timeout=30
            )
        except requests.exceptions.Timeout:
            raise NetworkError("Request timed out after 30 seconds")
        except requests.exceptions.ConnectionError as e:
            raise NetworkError(f"Connection error: {str(e)}")
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Network error: {str(e)}")

        if response.status_code in (200, 201):
            return response.json() if response.content else {}
        if response.status_code == 204:
            return {}

        error_data = self._parse_error_response(response)
        message = error_data.get("message", "Unknown error")

        if response.status_code == 404:
            raise PageNotFoundError(message, status_code=404, response_data=error_data)
        if 500 <= response.status_code < 600:
            raise ServerError(
                f"Page service error: {message}",
                status_code=response.status_code,
                response_data=error_data
            )
        raise PageServiceError(message, status_code=response.status_code, response_data=error_data)

    def _parse_error_response(self, response: requests.Response) -> Dict[str, Any]:
        try:
            return response.json()
        except ValueError:
            return {
                "message": response.text or "Unknown error",
                "code": response.status_code
            }

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type((NetworkError, ServerError)),
        reraise=True
    )
    def get_page(self, page_id: str) -> Page:
        """
        Fetch a page.

        Accepts either a bare page document or one wrapped in ``{"page": ...}``.
        """
        logger.info(f"Fetching page {page_id}")
        data = self._make_request("GET", f"/api/pages/{page_id}")
        data = data.get("page", data)

        return Page(
            id=str(data.get("id") or data.get("_id") or page_id),
            owner_id=str(data.get("owner_id") or data.get("user_id") or ""),
            name=data.get("name", ""),
            description=data.get("description", ""),
            slug=data.get("slug") or data.get("url"),
            content_ref=data.get("content_ref") or data.get("file_path"),
            structured_content=data.get("structured_content") or data.get("page_data") or [],
        )

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type((NetworkError, ServerError)),
        reraise=True
    )
    def set_published(self, page_id: str, result: PublishResult) -> None:
        """Write back status, url, distribution hostname and publish time."""
        logger.info(f"Marking page {page_id} as published at {result.url}")
        self._make_request(
            "PATCH",
            f"/api/pages/{page_id}/publish",
            json_data=result.model_dump(mode="json")
        )
