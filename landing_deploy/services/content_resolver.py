"""
Content Resolver
Returns the publishable document for a page: the pre-built artifact when one
can be fetched, otherwise a synthesized shell.
"""

import time
from typing import Optional, Tuple
from urllib.parse import urlparse

import requests

from landing_deploy.api.exceptions import (
    ArtifactFetchError,
    ArtifactNotFoundError,
    StorageError,
)
from landing_deploy.models.page import Page
from landing_deploy.services.aws_storage_service import AWSStorageService
from landing_deploy.services.html_builder import HTMLBuilder
from landing_deploy.utils.config import get_settings, Settings
from landing_deploy.utils.logger import get_logger

logger = get_logger(__name__)


class ContentResolver:
    """
    Resolve ``(document, build_time_ms, build_size_bytes)`` for a page.

    ``content_ref`` may be ``s3://bucket/key`` or an ``http(s)://`` URL.
    A missing artifact always falls back to synthesis. Other fetch failures
    fall back too unless ``artifact_fetch_strict`` is set.
    """

    def __init__(
        self,
        storage: AWSStorageService,
        config: Optional[Settings] = None,
        html_builder: Optional[HTMLBuilder] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or get_settings()
        self.storage = storage
        self.html_builder = html_builder or HTMLBuilder(api_origin=self.config.api_origin)
        self.session = session or requests.Session()

    def resolve(self, page: Page) -> Tuple[str, int, int]:
        """
        Raises:
            ArtifactFetchError: Only in strict mode, on a transient fetch failure
        """
        if page.content_ref:
            start = time.monotonic()
            try:
                document = self.fetch_artifact(page.content_ref)
            except ArtifactNotFoundError as e:
                logger.warning(f"Artifact for page {page.id} not found, regenerating: {e}")
            except ArtifactFetchError as e:
                if self.config.artifact_fetch_strict:
                    raise
                logger.warning(f"Artifact fetch for page {page.id} failed, regenerating: {e}")
            else:
                build_time = int((time.monotonic() - start) * 1000)
                logger.info(f"Using pre-built artifact {page.content_ref}")
                return document, build_time, len(document.encode("utf-8"))

        logger.info(f"Synthesizing HTML shell for page {page.id}")
        return self.html_builder.build(page)

    def fetch_artifact(self, content_ref: str) -> str:
        """
        Fetch a pre-built artifact.

        Raises:
            ArtifactNotFoundError: The reference points at nothing
            ArtifactFetchError:    The fetch failed for any other reason
        """
        parsed = urlparse(content_ref)

        if parsed.scheme == "s3":
            bucket, key = parsed.netloc, parsed.path.lstrip("/")
            if not bucket or not key:
                raise ArtifactNotFoundError(f"Malformed artifact reference: {content_ref}")
            try:
                return self.storage.get_object_text(bucket, key)
            except StorageError as e:
                raise ArtifactFetchError(str(e)) from e

        if parsed.scheme in ("http", "https"):
            try:
                response = self.session.get(content_ref, timeout=30)
            except requests.exceptions.RequestException as e:
                raise ArtifactFetchError(f"Artifact download failed: {e}") from e
            if response.status_code in (403, 404, 410):
                raise ArtifactNotFoundError(
                    f"Artifact {content_ref} not found", status_code=response.status_code
                )
            if not response.ok:
                raise ArtifactFetchError(
                    f"Artifact download failed: {content_ref}", status_code=response.status_code
                )
            return response.text

        raise ArtifactNotFoundError(f"Unsupported artifact reference: {content_ref}")
