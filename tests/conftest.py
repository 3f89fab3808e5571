"""
Shared fixtures.
All AWS API calls are mocked; no real credentials or AWS resources needed.
"""

from typing import Dict, List, Tuple

import pytest

from landing_deploy.api.base_provider import BasePageProvider
from landing_deploy.api.exceptions import PageNotFoundError
from landing_deploy.db.store import DeploymentStore
from landing_deploy.models.page import Page, PublishResult
from landing_deploy.utils.config import Settings, reset_settings


BUCKET = "landing-hub-pages"
REGION = "ap-southeast-1"
BASE_DOMAIN = "landinghub.app"
ZONE_ID = "Z0123456789ABC"
CERT_ARN = "arn:aws:acm:us-east-1:123456789012:certificate/abc-123"


class FakePageProvider(BasePageProvider):
    """In-memory page service recording publish write-backs."""

    def __init__(self, pages: List[Page] = None):
        self.pages: Dict[str, Page] = {p.id: p for p in pages or []}
        self.published: List[Tuple[str, PublishResult]] = []

    def get_page(self, page_id: str) -> Page:
        if page_id not in self.pages:
            raise PageNotFoundError(f"Page {page_id} not found", status_code=404)
        return self.pages[page_id]

    def set_published(self, page_id: str, result: PublishResult) -> None:
        self.published.append((page_id, result))


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    values = dict(
        aws_access_key_id="AKIATEST",
        aws_secret_access_key="testsecret",
        aws_region=REGION,
        aws_s3_bucket=BUCKET,
        route53_hosted_zone_id=ZONE_ID,
        route53_base_domain=BASE_DOMAIN,
        api_origin="https://api.landinghub.app",
        pages_api_url="http://pages.test",
        database_url="sqlite://",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture(autouse=True)
def _reset_settings_singleton():
    reset_settings()
    yield
    reset_settings()


@pytest.fixture()
def settings() -> Settings:
    return make_settings()


@pytest.fixture()
def store() -> DeploymentStore:
    s = DeploymentStore("sqlite://")
    s.init_schema()
    yield s
    s.close()


@pytest.fixture()
def page() -> Page:
    return Page(
        id="65f1c0ffee1234567890abcd",
        owner_id="user-1",
        name="Summer Sale",
        description="Everything must go",
        slug="summer-sale",
        structured_content=[{"type": "heading", "text": "Hello"}],
    )


@pytest.fixture()
def page_provider(page: Page) -> FakePageProvider:
    return FakePageProvider([page])
