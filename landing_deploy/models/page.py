"""Page collaborator data as seen by the deployment pipeline."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Page(BaseModel):
    """Read-only view of a page owned by the page service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    owner_id: str = ""
    name: str = ""
    description: str = ""
    slug: str | None = None
    content_ref: str | None = Field(
        default=None,
        description="Location of a pre-built artifact: s3://bucket/key or http(s) URL",
    )
    structured_content: list[Any] = Field(default_factory=list)


class PublishResult(BaseModel):
    """The four fields written back to the page after a successful deploy."""

    status: str = "published"
    url: str
    distribution_hostname: str
    published_at: datetime
