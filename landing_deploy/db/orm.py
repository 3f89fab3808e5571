"""SQLAlchemy ORM models mapping to the deployments table."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    pass


class DeploymentRow(Base):
    __tablename__ = "deployments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    page_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="idle")

    # AWS resources
    s3_bucket: Mapped[str | None] = mapped_column(Text, nullable=True)
    s3_object_key: Mapped[str | None] = mapped_column(Text, nullable=True)
    s3_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    distribution_id: Mapped[str | None] = mapped_column(String(32), nullable=True)
    distribution_hostname: Mapped[str | None] = mapped_column(Text, nullable=True)
    hosted_zone_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # Domain settings
    custom_domain: Mapped[str | None] = mapped_column(Text, nullable=True)
    subdomain: Mapped[str | None] = mapped_column(String(63), nullable=True)
    use_custom_domain: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    certificate_arn: Mapped[str | None] = mapped_column(Text, nullable=True)
    ssl_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Outcome
    deployed_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_deployed: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deployment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    build_size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    build_time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # JSON list of {timestamp, message, level}
    logs_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        CheckConstraint(
            "status IN ('idle', 'deploying', 'deployed', 'failed')",
            name="ck_deployments_status",
        ),
        Index("idx_deployments_owner", "owner_id"),
        Index("idx_deployments_status", "status"),
        Index("idx_deployments_distribution", "distribution_id"),
    )
