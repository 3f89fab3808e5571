"""SQLAlchemy-backed deployment store."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, delete, select, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from landing_deploy.db.orm import Base, DeploymentRow
from landing_deploy.models.deployment import Deployment, DeploymentStatus, LogEntry

if TYPE_CHECKING:
    from sqlalchemy import Engine

# Columns copied verbatim between the row and the model
_FIELDS = (
    "owner_id",
    "s3_bucket",
    "s3_object_key",
    "s3_url",
    "distribution_id",
    "distribution_hostname",
    "hosted_zone_id",
    "custom_domain",
    "subdomain",
    "use_custom_domain",
    "certificate_arn",
    "ssl_enabled",
    "deployed_url",
    "last_deployed",
    "deployment_count",
    "error_count",
    "last_error",
    "build_size",
    "build_time",
    "created_at",
)


def create_db_engine(url: str) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    if url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo on the way back
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class DeploymentStore:
    """CRUD facade over the deployments table."""

    def __init__(self, url: str = "sqlite://"):
        self.url = url
        self._engine: Engine = create_db_engine(url)
        self._session_factory: sessionmaker[Session] = sessionmaker(
            bind=self._engine, expire_on_commit=False
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    def init_schema(self) -> None:
        """Create all tables via ORM metadata."""
        Base.metadata.create_all(self._engine)

    def close(self) -> None:
        self._engine.dispose()

    def check_connection(self) -> bool:
        """Verify the database is reachable. Returns True or raises."""
        with self._session_factory() as session:
            session.execute(text("SELECT 1"))
        return True

    def get(self, page_id: str) -> Deployment | None:
        with self._session_factory() as session:
            row = session.scalars(
                select(DeploymentRow).where(DeploymentRow.page_id == page_id)
            ).first()
            if row is None:
                return None
            return self._row_to_deployment(row)

    def list_all(self, status: DeploymentStatus | None = None) -> list[Deployment]:
        with self._session_factory() as session:
            stmt = select(DeploymentRow).order_by(DeploymentRow.id)
            if status:
                stmt = stmt.where(DeploymentRow.status == status.value)
            return [self._row_to_deployment(r) for r in session.scalars(stmt).all()]

    def save(self, deployment: Deployment) -> Deployment:
        """Insert or update the record for ``deployment.page_id``."""
        deployment.updated_at = datetime.now(UTC)
        with self._session_factory() as session:
            row = session.scalars(
                select(DeploymentRow).where(DeploymentRow.page_id == deployment.page_id)
            ).first()
            if row is None:
                row = DeploymentRow(page_id=deployment.page_id)
                session.add(row)
            for field in _FIELDS:
                setattr(row, field, getattr(deployment, field))
            row.status = deployment.status.value
            row.logs_json = json.dumps(
                [entry.model_dump(mode="json") for entry in deployment.logs]
            )
            row.updated_at = deployment.updated_at
            session.commit()
        return deployment

    def delete(self, page_id: str) -> bool:
        with self._session_factory() as session:
            result = session.execute(
                delete(DeploymentRow).where(DeploymentRow.page_id == page_id)
            )
            session.commit()
            return result.rowcount > 0

    @staticmethod
    def _row_to_deployment(row: DeploymentRow) -> Deployment:
        data = {field: getattr(row, field) for field in _FIELDS}
        data["last_deployed"] = _as_utc(row.last_deployed)
        data["created_at"] = _as_utc(row.created_at)
        return Deployment(
            page_id=row.page_id,
            status=DeploymentStatus(row.status),
            logs=[LogEntry.model_validate(e) for e in json.loads(row.logs_json or "[]")],
            updated_at=_as_utc(row.updated_at),
            **data,
        )
