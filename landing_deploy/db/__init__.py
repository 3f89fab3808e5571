"""Database package: engine, ORM models and the deployment store."""

from landing_deploy.db.orm import Base, DeploymentRow
from landing_deploy.db.store import DeploymentStore, create_db_engine

__all__ = [
    "Base",
    "DeploymentRow",
    "DeploymentStore",
    "create_db_engine",
]
