from __future__ import annotations

from dataclasses import dataclass

from .core.constants import DEFAULT_ADMIN_POLICY, DEFAULT_WORKFLOW_ID
from .database.connection import DBConfig, DatabaseConnection
from .hierarchy.mysql_role_repository import MySQLRoleCatalogRepository
from .hierarchy.mysql_workflow_repository import MySQLWorkflowRepository
from .hierarchy.repository import RoleCatalogRepository, WorkflowRepository
from .hierarchy.service import WorkflowService


@dataclass(frozen=True)
class Container:
    workflows_repo: WorkflowRepository
    roles_repo: RoleCatalogRepository

    workflow_service: WorkflowService


def build_container(
    *,
    db_config: dict,
    workflow_id: str = DEFAULT_WORKFLOW_ID,
    admin_policy: str = DEFAULT_ADMIN_POLICY,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    workflows_repo = MySQLWorkflowRepository(conn)
    roles_repo = MySQLRoleCatalogRepository(conn)

    return build_container_from(
        workflows_repo=workflows_repo,
        roles_repo=roles_repo,
        workflow_id=workflow_id,
        admin_policy=admin_policy,
    )


def build_container_from(
    *,
    workflows_repo: WorkflowRepository,
    roles_repo: RoleCatalogRepository,
    workflow_id: str = DEFAULT_WORKFLOW_ID,
    admin_policy: str = DEFAULT_ADMIN_POLICY,
) -> Container:
    workflow_service = WorkflowService(
        workflows_repo,
        roles_repo,
        workflow_id=workflow_id,
        admin_policy=admin_policy,
    )

    return Container(
        workflows_repo=workflows_repo,
        roles_repo=roles_repo,
        workflow_service=workflow_service,
    )
