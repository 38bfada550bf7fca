from __future__ import annotations

import logging
from typing import Any, Collection, Optional, Sequence

from ..core.constants import DEFAULT_ADMIN_POLICY, DEFAULT_WORKFLOW_ID
from ..core.exceptions import AuthorizationError, ValidationError
from .cycles import find_cycle
from .model import CatalogRole, SavedWorkflow, WorkflowData
from .repository import RoleCatalogRepository, WorkflowRepository

logger = logging.getLogger(__name__)

CIRCULAR_HIERARCHY_MESSAGE = "Circular hierarchy detected in workflow. Please fix the connections."


def validate_workflow(workflow: WorkflowData) -> None:
    """Check a submitted workflow before it is stored.

    Role ids must be unique, connections must join known roles, and the
    connections must not form a cycle.
    """
    role_ids: set[str] = set()
    for role in workflow.roles:
        if role.id in role_ids:
            raise ValidationError(f"Invalid workflow data: duplicate role id {role.id!r}")
        role_ids.add(role.id)

    connection_ids: set[str] = set()
    for conn in workflow.connections:
        if conn.id in connection_ids:
            raise ValidationError(f"Invalid workflow data: duplicate connection id {conn.id!r}")
        connection_ids.add(conn.id)
        for endpoint in (conn.source, conn.target):
            if endpoint not in role_ids:
                raise ValidationError(
                    f"Invalid workflow data: connection {conn.id!r} references unknown role {endpoint!r}"
                )

    cycle = find_cycle([r.id for r in workflow.roles], workflow.connections)
    if cycle:
        logger.info("Rejected workflow with cycle: %s", " -> ".join(cycle))
        raise ValidationError(CIRCULAR_HIERARCHY_MESSAGE)


class WorkflowService:
    """Server-side load/save of the role hierarchy workflow."""

    def __init__(
        self,
        workflows: WorkflowRepository,
        roles: RoleCatalogRepository,
        *,
        workflow_id: str = DEFAULT_WORKFLOW_ID,
        admin_policy: str = DEFAULT_ADMIN_POLICY,
    ):
        self._workflows = workflows
        self._roles = roles
        self._workflow_id = workflow_id
        self._admin_policy = admin_policy

    def _require_policy(self, current_policies: Collection[str]) -> None:
        if self._admin_policy not in current_policies:
            raise AuthorizationError("Access denied")

    def list_roles(self, *, current_policies: Collection[str]) -> Sequence[CatalogRole]:
        self._require_policy(current_policies)
        return list(self._roles.list_all())

    def get_saved(self, *, current_policies: Collection[str]) -> Optional[SavedWorkflow]:
        self._require_policy(current_policies)
        return self._workflows.get(workflow_id=self._workflow_id)

    def get_workflow(self, *, current_policies: Collection[str]) -> WorkflowData:
        """The stored workflow, or an empty one when nothing was saved yet."""
        saved = self.get_saved(current_policies=current_policies)
        return saved.workflow if saved else WorkflowData()

    def save_workflow(self, *, current_policies: Collection[str], payload: Any) -> SavedWorkflow:
        self._require_policy(current_policies)

        workflow = payload if isinstance(payload, WorkflowData) else WorkflowData.from_dict(payload)
        validate_workflow(workflow)

        saved = self._workflows.upsert(workflow_id=self._workflow_id, workflow=workflow)
        logger.info(
            "Saved workflow %r (%d roles, %d connections)",
            self._workflow_id,
            len(workflow.roles),
            len(workflow.connections),
        )
        return saved
