from __future__ import annotations

from typing import Optional

import pytest

from src.role_hierarchy.role_hierarchy.core.exceptions import AuthorizationError, ValidationError
from src.role_hierarchy.role_hierarchy.hierarchy.model import CatalogRole, SavedWorkflow, WorkflowData
from src.role_hierarchy.role_hierarchy.hierarchy.service import CIRCULAR_HIERARCHY_MESSAGE, WorkflowService

ADMIN = {"admin.panel"}


class InMemoryWorkflows:
    def __init__(self, now):
        self._now = now
        self._by_id: dict[str, SavedWorkflow] = {}
        self.last_workflow_id = None

    def get(self, *, workflow_id: str) -> Optional[SavedWorkflow]:
        return self._by_id.get(workflow_id)

    def upsert(self, *, workflow_id: str, workflow: WorkflowData) -> SavedWorkflow:
        self.last_workflow_id = workflow_id
        saved = SavedWorkflow(workflow=workflow, updated_at=self._now)
        self._by_id[workflow_id] = saved
        return saved


class InMemoryRoles:
    def __init__(self, roles):
        self._roles = roles

    def list_all(self):
        return self._roles


def payload(roles, connections):
    return {
        "roles": [{"id": r, "name": r.title(), "position": {"x": 0, "y": 0}} for r in roles],
        "connections": [{"id": f"{s}-{t}", "source": s, "target": t} for s, t in connections],
    }


@pytest.fixture
def repo(fixed_now):
    return InMemoryWorkflows(fixed_now)


@pytest.fixture
def svc(repo):
    return WorkflowService(repo, InMemoryRoles([CatalogRole(id="ceo", name="CEO")]), workflow_id="hq")


def test_save_and_get_round_trip(svc, repo):
    saved = svc.save_workflow(current_policies=ADMIN, payload=payload(["ceo", "mgr"], [("ceo", "mgr")]))

    assert repo.last_workflow_id == "hq"
    assert saved.to_dict()["updatedAt"] == "2026-02-01T10:00:00.000Z"
    workflow = svc.get_workflow(current_policies=ADMIN)
    assert [r.id for r in workflow.roles] == ["ceo", "mgr"]
    assert workflow.connections[0].target == "mgr"


def test_get_workflow_when_nothing_saved_is_empty(svc):
    workflow = svc.get_workflow(current_policies=ADMIN)

    assert workflow.roles == ()
    assert workflow.connections == ()


def test_missing_policy_is_denied(svc):
    with pytest.raises(AuthorizationError):
        svc.save_workflow(current_policies={"employees.view"}, payload=payload(["a"], []))
    with pytest.raises(AuthorizationError):
        svc.get_workflow(current_policies=set())
    with pytest.raises(AuthorizationError):
        svc.list_roles(current_policies=set())


def test_roles_array_required(svc):
    with pytest.raises(ValidationError, match="roles array is required"):
        svc.save_workflow(current_policies=ADMIN, payload={"connections": []})


def test_connections_array_required(svc):
    with pytest.raises(ValidationError, match="connections array is required"):
        svc.save_workflow(current_policies=ADMIN, payload={"roles": [], "connections": "nope"})


def test_cycle_is_rejected_and_not_stored(svc, repo):
    with pytest.raises(ValidationError) as exc:
        svc.save_workflow(
            current_policies=ADMIN,
            payload=payload(["a", "b", "c"], [("a", "b"), ("b", "c"), ("c", "a")]),
        )

    assert str(exc.value) == CIRCULAR_HIERARCHY_MESSAGE
    assert repo.get(workflow_id="hq") is None


def test_self_loop_is_rejected(svc):
    with pytest.raises(ValidationError, match="Circular hierarchy"):
        svc.save_workflow(current_policies=ADMIN, payload=payload(["a"], [("a", "a")]))


def test_dangling_connection_is_rejected(svc):
    with pytest.raises(ValidationError, match="unknown role"):
        svc.save_workflow(current_policies=ADMIN, payload=payload(["a"], [("a", "ghost")]))


def test_duplicate_role_ids_rejected(svc):
    with pytest.raises(ValidationError, match="duplicate role id"):
        svc.save_workflow(current_policies=ADMIN, payload=payload(["a", "a"], []))


def test_connection_without_target_rejected(svc):
    body = payload(["a"], [])
    body["connections"] = [{"id": "x", "source": "a", "target": ""}]

    with pytest.raises(ValidationError):
        svc.save_workflow(current_policies=ADMIN, payload=body)


def test_list_roles_returns_catalog(svc):
    assert [r.id for r in svc.list_roles(current_policies=ADMIN)] == ["ceo"]
