from __future__ import annotations

from typing import Optional

import pytest

from src.role_hierarchy.role_hierarchy.core.exceptions import CycleRejected, PersistenceFailure, SaveInProgress
from src.role_hierarchy.role_hierarchy.hierarchy.editor import WorkflowEditor
from src.role_hierarchy.role_hierarchy.hierarchy.model import (
    CatalogRole,
    Position,
    WorkflowConnection,
    WorkflowData,
    WorkflowRole,
)


class FakeGateway:
    def __init__(self, stored: Optional[WorkflowData] = None, error: Optional[Exception] = None):
        self.stored = stored
        self.error = error
        self.saved: list[WorkflowData] = []

    def load(self) -> Optional[WorkflowData]:
        return self.stored

    def save(self, workflow: WorkflowData) -> None:
        if self.error:
            raise self.error
        self.saved.append(workflow)
        self.stored = workflow


class ReentrantGateway(FakeGateway):
    editor: Optional[WorkflowEditor] = None
    saw_saving_flag = False
    reentrant_blocked = False

    def save(self, workflow: WorkflowData) -> None:
        self.saw_saving_flag = self.editor.is_saving
        try:
            self.editor.save()
        except SaveInProgress:
            self.reentrant_blocked = True
        super().save(workflow)


ROLES = [
    CatalogRole(id="ceo", name="CEO", role_type="admin"),
    CatalogRole(id="mgr", name="Manager", role_type="manager"),
    CatalogRole(id="staff", name="Staff", role_type="employee"),
]


def test_open_with_nothing_is_empty_state():
    assert WorkflowEditor.open([], None) is None
    assert WorkflowEditor.open([], WorkflowData()) is None


def test_open_from_saved_workflow_without_catalog():
    saved = WorkflowData(roles=(WorkflowRole(id="x", name="X", position=Position(1.0, 2.0)),))

    editor = WorkflowEditor.open([], saved)

    assert editor is not None
    assert [n.id for n in editor.graph.nodes] == ["x"]


def test_open_from_gateway_uses_stored_workflow():
    stored = WorkflowData(
        roles=(
            WorkflowRole(id="ceo", name="CEO", position=Position(0.0, 0.0)),
            WorkflowRole(id="mgr", name="Manager", position=Position(0.0, 150.0)),
        ),
        connections=(WorkflowConnection(id="edge-ceo-mgr", source="ceo", target="mgr"),),
    )

    editor = WorkflowEditor.open_from_gateway(ROLES, FakeGateway(stored))

    assert len(editor.graph.nodes) == 2
    assert editor.graph.get_edge("edge-ceo-mgr") is not None


def test_gestures_then_save_sends_latest_state():
    gateway = FakeGateway()
    editor = WorkflowEditor.open(ROLES, None, gateway)

    editor.connect("ceo", "mgr")
    editor.connect("mgr", "staff")
    with pytest.raises(CycleRejected):
        editor.connect("staff", "ceo")
    new_id = editor.add_child_role("staff", "Trainee")

    assert editor.save() is True

    saved = gateway.saved[-1]
    assert {(c.source, c.target) for c in saved.connections} == {
        ("ceo", "mgr"),
        ("mgr", "staff"),
        ("staff", new_id),
    }
    assert len(saved.roles) == 4


def test_second_save_reserializes_after_more_edits():
    gateway = FakeGateway()
    editor = WorkflowEditor.open(ROLES, None, gateway)
    edge = editor.connect("ceo", "mgr")
    editor.save()

    editor.select_edge(edge.id)
    editor.delete_selected_edge()
    editor.save()

    assert len(gateway.saved[0].connections) == 1
    assert gateway.saved[1].connections == ()


def test_save_failure_surfaces_message_and_keeps_graph():
    gateway = FakeGateway(error=PersistenceFailure("Failed to save workflow"))
    editor = WorkflowEditor.open(ROLES, None, gateway)
    editor.connect("ceo", "mgr")
    before = editor.graph.serialize()

    with pytest.raises(PersistenceFailure) as exc:
        editor.save()

    assert exc.value.message == "Failed to save workflow"
    assert editor.graph.serialize() == before
    assert editor.is_saving is False
    assert editor.can_save is True


def test_unexpected_gateway_error_becomes_persistence_failure():
    editor = WorkflowEditor.open(ROLES, None, FakeGateway(error=RuntimeError("socket closed")))

    with pytest.raises(PersistenceFailure) as exc:
        editor.save()

    assert exc.value.message == "socket closed"


def test_error_without_message_defaults_to_unknown_error():
    editor = WorkflowEditor.open(ROLES, None, FakeGateway(error=RuntimeError()))

    with pytest.raises(PersistenceFailure) as exc:
        editor.save()

    assert exc.value.message == "Unknown error"


def test_reentrant_save_is_blocked_while_in_flight():
    gateway = ReentrantGateway()
    editor = WorkflowEditor.open(ROLES, None, gateway)
    gateway.editor = editor

    assert editor.save() is True

    assert gateway.saw_saving_flag is True
    assert gateway.reentrant_blocked is True
    assert len(gateway.saved) == 1
    assert editor.is_saving is False


def test_save_without_gateway_is_noop():
    editor = WorkflowEditor.open(ROLES)

    assert editor.can_save is False
    assert editor.save() is False


def test_bulk_delete_through_editor():
    editor = WorkflowEditor.open(ROLES)
    a = editor.connect("ceo", "mgr")
    b = editor.connect("ceo", "staff")

    assert editor.delete_edges([a.id, "ghost"]) == 1
    assert editor.delete_edges([a.id]) == 0
    assert editor.graph.edges == (b,)
    assert editor.delete_edge(b.id) is True


def test_move_and_clear_selection_delegate_to_graph():
    editor = WorkflowEditor.open(ROLES)
    editor.select_node("ceo")

    assert editor.move_node("ceo", Position(9.0, 9.0)) is True
    editor.clear_selection()

    assert editor.graph.get_node("ceo").position == Position(9.0, 9.0)
    assert editor.graph.selected_node_id is None
