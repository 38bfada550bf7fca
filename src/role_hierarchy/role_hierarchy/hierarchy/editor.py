from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..core.exceptions import PersistenceFailure, SaveInProgress
from .gateway import WorkflowGateway
from .graph import RoleHierarchyGraph
from .model import CatalogRole, Position, SupervisionEdge, WorkflowData

logger = logging.getLogger(__name__)


class WorkflowEditor:
    """Single owner of one hierarchy graph plus its save gateway.

    The presentation layer forwards gestures here; nothing else mutates the
    graph. Handlers for a node (e.g. "add child") are looked up by node id on
    the presentation side, the graph only holds data.
    """

    def __init__(self, graph: RoleHierarchyGraph, gateway: Optional[WorkflowGateway] = None):
        self._graph = graph
        self._gateway = gateway
        self._is_saving = False

    @classmethod
    def open(
        cls,
        roles: Sequence[CatalogRole],
        initial_workflow: Optional[WorkflowData] = None,
        gateway: Optional[WorkflowGateway] = None,
    ) -> Optional["WorkflowEditor"]:
        """Build an editor, or return None when there is nothing to show."""
        if not roles and (initial_workflow is None or initial_workflow.is_empty):
            return None
        return cls(RoleHierarchyGraph.load(roles, initial_workflow), gateway)

    @classmethod
    def open_from_gateway(cls, roles: Sequence[CatalogRole], gateway: WorkflowGateway) -> Optional["WorkflowEditor"]:
        return cls.open(roles, gateway.load(), gateway)

    @property
    def graph(self) -> RoleHierarchyGraph:
        return self._graph

    @property
    def is_saving(self) -> bool:
        return self._is_saving

    @property
    def can_save(self) -> bool:
        return self._gateway is not None and not self._is_saving

    # gestures

    def select_node(self, node_id: str) -> None:
        self._graph.select_node(node_id)

    def select_edge(self, edge_id: str) -> None:
        self._graph.select_edge(edge_id)

    def clear_selection(self) -> None:
        self._graph.clear_selection()

    def connect(self, source_id: str, target_id: str) -> Optional[SupervisionEdge]:
        return self._graph.connect(source_id, target_id)

    def add_child_role(
        self,
        parent_id: str,
        name: str,
        role_type: Optional[str] = None,
        description: Optional[str] = None,
    ) -> str:
        return self._graph.add_child_role(parent_id, name, role_type=role_type, description=description)

    def move_node(self, node_id: str, position: Position) -> bool:
        return self._graph.move_node(node_id, position)

    def delete_edge(self, edge_id: str) -> bool:
        return self._graph.delete_edge(edge_id)

    def delete_selected_edge(self) -> bool:
        return self._graph.delete_selected_edge()

    def delete_edges(self, edge_ids: Iterable[str]) -> int:
        return self._graph.delete_edges(edge_ids)

    def save(self) -> bool:
        """Serialize the current graph and hand it to the gateway.

        Returns False when no gateway is configured. The graph is never
        changed by saving, so a failure leaves local edits in place.
        """
        if self._gateway is None:
            return False
        if self._is_saving:
            raise SaveInProgress("A save is already in progress")

        workflow = self._graph.serialize()
        self._is_saving = True
        try:
            self._gateway.save(workflow)
        except PersistenceFailure:
            logger.warning("Failed to save workflow", exc_info=True)
            raise
        except Exception as e:
            logger.exception("Failed to save workflow")
            raise PersistenceFailure(str(e) or "Unknown error") from e
        finally:
            self._is_saving = False

        logger.info("Workflow saved (%d roles, %d connections)", len(workflow.roles), len(workflow.connections))
        return True
