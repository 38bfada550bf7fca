from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Iterable, Optional, Sequence, Tuple

from ..common.ids import edge_id_for, new_role_id
from ..common.validators import require_non_empty
from ..core.constants import (
    GRID_COLUMN_WIDTH,
    GRID_COLUMNS,
    GRID_ORIGIN_X,
    GRID_ORIGIN_Y,
    GRID_ROW_HEIGHT,
)
from ..core.enums import SelectionState
from ..core.exceptions import CycleRejected, GraphIntegrityError, ValidationError
from .cycles import would_create_cycle
from .model import (
    CatalogRole,
    Position,
    RoleNode,
    SupervisionEdge,
    WorkflowConnection,
    WorkflowData,
    WorkflowRole,
)

logger = logging.getLogger(__name__)


def grid_position(index: int) -> Position:
    """Default layout slot for the ``index``-th role (4 columns, row-major)."""
    return Position(
        x=float((index % GRID_COLUMNS) * GRID_COLUMN_WIDTH + GRID_ORIGIN_X),
        y=float((index // GRID_COLUMNS) * GRID_ROW_HEIGHT + GRID_ORIGIN_Y),
    )


class RoleHierarchyGraph:
    """Role nodes and supervision edges, kept acyclic.

    Single-writer: every mutation goes through the methods below, and every
    edge insertion runs the cycle check first. Selection (one node or one
    edge, never both) is editor state and is not part of equality or
    serialization.
    """

    def __init__(self, nodes: Iterable[RoleNode] = (), edges: Iterable[SupervisionEdge] = ()):
        self._nodes: Dict[str, RoleNode] = {}
        self._edges: Dict[str, SupervisionEdge] = {}
        self._selected_node_id: Optional[str] = None
        self._selected_edge_id: Optional[str] = None

        for node in nodes:
            if node.id in self._nodes:
                raise ValidationError(f"Duplicate role id {node.id!r}")
            self._nodes[node.id] = node
        # Trusted input (a saved workflow): taken as-is, no cycle check.
        for edge in edges:
            if edge.id in self._edges:
                fresh_id = edge_id_for(edge.source, edge.target, self._edges)
                logger.warning(
                    "Duplicate connection id %r (%s -> %s) renamed to %r", edge.id, edge.source, edge.target, fresh_id
                )
                edge = replace(edge, id=fresh_id)
            self._edges[edge.id] = edge

    @classmethod
    def load(
        cls,
        roles: Sequence[CatalogRole],
        initial_workflow: Optional[WorkflowData] = None,
    ) -> "RoleHierarchyGraph":
        """Build a graph from a saved workflow, or lay out the catalog when there is none."""
        if initial_workflow is not None and not initial_workflow.is_empty:
            nodes = [
                RoleNode(
                    id=r.id,
                    name=r.name,
                    description=r.description,
                    role_type=r.role_type,
                    position=r.position or grid_position(i),
                )
                for i, r in enumerate(initial_workflow.roles)
            ]
            edges = [SupervisionEdge(id=c.id, source=c.source, target=c.target) for c in initial_workflow.connections]
            graph = cls(nodes, edges)

            dangling = [e.id for e in graph.edges if not (graph.has_node(e.source) and graph.has_node(e.target))]
            if dangling:
                logger.warning("Saved workflow has %d connection(s) to unknown roles: %s", len(dangling), dangling)
            return graph

        nodes = [
            RoleNode(
                id=r.id,
                name=r.name,
                description=r.description,
                role_type=r.type_label,
                position=grid_position(i),
            )
            for i, r in enumerate(roles)
        ]
        return cls(nodes)

    # ---- read access -------------------------------------------------

    @property
    def nodes(self) -> Tuple[RoleNode, ...]:
        return tuple(self._nodes.values())

    @property
    def edges(self) -> Tuple[SupervisionEdge, ...]:
        return tuple(self._edges.values())

    @property
    def is_empty(self) -> bool:
        return not self._nodes

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> Optional[RoleNode]:
        return self._nodes.get(node_id)

    def get_edge(self, edge_id: str) -> Optional[SupervisionEdge]:
        return self._edges.get(edge_id)

    def parents_of(self, node_id: str) -> Tuple[str, ...]:
        return tuple(e.source for e in self._edges.values() if e.target == node_id)

    def children_of(self, node_id: str) -> Tuple[str, ...]:
        return tuple(e.target for e in self._edges.values() if e.source == node_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RoleHierarchyGraph):
            return NotImplemented
        return self._nodes == other._nodes and self._edges == other._edges

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"RoleHierarchyGraph(nodes={len(self._nodes)}, edges={len(self._edges)})"

    # ---- selection ---------------------------------------------------

    @property
    def selected_node_id(self) -> Optional[str]:
        return self._selected_node_id

    @property
    def selected_edge_id(self) -> Optional[str]:
        return self._selected_edge_id

    @property
    def state(self) -> SelectionState:
        if self._selected_node_id is not None:
            return SelectionState.NODE_SELECTED
        if self._selected_edge_id is not None:
            return SelectionState.EDGE_SELECTED
        return SelectionState.IDLE

    def shows_add_affordance(self, node_id: str) -> bool:
        """The "Add Role" button is shown on the selected node only."""
        return node_id == self._selected_node_id

    def select_node(self, node_id: str) -> None:
        if node_id not in self._nodes:
            return
        self._selected_node_id = node_id
        self._selected_edge_id = None

    def select_edge(self, edge_id: str) -> None:
        if edge_id not in self._edges:
            return
        self._selected_edge_id = edge_id
        self._selected_node_id = None

    def clear_selection(self) -> None:
        self._selected_node_id = None
        self._selected_edge_id = None

    # ---- mutation ----------------------------------------------------

    def connect(self, source_id: str, target_id: str) -> Optional[SupervisionEdge]:
        """Add ``source -> target``.

        Returns the new edge, or None when either endpoint is unknown.
        Raises CycleRejected (graph unchanged) when the edge would close a cycle.
        """
        if source_id not in self._nodes or target_id not in self._nodes:
            return None
        return self._insert_edge(source_id, target_id)

    def add_child_role(
        self,
        parent_id: str,
        name: str,
        role_type: Optional[str] = None,
        description: Optional[str] = None,
    ) -> str:
        """Create a role under ``parent_id`` (one row below it) and connect it. Returns the new id."""
        name = require_non_empty(name or "", "Role name")
        parent = self._nodes.get(parent_id)
        if parent is None:
            raise ValidationError(f"Parent role {parent_id!r} does not exist")

        node = RoleNode(
            id=new_role_id(),
            name=name,
            description=(description or "").strip() or None,
            role_type=(role_type or "").strip() or None,
            position=parent.position.below(GRID_ROW_HEIGHT),
        )
        self._nodes[node.id] = node
        try:
            self._insert_edge(parent_id, node.id)
        except CycleRejected:
            # never leave a half-added node behind
            del self._nodes[node.id]
            raise
        return node.id

    def move_node(self, node_id: str, position: Position) -> bool:
        node = self._nodes.get(node_id)
        if node is None:
            return False
        self._nodes[node_id] = replace(node, position=position)
        return True

    def delete_edge(self, edge_id: str) -> bool:
        """Remove one edge. Unknown ids are a no-op and return False."""
        removed = self._edges.pop(edge_id, None) is not None
        if self._selected_edge_id == edge_id:
            self._selected_edge_id = None
        return removed

    def delete_selected_edge(self) -> bool:
        if self._selected_edge_id is None:
            return False
        return self.delete_edge(self._selected_edge_id)

    def delete_edges(self, edge_ids: Iterable[str]) -> int:
        """Remove every listed edge that exists; returns how many were removed."""
        removed = 0
        for edge_id in set(edge_ids):
            if self._edges.pop(edge_id, None) is not None:
                removed += 1
        self._selected_edge_id = None
        return removed

    def _insert_edge(self, source_id: str, target_id: str) -> SupervisionEdge:
        if would_create_cycle(source_id, target_id, self._edges.values()):
            logger.info("Rejected connection %s -> %s: would create a cycle", source_id, target_id)
            raise CycleRejected(source_id, target_id)

        edge = SupervisionEdge(
            id=edge_id_for(source_id, target_id, self._edges),
            source=source_id,
            target=target_id,
        )
        self._edges[edge.id] = edge
        return edge

    # ---- serialization -----------------------------------------------

    def serialize(self) -> WorkflowData:
        roles = tuple(
            WorkflowRole(
                id=n.id,
                name=n.name,
                description=n.description,
                role_type=n.role_type,
                position=n.position,
            )
            for n in self._nodes.values()
        )

        connections = []
        for e in self._edges.values():
            if not e.target:
                raise GraphIntegrityError(f"Connection {e.id!r} has no target")
            connections.append(WorkflowConnection(id=e.id, source=e.source, target=e.target))

        return WorkflowData(roles=roles, connections=tuple(connections))
