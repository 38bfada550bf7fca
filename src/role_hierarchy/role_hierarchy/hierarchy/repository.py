from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CatalogRole, SavedWorkflow, WorkflowData


class WorkflowRepository(Protocol):
    def get(self, *, workflow_id: str) -> Optional[SavedWorkflow]:
        raise NotImplementedError

    def upsert(self, *, workflow_id: str, workflow: WorkflowData) -> SavedWorkflow:
        """Create or replace the stored workflow.

        Returns the stored copy with its new ``updated_at``.
        """

        raise NotImplementedError


class RoleCatalogRepository(Protocol):
    def list_all(self) -> Sequence[CatalogRole]:
        """Catalog roles in display order (the grid layout follows this order)."""

        raise NotImplementedError
