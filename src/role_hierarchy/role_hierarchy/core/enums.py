from __future__ import annotations

from enum import Enum


class RoleType(str, Enum):
    """Suggested role categories offered by the add-role dialog.

    Stored as a free string on nodes, so values outside this enum are legal.
    """

    ADMIN = "admin"
    MANAGER = "manager"
    EMPLOYEE = "employee"
    CUSTOM = "custom"


class SelectionState(str, Enum):
    """What the editor currently has selected."""

    IDLE = "IDLE"
    NODE_SELECTED = "NODE_SELECTED"
    EDGE_SELECTED = "EDGE_SELECTED"
