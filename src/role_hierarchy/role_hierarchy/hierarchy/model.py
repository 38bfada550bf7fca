from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

from ..common.datetime_utils import to_iso
from ..common.validators import require_list
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Position:
    x: float
    y: float

    def below(self, offset: float) -> "Position":
        return Position(x=self.x, y=self.y + offset)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Position"]:
        if data is None:
            return None
        if not isinstance(data, Mapping):
            raise ValidationError("Invalid position: expected an object with x and y")
        return cls(x=_coordinate(data, "x"), y=_coordinate(data, "y"))


@dataclass(frozen=True)
class RoleNode:
    """A role in the hierarchy graph."""

    id: str
    name: str
    description: Optional[str] = None
    role_type: Optional[str] = None
    position: Position = field(default_factory=lambda: Position(0.0, 0.0))


@dataclass(frozen=True)
class SupervisionEdge:
    """Directed supervision relationship: ``source`` supervises ``target``."""

    id: str
    source: str
    target: str


@dataclass(frozen=True)
class CatalogRole:
    """Role as listed by the host application's role catalog."""

    id: str
    name: str
    description: Optional[str] = None
    role_type: Optional[str] = None
    level: Optional[int] = None
    user_count: Optional[int] = None

    @property
    def type_label(self) -> Optional[str]:
        if self.role_type:
            return self.role_type
        if self.level:
            return f"Level {self.level}"
        return None

    def to_dict(self) -> dict:
        out: dict = {"id": self.id, "name": self.name}
        if self.description is not None:
            out["description"] = self.description
        if self.role_type is not None:
            out["roleType"] = self.role_type
        if self.level is not None:
            out["level"] = self.level
        if self.user_count is not None:
            out["userCount"] = self.user_count
        return out


@dataclass(frozen=True)
class WorkflowRole:
    id: str
    name: str
    description: Optional[str] = None
    role_type: Optional[str] = None
    position: Optional[Position] = None

    def to_dict(self) -> dict:
        out: dict = {"id": self.id, "name": self.name}
        if self.description is not None:
            out["description"] = self.description
        if self.role_type is not None:
            out["roleType"] = self.role_type
        if self.position is not None:
            out["position"] = self.position.to_dict()
        return out

    @classmethod
    def from_dict(cls, data: Any) -> "WorkflowRole":
        if not isinstance(data, Mapping):
            raise ValidationError("Invalid workflow data: each role must be an object")
        return cls(
            id=_require_str(data, "id", "Role"),
            name=_require_str(data, "name", "Role"),
            description=data.get("description"),
            role_type=_role_type_of(data),
            position=Position.from_dict(data.get("position")),
        )


@dataclass(frozen=True)
class WorkflowConnection:
    id: str
    source: str
    target: str

    def to_dict(self) -> dict:
        return {"id": self.id, "source": self.source, "target": self.target}

    @classmethod
    def from_dict(cls, data: Any) -> "WorkflowConnection":
        if not isinstance(data, Mapping):
            raise ValidationError("Invalid workflow data: each connection must be an object")
        return cls(
            id=_require_str(data, "id", "Connection"),
            source=_require_str(data, "source", "Connection"),
            target=_require_str(data, "target", "Connection"),
        )


@dataclass(frozen=True)
class WorkflowData:
    """Persisted form of a hierarchy: role layout plus connection list."""

    roles: Tuple[WorkflowRole, ...] = ()
    connections: Tuple[WorkflowConnection, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.roles

    def to_dict(self) -> dict:
        return {
            "roles": [r.to_dict() for r in self.roles],
            "connections": [c.to_dict() for c in self.connections],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "WorkflowData":
        if not isinstance(data, Mapping):
            raise ValidationError("Invalid workflow data: expected an object")
        roles = require_list(data.get("roles"), "roles")
        connections = require_list(data.get("connections"), "connections")
        return cls(
            roles=tuple(WorkflowRole.from_dict(r) for r in roles),
            connections=tuple(WorkflowConnection.from_dict(c) for c in connections),
        )


@dataclass(frozen=True)
class SavedWorkflow:
    workflow: WorkflowData
    updated_at: datetime

    def to_dict(self) -> dict:
        out = self.workflow.to_dict()
        out["updatedAt"] = to_iso(self.updated_at)
        return out


def _require_str(data: Mapping[str, Any], key: str, kind: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid workflow data: {kind.lower()} {key} is required")
    return value


def _role_type_of(data: Mapping[str, Any]) -> Optional[str]:
    # "type" is what older clients send
    value = data.get("roleType", data.get("type"))
    return str(value) if value else None


def _coordinate(data: Mapping[str, Any], key: str) -> float:
    value = data.get(key)
    if isinstance(value, bool):
        raise ValidationError("Invalid position: x and y must be numbers")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid position: x and y must be numbers") from None
    if not math.isfinite(number):
        raise ValidationError("Invalid position: x and y must be finite numbers")
    return number
