from __future__ import annotations

import uuid
from typing import Container

from ..core.constants import EDGE_ID_PREFIX, ROLE_ID_PREFIX


def new_role_id() -> str:
    """Fresh id for a role created in the editor (e.g. ``role-3f9c1a0b2d4e``)."""
    return f"{ROLE_ID_PREFIX}-{uuid.uuid4().hex[:12]}"


def edge_id_for(source: str, target: str, taken: Container[str]) -> str:
    """Edge id derived from its endpoints, suffixed until it is unused."""
    base = f"{EDGE_ID_PREFIX}-{source}-{target}"
    if base not in taken:
        return base

    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"
