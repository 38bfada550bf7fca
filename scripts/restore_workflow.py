"""Restore a role hierarchy workflow from a JSON backup.

Usage: python scripts/restore_workflow.py backups/role_workflow_YYYYmmdd_HHMMSS.json
"""

from __future__ import annotations

import importlib
import json
import os
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.role_hierarchy.role_hierarchy.core.exceptions import DomainError
from src.role_hierarchy.role_hierarchy.hierarchy.gateway import HttpWorkflowGateway
from src.role_hierarchy.role_hierarchy.hierarchy.model import WorkflowData
from src.role_hierarchy.role_hierarchy.hierarchy.service import validate_workflow


def main() -> None:
    if len(sys.argv) != 2:
        raise SystemExit("Usage: restore_workflow.py <backup.json>")

    path = Path(sys.argv[1])
    settings = importlib.import_module(get_settings_module())
    gateway = HttpWorkflowGateway(settings.API_BASE_URL, token=os.getenv("API_TOKEN"))

    try:
        workflow = WorkflowData.from_dict(json.loads(path.read_text(encoding="utf-8")))
        validate_workflow(workflow)
        gateway.save(workflow)
    except DomainError as e:
        raise SystemExit(f"Restore failed: {e}")

    print(f"OK: Restored {path.name} (roles={len(workflow.roles)}, connections={len(workflow.connections)})")


if __name__ == "__main__":
    main()
