"""Backup the saved role hierarchy workflow to a JSON file.

Note: Goes through the REST API (API_BASE_URL, bearer token from API_TOKEN),
so it works against any deployment, not only a local database.
"""

from __future__ import annotations

import importlib
import json
import os
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.role_hierarchy.role_hierarchy.core.exceptions import PersistenceFailure
from src.role_hierarchy.role_hierarchy.hierarchy.gateway import HttpWorkflowGateway


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    gateway = HttpWorkflowGateway(settings.API_BASE_URL, token=os.getenv("API_TOKEN"))

    try:
        workflow = gateway.load()
    except PersistenceFailure as e:
        raise SystemExit(f"Backup failed: {e.message}")

    if workflow is None:
        raise SystemExit("Nothing to back up: no workflow has been saved yet.")

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)
    out_file = out_dir / f"role_workflow_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
    out_file.write_text(json.dumps(workflow.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")

    print(f"OK: Backup created: {out_file} (roles={len(workflow.roles)}, connections={len(workflow.connections)})")


if __name__ == "__main__":
    main()
