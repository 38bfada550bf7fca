"""Example: edit the role hierarchy through the service layer (no Flask).

Controllers stay thin; everything here is what the web editor does per gesture.
"""

import importlib

from config import get_settings_module

from src.role_hierarchy.role_hierarchy.container import build_container
from src.role_hierarchy.role_hierarchy.core.enums import RoleType
from src.role_hierarchy.role_hierarchy.core.exceptions import CycleRejected
from src.role_hierarchy.role_hierarchy.hierarchy.editor import WorkflowEditor
from src.role_hierarchy.role_hierarchy.hierarchy.gateway import RepositoryWorkflowGateway


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    policies = {settings.ADMIN_POLICY}

    roles = container.workflow_service.list_roles(current_policies=policies)
    gateway = RepositoryWorkflowGateway(container.workflow_service, current_policies=policies)
    editor = WorkflowEditor.open_from_gateway(roles, gateway)
    if editor is None:
        print("No roles yet: run scripts/seed_db.py first.")
        return

    nodes = editor.graph.nodes
    if len(nodes) >= 2:
        try:
            editor.connect(nodes[0].id, nodes[1].id)
            editor.connect(nodes[1].id, nodes[0].id)
        except CycleRejected as e:
            print("Rejected:", e.reason)

    editor.add_child_role(nodes[0].id, "Regional Manager", role_type=RoleType.MANAGER.value)
    editor.save()
    print(editor.graph.serialize().to_dict())


if __name__ == "__main__":
    main()
