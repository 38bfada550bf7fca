from __future__ import annotations

import json
from typing import Optional

from ..common.datetime_utils import now_utc
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, from_mysql_utc, load_json_column, to_mysql_utc
from .model import SavedWorkflow, WorkflowData
from .repository import WorkflowRepository


class MySQLWorkflowRepository(WorkflowRepository):
    """Stores each workflow as one JSON document keyed by workflow id."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, workflow_id: str) -> Optional[SavedWorkflow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT workflow_id, data, updated_at
                FROM role_workflows
                WHERE workflow_id=%s
                """,
                (workflow_id,),
            )
            r = fetchone(cur)
            if not r:
                return None

            return SavedWorkflow(
                workflow=WorkflowData.from_dict(load_json_column(r["data"])),
                updated_at=from_mysql_utc(r["updated_at"]),
            )

    def upsert(self, *, workflow_id: str, workflow: WorkflowData) -> SavedWorkflow:
        updated_at = now_utc()
        payload = json.dumps(workflow.to_dict(), ensure_ascii=False)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO role_workflows(workflow_id, data, updated_at)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE data=VALUES(data), updated_at=VALUES(updated_at)
                """,
                (workflow_id, payload, to_mysql_utc(updated_at)),
            )

        return SavedWorkflow(workflow=workflow, updated_at=updated_at)
