from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import CatalogRole
from .repository import RoleCatalogRepository


class MySQLRoleCatalogRepository(RoleCatalogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[CatalogRole]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    r.role_id,
                    r.name,
                    r.description,
                    r.role_type,
                    r.level,
                    COUNT(ur.user_id) AS user_count
                FROM roles r
                LEFT JOIN user_roles ur ON ur.role_id = r.role_id
                GROUP BY r.role_id, r.name, r.description, r.role_type, r.level
                ORDER BY r.level ASC, r.name ASC
                """
            )
            rows = fetchall(cur)
            return [
                CatalogRole(
                    id=str(r["role_id"]),
                    name=r["name"],
                    description=r.get("description"),
                    role_type=r.get("role_type"),
                    level=int(r["level"]) if r.get("level") is not None else None,
                    user_count=int(r["user_count"] or 0),
                )
                for r in rows
            ]
