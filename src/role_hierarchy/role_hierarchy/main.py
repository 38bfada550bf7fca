from __future__ import annotations

import importlib
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_ADMIN_POLICY, DEFAULT_WORKFLOW_ID
from .database.bootstrap import apply_schema, apply_sql_file, list_tables
from .database.connection import DBConfig, DatabaseConnection
from .hierarchy.controller import register as register_hierarchy


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["WORKFLOW_ID"] = getattr(settings, "WORKFLOW_ID", DEFAULT_WORKFLOW_ID)
    app.config["ADMIN_POLICY"] = getattr(settings, "ADMIN_POLICY", DEFAULT_ADMIN_POLICY)

    if container is None:
        if app.config["DEBUG"]:
            print(
                "[role-hierarchy] settings=", settings_module,
                " db=", f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
            )

        database_dir = Path(__file__).resolve().parents[3] / "database"
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
            apply_schema(conn, schema_path=database_dir / "schema.sql")
            if bool(getattr(settings, "AUTO_SEED_DB", False)):
                apply_sql_file(conn, path=database_dir / "seed.sql")
            if app.config["DEBUG"]:
                print(f"[role-hierarchy] schema ready (tables={len(list_tables(conn))})")

        container = build_container(
            db_config=db_config,
            workflow_id=app.config["WORKFLOW_ID"],
            admin_policy=app.config["ADMIN_POLICY"],
        )

    register_hierarchy(app, container)

    return app
