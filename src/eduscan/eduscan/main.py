from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .common.logging_config import setup_logging
from .common.web import install_actor_loader, register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema
from .database.connection import DatabaseConnection, DBConfig
from .reports.controller import register as register_reports
from .scanning.controller import register as register_scanning
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), log_dir=getattr(settings, "LOG_DIR", "logs"))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(DatabaseConnection.get_instance(DBConfig.from_dict(db_config)), schema_path=schema_path)
        container = build_container(settings)

    container.user_service.ensure_bootstrap_admin()

    install_actor_loader(app, container.auth_service)
    register_error_handlers(app)

    register_users(app, container)
    register_students(app, container)
    register_scanning(app, container)
    register_reports(app, container)

    app.extensions["eduscan"] = container
    return app
