from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core import constants
from .core.error_handlers import register_error_handlers
from .core.logging_utils import setup_logging
from .database.bootstrap import apply_schema, ensure_demo_students, list_tables
from .settings.controller import register as register_settings

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FORMAT", "text"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "Starting with settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            added = ensure_demo_students(db_config)
            logger.info("Demo roster ready (%d added)", added)

        container = build_container(
            db_config=db_config,
            code_ttl_minutes=int(getattr(settings, "ATTENDANCE_CODE_TTL_MINUTES", constants.DEFAULT_CODE_TTL_MINUTES)),
            roster_limit=int(getattr(settings, "ROSTER_LIMIT", constants.DEFAULT_ROSTER_LIMIT)),
            tolerance_minutes=int(
                getattr(settings, "LEGACY_LABEL_TOLERANCE_MINUTES", constants.DEFAULT_LEGACY_TOLERANCE_MINUTES)
            ),
        )

    register_error_handlers(app)
    register_settings(app, container)
    register_attendance(app, container)

    return app
