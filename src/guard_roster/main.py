from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .core.exceptions import StoreError
from .database.bootstrap import apply_schema, list_tables
from .database.record_store import RecordStore

from .container import build_container, build_store
from .absences.controller import register as register_absences
from .common.web import register_error_handlers
from .guards.controller import register as register_guards
from .schedules.controller import register as register_schedules

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format=LOG_FORMAT)


def create_app(*, settings_module: Optional[str] = None, store: Optional[RecordStore] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(app.config["DEBUG"])

    backend = getattr(settings, "STORE_BACKEND", "mysql")
    db_config = getattr(settings, "DB_CONFIG", {})
    logger.info("settings=%s store=%s", settings_module, backend)

    if store is None:
        if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info(
                "schema ready on %s@%s:%s/%s (tables=%d)",
                db_config.get("user"),
                db_config.get("host"),
                db_config.get("port", 3306),
                db_config.get("database"),
                len(list_tables(db_config)),
            )
        store = build_store(backend=backend, db_config=db_config)

    container = build_container(store=store)
    app.extensions["guard_roster"] = container

    try:
        container.auth_service.ensure_admin()
    except StoreError as e:
        # The app still starts; login will fail until the store is reachable.
        logger.warning("Could not ensure admin account: %s", e)

    register_error_handlers(app)
    register_guards(app, container)
    register_schedules(app, container)
    register_absences(app, container)

    return app
