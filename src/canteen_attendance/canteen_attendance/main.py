from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_SYNC_INTERVAL_MINUTES, DEFAULT_TIMEZONE
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .device.controller import register as register_essl
from .entries.controller import register as register_canteen
from .sync.scheduler import start_scheduler

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[3]


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logging.getLogger("apscheduler").setLevel(logging.INFO)


def create_app(container: Optional[Container] = None, *, start_sync: Optional[bool] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

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
            apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
            logger.info("demo seed ready")

        container = build_container(
            db_config=db_config,
            essl_config=getattr(settings, "ESSL_CONFIG"),
            timezone=getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE),
        )

    register_canteen(app, container)
    register_essl(app, container)

    if start_sync is None:
        start_sync = bool(getattr(settings, "SYNC_ENABLED", False))
    if start_sync:
        app.extensions["canteen_sync_scheduler"] = start_scheduler(
            container.sync_service,
            interval_minutes=int(getattr(settings, "SYNC_INTERVAL_MINUTES", DEFAULT_SYNC_INTERVAL_MINUTES)),
        )

    return app
