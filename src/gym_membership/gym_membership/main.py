from __future__ import annotations

import importlib
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from config import get_settings_module

from .container import Container, build_container
from .core.enums import StoreBackend
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .database.connection import DBConfig

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def configure_logging(level: str = "INFO") -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | {name}:{line} - {message}",
    )


def create_engine() -> Container:
    """Load settings (``APP_ENV`` + ``.env``), prepare the store and wire the engine."""

    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    backend = str(getattr(settings, "STORE_BACKEND", StoreBackend.MYSQL.value)).lower()
    logger.info("settings={} store={} tz={}", settings_module, backend, getattr(settings, "TIMEZONE", "UTC"))

    if backend == StoreBackend.MYSQL.value:
        db_config = DBConfig.from_dict(settings.DB_CONFIG)
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables={})", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")

    return build_container(settings)
