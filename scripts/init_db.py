from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from backoffice.core.logging_config import setup_logging
from backoffice.database.bootstrap import apply_schema
from config import get_settings_module

logger = logging.getLogger("init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    db_config = dict(settings.DB_CONFIG)
    count = apply_schema(db_config)
    logger.info(
        "Applied schema.sql -> %s@%s:%s/%s (%d statements)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        count,
    )


if __name__ == "__main__":
    main()
