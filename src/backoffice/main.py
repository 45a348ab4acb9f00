from __future__ import annotations

import importlib
import logging
from decimal import Decimal
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .charity.controller import register as register_charity
from .container import Container, build_container
from .core.exceptions import DomainError
from .core.logging_config import setup_logging
from .database.bootstrap import apply_schema
from .payroll.controller import register as register_payroll
from .rules.controller import register as register_rules
from .schedules.controller import register as register_schedules

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "validation_error": 400,
    "authentication_error": 401,
    "not_found": 404,
    "conflict": 409,
    "invalid_state": 422,
    "internal_error": 500,
}


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        status = STATUS_BY_KIND.get(e.kind, 400)
        if status >= 500:
            logger.error("%s: %s", e.kind, e.message)
        return jsonify(e.to_dict()), status

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": "http_error", "message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        body = {"error": "internal_error", "message": "Internal server error"}
        if app.config.get("DEBUG"):
            body["details"] = repr(e)
        return jsonify(body), 500


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_FILE", None))
    logger.info("Starting back office with settings=%s", settings_module)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
        container = build_container(
            db_config=db_config,
            charity_rate=Decimal(str(getattr(settings, "CHARITY_RATE", "0.025"))),
            weekend_days=getattr(settings, "WEEKEND_DAYS", (5, 6)),
        )

    app.extensions["backoffice"] = container

    _register_error_handlers(app)
    register_rules(app, container)
    register_schedules(app, container)
    register_attendance(app, container)
    register_payroll(app, container)
    register_charity(app, container)

    return app
