# river_survey/__init__.py
import logging
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from flask import Flask, jsonify, render_template, request

from .config import config
from .extensions import cors, db
from .routes.admin import bp as admin_bp
from .routes.api import bp as api_bp
from .routes.ingest import bp as ingest_bp
from .routes.survey import bp as survey_bp

logger = logging.getLogger(__name__)


def _check_report_settings(cfg):
    try:
        ZoneInfo(cfg["REPORT_TIMEZONE"])
    except (ZoneInfoNotFoundError, ValueError):
        raise RuntimeError(f"Unknown REPORT_TIMEZONE {cfg['REPORT_TIMEZONE']!r}")
    if not 0 <= cfg["HOUR_FLOOR"] <= cfg["HOUR_CEILING"] <= 23:
        raise RuntimeError(
            f"HOUR_FLOOR/HOUR_CEILING must satisfy 0 <= floor <= ceiling <= 23, "
            f"got {cfg['HOUR_FLOOR']}/{cfg['HOUR_CEILING']}"
        )


def _error_handlers(app):
    # /api/* always answers JSON, pages get the HTML error template
    def _handle(code, message):
        def handler(e):
            if request.path.startswith("/api/"):
                return jsonify({"error": message, "path": request.path}), code
            return render_template("error.html", message=message.capitalize()), code
        return handler

    app.register_error_handler(404, _handle(404, "not found"))
    app.register_error_handler(405, _handle(405, "method not allowed"))
    app.register_error_handler(413, _handle(413, "payload too large"))
    app.register_error_handler(500, _handle(500, "internal server error"))


def create_app(config_name=None):
    config_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app = Flask(__name__)
    app.config.from_object(config[config_name])
    _check_report_settings(app.config)
    app.url_map.strict_slashes = False

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    db.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    app.register_blueprint(survey_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(api_bp, url_prefix="/api/v1")
    app.register_blueprint(ingest_bp, url_prefix="/api/v1/ingest")
    _error_handlers(app)

    with app.app_context():
        db.create_all()
        Path(app.config["UPLOAD_DIR"]).mkdir(parents=True, exist_ok=True)
        logger.debug(f"Routes: {[str(r) for r in app.url_map.iter_rules()]}")
    return app
