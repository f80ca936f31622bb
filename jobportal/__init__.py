import os
from pathlib import Path
import logging
from logging.handlers import RotatingFileHandler
from flask import Flask, jsonify, request, has_request_context
from .extensions import db, migrate, login_manager, babel, _
from .config import Config
from .models.user import User
from .security import load_user_from_request

# Blueprints
from .blueprints.errors import errors_bp
from .blueprints.auth import auth_bp
from .blueprints.users import users_bp
from .blueprints.jobs import jobs_bp
from .blueprints.companies import companies_bp
from .blueprints.applications import applications_bp
from .blueprints.employer import employer_bp
from .blueprints.admin import admin_bp


# Optional: Sentry
def _init_sentry(app):
    dsn = app.config.get("SENTRY_DSN")
    if not dsn:
        return
    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

    sentry_sdk.init(
        dsn=dsn,
        integrations=[FlaskIntegration(), SqlalchemyIntegration()],
        traces_sample_rate=app.config.get("SENTRY_TRACES_SAMPLE_RATE", 0.0),
        environment=os.getenv("ENV", "development"),
        release=os.getenv("GIT_COMMIT", None),
        send_default_pii=False,
    )
    app.logger.info("Sentry initialized.")

def _init_logging(app):
    # Base level
    level_name = app.config.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    app.logger.setLevel(level)

    # Ensure log dir exists
    log_dir = Path(app.config.get("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / app.config.get("LOG_FILENAME", "jobportal.log")

    # Formatter: text or JSON
    if app.config.get("LOG_JSON", False):
        import json_log_formatter
        formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("[%(asctime)s] %(levelname)s in %(module)s: %(message)s")

    # Rotating file handler (5MB x 5)
    file_handler = RotatingFileHandler(
        log_path, maxBytes=5_000_000, backupCount=5, encoding="utf-8"
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    # Stream to stdout as well (useful on dev/heroku/docker)
    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)

    # app.logger is the "jobportal" logger; service module loggers propagate to it.
    # Drop handlers left by an earlier create_app in the same process.
    for old in list(app.logger.handlers):
        app.logger.removeHandler(old)
        old.close()
    app.logger.addHandler(file_handler)
    app.logger.addHandler(stream_handler)

    app.logger.info("Logging initialized.")

def create_app(config_object=None):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object or Config)

    # --- base config defaults ---
    app.config.setdefault("SECRET_KEY", "change-me")
    app.config.setdefault(
        "SQLALCHEMY_DATABASE_URI",
        "sqlite:///" + os.path.join(app.instance_path, "jobportal.db"),
    )
    app.config.setdefault("SQLALCHEMY_TRACK_MODIFICATIONS", False)
    app.config.setdefault("LANGUAGES", ["en"])

    # ensure instance & uploads
    Path(app.instance_path).mkdir(parents=True, exist_ok=True)
    default_upload_dir = Path(app.instance_path) / "uploads"
    app.config.setdefault("UPLOAD_FOLDER", str(default_upload_dir))
    Path(app.config["UPLOAD_FOLDER"]).mkdir(parents=True, exist_ok=True)

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    # ---- Babel init (locale from Accept-Language) ----
    def _select_locale():
        if not has_request_context():
            return None
        return request.accept_languages.best_match(app.config.get("LANGUAGES", ["en"])) or "en"
    babel.init_app(app, locale_selector=_select_locale)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.request_loader
    def load_user_from_token(req):
        return load_user_from_request(req)

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"success": False, "error": {
            "kind": "unauthenticated",
            "message": _("Not authorized to access this route"),
        }}), 401

    # Logging must come before blueprints so errors during register are captured
    _init_logging(app)
    _init_sentry(app)

    # Blueprints
    app.register_blueprint(errors_bp)  # error handlers
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(jobs_bp, url_prefix="/api/jobs")
    app.register_blueprint(companies_bp, url_prefix="/api/companies")
    app.register_blueprint(applications_bp, url_prefix="/api/applications")
    app.register_blueprint(employer_bp, url_prefix="/api/employer")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")

    @app.route("/api/health")
    def health():
        return jsonify({"success": True, "version": app.config.get("APP_VERSION")})

    return app
