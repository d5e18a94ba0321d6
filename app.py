import logging
import os
import uuid
from datetime import datetime

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from config import Config
from extensions import db, limiter, migrate
from routes.admin_routes import admin_bp
from routes.analytics import analytics_bp
from routes.auth_routes import auth_bp
from routes.course_routes import course_bp
from routes.enrollment_routes import enrollment_bp
from routes.fee_routes import fee_bp
from routes.inquiry_routes import inquiry_bp
from routes.reminder_routes import reminder_bp
from routes.report_routes import report_bp
from utils.credentials import ensure_default_users
from utils.inquiry_status import InvalidStatusTransition
from utils.validation import ValidationError

BLUEPRINTS = (
    auth_bp,
    course_bp,
    inquiry_bp,
    enrollment_bp,
    fee_bp,
    analytics_bp,
    report_bp,
    admin_bp,
    reminder_bp,
)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def _validation_error(e):
        return jsonify({"message": "Invalid data", "errors": e.errors}), 400

    @app.errorhandler(InvalidStatusTransition)
    def _bad_transition(e):
        return jsonify({"message": str(e), "current": e.current, "requested": e.requested}), 409

    @app.errorhandler(HTTPException)
    def _http_error(e):
        if not request.path.startswith("/api/"):
            return e
        return jsonify({"message": e.description}), e.code


def create_app(config_object=Config) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object)
    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")), logging.INFO))

    uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
    if uri.startswith("sqlite:///"):
        os.makedirs(os.path.dirname(uri[len("sqlite:///"):]) or ".", exist_ok=True)

    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)

    for bp in BLUEPRINTS:
        app.register_blueprint(bp)
    _register_error_handlers(app)

    # Assign a per-request correlation id for tracing
    @app.before_request
    def _assign_request_id():
        g.request_id = uuid.uuid4().hex[:16]

    @app.after_request
    def _set_security_headers(resp):
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Frame-Options", "SAMEORIGIN")
        resp.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        resp.headers.setdefault("X-Request-ID", g.get("request_id", ""))
        if app.config.get("SESSION_COOKIE_SECURE", False):
            resp.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return resp

    @app.route("/health")
    def health():
        return jsonify(
            {
                "status": "ok",
                "service": "institute-admissions",
                "timestamp": datetime.utcnow().isoformat() + "Z",
            }
        )

    # Fresh installs get tables and the two access accounts; migrations handle upgrades
    with app.app_context():
        db.create_all()
        ensure_default_users()

    return app


if __name__ == "__main__":
    create_app().run(debug=os.environ.get("FLASK_DEBUG") == "1")
