import os

from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.middleware.proxy_fix import ProxyFix

# Load .env only for local/dev. In prod, env vars come from the platform.
if os.getenv("APP_ENV", "development") != "production":
    from dotenv import load_dotenv
    load_dotenv(".env")

from .config import get_config
from .errors import FeedbackDeskError, ThrottledError
from .extensions import db, migrate, limiter
from .observability import init_logging, init_sentry

__version__ = "1.0.0"

# Fail closed: the service must never start with a guessable admin or signing secret.
REQUIRED_SECRETS = ("ADMIN_PASSWORD", "SECRET_KEY")


def _error_response(message: str, status: int, headers=None):
    return jsonify({"success": False, "message": message}), status, (headers or {})


def create_app(overrides: dict | None = None):
    app = Flask(__name__)

    # Config: clean, explicit, class-based; explicit overrides last (tests, CLI)
    app.config.from_object(get_config())
    if overrides:
        app.config.update(overrides)

    for name in REQUIRED_SECRETS:
        if not app.config.get(name):
            raise RuntimeError(f"Missing required environment variable: {name}")

    # Client identity comes from X-Forwarded-For only behind trusted proxies
    proxies = int(app.config.get("TRUSTED_PROXY_COUNT") or 0)
    if proxies > 0:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=proxies, x_proto=proxies)

    # --- Observability & Security ---
    app.config.setdefault("APP_VERSION", __version__)
    init_logging(app)
    init_sentry(app)

    app_env = (app.config.get("APP_ENV") or "development").lower()
    if app_env in ("staging", "production"):
        from .security import init_security
        init_security(app)
        if app.config["RATELIMIT_STORAGE_URI"].startswith("memory://"):
            app.logger.warning("REDIS_URL not set; rate limits are per process")

    # Persistence: one store variant per backend, chosen from the URL
    from .services.store import store_class_for
    url = app.config["SQLALCHEMY_DATABASE_URI"]
    store_cls = store_class_for(url)
    app.config.setdefault(
        "SQLALCHEMY_ENGINE_OPTIONS",
        store_cls.engine_options(url, app.config["DB_POOL_SIZE"], app.config["DB_POOL_TIMEOUT"]),
    )

    # Init extensions
    app.config.setdefault("RATELIMIT_DEFAULT", "1000 per hour")
    db.init_app(app)
    migrate.init_app(app, db, directory="migrations")
    limiter.init_app(app)

    # Core services, owned by this app instance
    from .services import AdminService, AuthService, RateLimiter, SubmissionService
    store = store_cls(db)
    app.extensions["feedback_desk"] = {
        "store": store,
        "rate_limiter": RateLimiter.from_config(app.config),
        "auth": AuthService.from_config(app.config),
        "submission": SubmissionService(
            store,
            feedback_types=app.config["FEEDBACK_TYPES"],
            strict=app.config["STRICT_SUBMISSIONS"],
        ),
        "admin": AdminService(
            store,
            feedback_types=app.config["FEEDBACK_TYPES"],
            timezone_name=app.config["INSTITUTION_TIMEZONE"],
        ),
    }

    from .blueprints.api import bp as api_bp
    app.register_blueprint(api_bp)

    @app.get("/healthz")
    @limiter.exempt
    def healthz():
        return {"status": "ok"}, 200

    # --- Error handlers: every failure is {success: false, message} ---
    @app.errorhandler(FeedbackDeskError)
    def handle_feedback_error(e):
        headers = {}
        if isinstance(e, ThrottledError) and e.retry_after is not None:
            headers["Retry-After"] = str(int(e.retry_after))
        return _error_response(e.message, e.status_code, headers)

    # 429 from Flask-Limiter (login guard)
    @app.errorhandler(429)
    def too_many_requests(e):
        return _error_response("Too many attempts, please try again later", 429)

    @app.errorhandler(404)
    def not_found(e):
        return _error_response("Not found", 404)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return _error_response("Method not allowed", 405)

    @app.errorhandler(500)
    def server_error(e):
        return _error_response("Internal server error", 500)

    # CLI commands (ops utilities)
    from .cli import register_cli
    register_cli(app)

    # Mirrors "CREATE TABLE IF NOT EXISTS" at boot; a down database is logged, not fatal.
    if app.config.get("DB_AUTO_CREATE"):
        with app.app_context():
            try:
                db.create_all()
            except SQLAlchemyError:
                app.logger.exception("db_init_failed", extra={"event": "db_init_failed", "backend": store.backend})

    return app
