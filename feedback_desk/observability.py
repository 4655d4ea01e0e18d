import logging
import os
from logging.config import dictConfig

# Fields every JSON line carries; services add event/feedback_id/... through `extra`.
JSON_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def init_logging(app):
    """JSON lines to stderr in staging/production; stock handlers with the configured level elsewhere."""
    level = (app.config.get("LOG_LEVEL") or "INFO").upper()
    app_env = (app.config.get("APP_ENV") or "development").lower()
    if app_env not in ("staging", "production"):
        logging.getLogger("feedback_desk").setLevel(level)
        app.logger.setLevel(level)
        return

    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": "pythonjsonlogger.jsonlogger.JsonFormatter", "fmt": JSON_LOG_FORMAT},
        },
        "handlers": {"stderr": {"class": "logging.StreamHandler", "formatter": "json"}},
        "loggers": {
            # request lines from the dev server would duplicate the proxy's access log
            "werkzeug": {"level": "WARNING"},
        },
        "root": {"level": level, "handlers": ["stderr"]},
    })
    app.logger.setLevel(level)


def init_sentry(app):
    """Report unhandled errors to Sentry when SENTRY_DSN is set."""
    dsn = os.getenv("SENTRY_DSN")
    if not dsn:
        return
    import sentry_sdk
    from sentry_sdk.integrations.flask import FlaskIntegration

    sentry_sdk.init(
        dsn=dsn,
        integrations=[FlaskIntegration()],
        traces_sample_rate=float(os.getenv("SENTRY_TRACES", "0.0")),
        environment=app.config.get("APP_ENV", "development"),
        release=f"feedback-desk@{app.config.get('APP_VERSION', 'dev')}",
        # submissions carry names and phone numbers
        send_default_pii=False,
    )
