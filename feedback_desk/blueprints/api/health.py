from flask import current_app, jsonify

from feedback_desk.errors import PersistenceError
from feedback_desk.extensions import limiter
from feedback_desk.utils.helpers import service
from . import bp


@bp.get("/test-db")
@limiter.exempt
def test_db():
    """Connectivity probe. Reports the row count, never credentials or driver errors."""
    store = service("store")
    try:
        store.ping()
        count = store.count_all()
    except PersistenceError:
        current_app.logger.warning("db_probe_failed", extra={"event": "db_probe_failed"})
        return jsonify({"success": False, "message": "Database unavailable"}), 500
    return jsonify({
        "success": True,
        "message": "Database connection OK",
        "count": count,
        "database": store.label,
    })
