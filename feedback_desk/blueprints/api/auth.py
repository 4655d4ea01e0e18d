from flask import current_app, jsonify, request

from feedback_desk.extensions import limiter
from feedback_desk.utils.helpers import service
from . import bp


def _login_limit():
    return current_app.config.get("LOGIN_RATE_LIMIT", "10 per minute; 100 per hour")


@bp.post("/admin/login")
@bp.post("/login")
@limiter.limit(_login_limit)  # per-IP brute-force guard
def login():
    data = request.get_json(silent=True)
    # any body without a password string is just a failed login
    password = data.get("password") if isinstance(data, dict) else None
    token = service("auth").login(password)
    return jsonify({"success": True, "token": token})
