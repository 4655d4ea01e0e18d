from flask import jsonify, request

from feedback_desk.errors import ValidationError
from feedback_desk.utils.helpers import client_identity, service
from . import bp


@bp.post("/submit")
def submit():
    """Public intake: throttle first, then validate, sanitize and store."""
    identity = client_identity()
    service("rate_limiter").hit(identity)

    data = request.get_json(silent=True)
    if data is None:
        raise ValidationError("Request body must be JSON")

    new_id = service("submission").submit(data, identity)
    return jsonify({"success": True, "message": "Feedback submitted", "id": new_id})
