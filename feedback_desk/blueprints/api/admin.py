from flask import jsonify

from feedback_desk.security.policy import admin_required
from feedback_desk.utils.helpers import json_object, service
from . import bp


@bp.get("/admin/list")
@bp.get("/feedbacks")
@admin_required
def list_feedback():
    rows = service("admin").list()
    return jsonify({"success": True, "data": [r.to_dict() for r in rows]})


@bp.put("/admin/update/<int:feedback_id>")
@bp.put("/feedbacks/<int:feedback_id>")
@admin_required
def update_feedback(feedback_id: int):
    row = service("admin").set_status(feedback_id, json_object().get("status"))
    return jsonify({"success": True, "message": "Status updated", "data": row.to_dict()})


@bp.delete("/admin/delete/<int:feedback_id>")
@bp.delete("/feedbacks/<int:feedback_id>")
@admin_required
def delete_feedback(feedback_id: int):
    service("admin").remove(feedback_id)
    return jsonify({"success": True, "message": "Feedback deleted"})


@bp.get("/admin/statistics")
@admin_required
def statistics():
    return jsonify({"success": True, "data": service("admin").statistics()})
