from flask import Blueprint, current_app, jsonify

from extensions import db
from models import Course, Inquiry
from routes import db_failure, get_or_404, json_body
from utils import admin_required, get_gate, site_required
from utils.inquiry_status import INITIAL, apply_bulk_status, apply_status, is_valid_status
from utils.validation import ValidationError, clean_inquiry

inquiry_bp = Blueprint("inquiries", __name__, url_prefix="/api/inquiries")


def _require_course(course_id: str) -> None:
    if db.session.get(Course, course_id) is None:
        raise ValidationError({"courseId": "Unknown course"})


@inquiry_bp.route("", methods=["GET"])
@site_required
@db_failure("Failed to fetch inquiries")
def list_inquiries():
    rows = Inquiry.query.order_by(Inquiry.created_at.desc()).all()
    return jsonify([i.to_dict() for i in rows])


@inquiry_bp.route("/<inquiry_id>", methods=["GET"])
@site_required
@db_failure("Failed to fetch inquiry")
def get_inquiry(inquiry_id):
    return jsonify(get_or_404(Inquiry, inquiry_id, "Inquiry").to_dict())


@inquiry_bp.route("", methods=["POST"])
@site_required
@db_failure("Failed to create inquiry")
def create_inquiry():
    data = clean_inquiry(json_body())
    _require_course(data["course_id"])
    status = data.pop("status", "pending")
    if status not in INITIAL:
        raise ValidationError({"status": "New inquiries start as pending, contacted or cancelled"})
    inquiry = Inquiry(status=status, **data)
    db.session.add(inquiry)
    db.session.commit()
    current_app.logger.info("Inquiry %s recorded for %s", inquiry.id, inquiry.student_name)
    return jsonify(inquiry.to_dict()), 201


@inquiry_bp.route("/<inquiry_id>", methods=["PATCH"])
@site_required
@db_failure("Failed to update inquiry")
def update_inquiry(inquiry_id):
    inquiry = get_or_404(Inquiry, inquiry_id, "Inquiry")
    data = clean_inquiry(json_body(), partial=True)
    if "course_id" in data:
        _require_course(data["course_id"])
    status = data.pop("status", None)
    if status is not None:
        apply_status(inquiry, status)
    for attr, value in data.items():
        setattr(inquiry, attr, value)
    db.session.commit()
    return jsonify(inquiry.to_dict())


@inquiry_bp.route("/<inquiry_id>/status", methods=["PATCH"])
@site_required
@db_failure("Failed to update status")
def update_status(inquiry_id):
    inquiry = get_or_404(Inquiry, inquiry_id, "Inquiry")
    status = json_body().get("status")
    if not is_valid_status(status):
        raise ValidationError({"status": "Unknown or missing status"})
    previous = inquiry.status
    if apply_status(inquiry, status):
        db.session.commit()
        current_app.logger.info("Inquiry %s moved %s -> %s", inquiry.id, previous, status)
    return jsonify({"message": "Status updated successfully", "status": inquiry.status})


@inquiry_bp.route("/<inquiry_id>", methods=["DELETE"])
@admin_required
@db_failure("Failed to delete inquiry")
def delete_inquiry(inquiry_id):
    inquiry = get_or_404(Inquiry, inquiry_id, "Inquiry")
    # enrollments and their payments go with it (cascade)
    db.session.delete(inquiry)
    db.session.commit()
    current_app.logger.info("Inquiry %s deleted", inquiry_id)
    return jsonify({"message": "Inquiry deleted successfully"})


@inquiry_bp.route("/bulk", methods=["POST"])
@site_required
@db_failure("Failed to perform bulk operation")
def bulk_inquiries():
    data = json_body()
    ids = data.get("ids")
    action = data.get("action")
    if not isinstance(ids, list) or not ids:
        raise ValidationError({"ids": "Provide a non-empty list of inquiry ids"})
    rows = Inquiry.query.filter(Inquiry.id.in_(ids)).all()

    if action == "updateStatus":
        status = data.get("status")
        if not is_valid_status(status):
            raise ValidationError({"status": "Unknown or missing status"})
        changed = apply_bulk_status(rows, status)
        db.session.commit()
        return jsonify({"message": "Inquiries updated successfully", "updated": changed})
    if action == "delete":
        # bulk delete stays an admin action even though the endpoint is shared
        if not get_gate("admin").is_authenticated:
            return jsonify({"message": "Admin access required"}), 403
        for row in rows:
            db.session.delete(row)
        db.session.commit()
        current_app.logger.info("Bulk deleted %d inquiries", len(rows))
        return jsonify({"message": "Inquiries deleted successfully", "deleted": len(rows)})
    return jsonify({"message": "Invalid action"}), 400
