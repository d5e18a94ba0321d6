from flask import Blueprint, current_app, jsonify
from sqlalchemy.orm import selectinload

from extensions import db
from models import Course, Enrollment, Inquiry, money
from routes import db_failure, get_or_404, json_body
from utils import admin_required, site_required
from utils.fees import (
    calculate_end_date,
    compute_balance,
    compute_paid_amount,
    installment_schedule,
    resolve_total_fee,
)
from utils.inquiry_status import apply_status, check_advance
from utils.validation import ValidationError, clean_enrollment

enrollment_bp = Blueprint("enrollments", __name__, url_prefix="/api/enrollments")

# enrollment attribute -> inquiry attribute copied on conversion when not supplied
INQUIRY_DEFAULTS = {
    "student_name": "student_name",
    "course_id": "course_id",
    "contact_no": "contact_no",
    "father_contact_no": "father_contact_no",
    "student_address": "address",
    "batch_id": "batch_id",
}


def enrollments_query():
    return Enrollment.query.options(
        selectinload(Enrollment.course),
        selectinload(Enrollment.inquiry),
        selectinload(Enrollment.payments),
    )


def _course_or_error(course_id: str) -> Course:
    course = db.session.get(Course, course_id)
    if course is None:
        raise ValidationError({"courseId": "Unknown course"})
    return course


def _apply_derived_fields(enrollment: Enrollment, course: Course) -> None:
    enrollment.end_date = calculate_end_date(enrollment.start_date, course.duration)
    enrollment.total_fee = resolve_total_fee(course, enrollment.fee_plan)


def _with_balance(enrollment: Enrollment) -> dict:
    data = enrollment.to_dict()
    data["paidAmount"] = money(compute_paid_amount(enrollment.payments))
    data["balance"] = money(compute_balance(enrollment))
    return data


@enrollment_bp.route("", methods=["GET"])
@site_required
@db_failure("Failed to fetch enrollments")
def list_enrollments():
    rows = enrollments_query().order_by(Enrollment.created_at.desc()).all()
    return jsonify([_with_balance(e) for e in rows])


@enrollment_bp.route("/<enrollment_id>", methods=["GET"])
@site_required
@db_failure("Failed to fetch enrollment")
def get_enrollment(enrollment_id):
    return jsonify(_with_balance(get_or_404(Enrollment, enrollment_id, "Enrollment")))


@enrollment_bp.route("", methods=["POST"])
@site_required
@db_failure("Failed to create enrollment")
def create_enrollment():
    """Convert an inquiry into an enrollment.

    Denormalized student fields default to the inquiry's values. End date
    and total fee are always derived from the course, and the inquiry moves
    to ``enrolled`` in the same transaction.
    """
    data = clean_enrollment(json_body())
    inquiry = db.session.get(Inquiry, data["inquiry_id"])
    if inquiry is None:
        raise ValidationError({"inquiryId": "Unknown inquiry"})
    check_advance(inquiry.status, "enrolled")

    for attr, source in INQUIRY_DEFAULTS.items():
        data.setdefault(attr, getattr(inquiry, source))
    course = _course_or_error(data["course_id"])

    enrollment = Enrollment(**data)
    _apply_derived_fields(enrollment, course)
    apply_status(inquiry, "enrolled")
    db.session.add(enrollment)
    db.session.commit()
    current_app.logger.info(
        "Inquiry %s converted to enrollment %s (%s, %s plan)",
        inquiry.id, enrollment.id, course.code, enrollment.fee_plan,
    )
    return jsonify(enrollment.to_dict()), 201


@enrollment_bp.route("/<enrollment_id>", methods=["PATCH"])
@site_required
@db_failure("Failed to update enrollment")
def update_enrollment(enrollment_id):
    enrollment = get_or_404(Enrollment, enrollment_id, "Enrollment")
    data = clean_enrollment(json_body(), partial=True)
    course = _course_or_error(data["course_id"]) if "course_id" in data else enrollment.course
    for attr, value in data.items():
        setattr(enrollment, attr, value)
    if {"course_id", "start_date", "fee_plan"} & data.keys():
        _apply_derived_fields(enrollment, course)
    db.session.commit()
    return jsonify(enrollment.to_dict())


@enrollment_bp.route("/<enrollment_id>", methods=["DELETE"])
@admin_required
@db_failure("Failed to delete enrollment")
def delete_enrollment(enrollment_id):
    enrollment = get_or_404(Enrollment, enrollment_id, "Enrollment")
    db.session.delete(enrollment)
    db.session.commit()
    current_app.logger.info("Enrollment %s deleted with its payments", enrollment_id)
    return jsonify({"message": "Enrollment deleted successfully"})


@enrollment_bp.route("/bulk", methods=["POST"])
@admin_required
@db_failure("Failed to perform bulk operation")
def bulk_enrollments():
    data = json_body()
    ids = data.get("ids")
    if data.get("action") != "delete":
        return jsonify({"message": "Invalid action"}), 400
    if not isinstance(ids, list) or not ids:
        raise ValidationError({"ids": "Provide a non-empty list of enrollment ids"})
    rows = Enrollment.query.filter(Enrollment.id.in_(ids)).all()
    for row in rows:
        db.session.delete(row)
    db.session.commit()
    return jsonify({"message": "Enrollments deleted successfully", "deleted": len(rows)})


@enrollment_bp.route("/<enrollment_id>/payments", methods=["GET"])
@site_required
@db_failure("Failed to fetch payments")
def enrollment_payments(enrollment_id):
    enrollment = get_or_404(Enrollment, enrollment_id, "Enrollment")
    return jsonify([p.to_dict() for p in enrollment.payments])


@enrollment_bp.route("/<enrollment_id>/schedule", methods=["GET"])
@site_required
@db_failure("Failed to build installment schedule")
def enrollment_schedule(enrollment_id):
    enrollment = get_or_404(Enrollment, enrollment_id, "Enrollment")
    schedule = installment_schedule(enrollment.total_fee, enrollment.start_date)
    return jsonify(
        {
            "enrollmentId": enrollment.id,
            "totalFee": money(enrollment.total_fee),
            "paidAmount": money(compute_paid_amount(enrollment.payments)),
            "balance": money(compute_balance(enrollment)),
            "installments": [
                {"number": i["number"], "amount": money(i["amount"]), "dueDate": i["dueDate"].isoformat()}
                for i in schedule
            ],
        }
    )
