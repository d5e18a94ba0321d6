from datetime import datetime

from flask import Blueprint, current_app, jsonify

from models import Enrollment, money
from routes import db_failure, get_or_404, json_body
from routes.enrollment_routes import enrollments_query
from utils import site_required
from utils.fees import compute_balance
from utils.notify import build_reminder_message
from utils.sms import send_sms
from utils.validation import ValidationError

reminder_bp = Blueprint("reminders", __name__, url_prefix="/api")


def _remind(enrollment: Enrollment) -> dict:
    pending = compute_balance(enrollment)
    course_name = enrollment.course.name if enrollment.course else ""
    message = build_reminder_message(enrollment.student_name, course_name, pending)
    result = send_sms(enrollment.contact_no, message)
    return {
        "enrollmentId": enrollment.id,
        "studentName": enrollment.student_name,
        "contactNo": enrollment.contact_no,
        "courseName": course_name,
        "pendingAmount": money(pending),
        "sent": result["success"],
        "provider": result["provider"],
        "error": result["error"],
    }


@reminder_bp.route("/send-reminder", methods=["POST"])
@site_required
@db_failure("Failed to send payment reminder")
def send_reminder():
    enrollment_id = json_body().get("enrollmentId")
    if not enrollment_id:
        raise ValidationError({"enrollmentId": "Required"})
    enrollment = get_or_404(Enrollment, enrollment_id, "Enrollment")
    result = _remind(enrollment)
    return jsonify(
        {
            "success": result["sent"],
            "message": "Payment reminder sent successfully" if result["sent"] else "SMS failed, logged to console",
            "sentTo": result["contactNo"],
            "studentName": result["studentName"],
            "provider": result["provider"],
            "error": result["error"],
            "timestamp": datetime.utcnow().isoformat() + "Z",
        }
    )


@reminder_bp.route("/send-bulk-reminders", methods=["POST"])
@site_required
@db_failure("Failed to send bulk payment reminders")
def send_bulk_reminders():
    """Remind every enrollment with an outstanding balance (optionally one course)."""
    course_id = json_body().get("courseId")
    query = enrollments_query()
    if course_id and course_id != "all":
        query = query.filter(Enrollment.course_id == course_id)

    results = [_remind(e) for e in query.all() if compute_balance(e) > 0]
    success_count = sum(1 for r in results if r["sent"])
    current_app.logger.info("Bulk reminders: %d sent, %d succeeded", len(results), success_count)
    return jsonify(
        {
            "success": True,
            "message": "Bulk payment reminders processed",
            "sentCount": len(results),
            "successCount": success_count,
            "results": results,
            "timestamp": datetime.utcnow().isoformat() + "Z",
        }
    )
