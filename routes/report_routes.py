from flask import Blueprint, Response, abort, current_app, request

from models import Enrollment
from routes import db_failure
from routes.enrollment_routes import enrollments_query
from utils import admin_required
from utils.reports import ALL_COURSES, REPORT_TYPES, generate_csv, generate_html, report_filename
from utils.settings import institute_name

report_bp = Blueprint("reports", __name__, url_prefix="/api/reports")

MIMETYPES = {"csv": "text/csv", "html": "text/html"}


def _flag(name: str, default: bool) -> bool:
    raw = request.args.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@report_bp.route("/<report_type>.<ext>", methods=["GET"])
@admin_required
@db_failure("Failed to generate report")
def export_report(report_type, ext):
    if report_type not in REPORT_TYPES or ext not in MIMETYPES:
        abort(404, description="Unknown report")
    course_id = request.args.get("courseId") or ALL_COURSES
    enrollments = enrollments_query().order_by(Enrollment.created_at.desc()).all()

    cfg = current_app.config
    if ext == "csv":
        body = generate_csv(enrollments, report_type, course_id)
    else:
        body = generate_html(
            enrollments,
            report_type,
            course_id,
            include_stats=_flag("includeStats", True),
            institute=institute_name(),
            symbol=cfg.get("CURRENCY_SYMBOL", "₹"),
        )
    filename = report_filename(report_type, ext)
    current_app.logger.info("Exported %s (course filter: %s)", filename, course_id)
    return Response(
        body,
        mimetype=MIMETYPES[ext],
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
