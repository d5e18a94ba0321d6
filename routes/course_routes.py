from flask import Blueprint, current_app, jsonify

from extensions import db
from models import Course
from routes import db_failure, get_or_404, json_body
from utils import admin_required, site_required
from utils.validation import ValidationError, clean_course

course_bp = Blueprint("courses", __name__, url_prefix="/api/courses")


def _code_taken(code: str, exclude_id: str | None = None) -> bool:
    query = Course.query.filter(Course.code == code)
    if exclude_id:
        query = query.filter(Course.id != exclude_id)
    return db.session.query(query.exists()).scalar()


@course_bp.route("", methods=["GET"])
@site_required
@db_failure("Failed to fetch courses")
def list_courses():
    courses = Course.query.filter_by(is_active=True).order_by(Course.name).all()
    return jsonify([c.to_dict() for c in courses])


@course_bp.route("/<course_id>", methods=["GET"])
@site_required
@db_failure("Failed to fetch course")
def get_course(course_id):
    return jsonify(get_or_404(Course, course_id, "Course").to_dict())


@course_bp.route("", methods=["POST"])
@admin_required
@db_failure("Failed to create course")
def create_course():
    data = clean_course(json_body())
    if _code_taken(data["code"]):
        raise ValidationError({"code": "A course with this code already exists"})
    course = Course(**data)
    db.session.add(course)
    db.session.commit()
    current_app.logger.info("Course %s created", course.code)
    return jsonify(course.to_dict()), 201


@course_bp.route("/<course_id>", methods=["PATCH"])
@admin_required
@db_failure("Failed to update course")
def update_course(course_id):
    course = get_or_404(Course, course_id, "Course")
    data = clean_course(json_body(), partial=True)
    if "code" in data and _code_taken(data["code"], exclude_id=course.id):
        raise ValidationError({"code": "A course with this code already exists"})
    for attr, value in data.items():
        setattr(course, attr, value)
    db.session.commit()
    return jsonify(course.to_dict())


@course_bp.route("/<course_id>", methods=["DELETE"])
@admin_required
@db_failure("Failed to delete course")
def delete_course(course_id):
    course = get_or_404(Course, course_id, "Course")
    in_use = course.inquiries.count() or course.enrollments.count()
    if in_use:
        # referenced rows keep pointing at it; hide it from listings instead
        course.is_active = False
        db.session.commit()
        current_app.logger.info("Course %s deactivated (still referenced)", course.code)
        return jsonify({"message": "Course deactivated (it has inquiries or enrollments)"})
    db.session.delete(course)
    db.session.commit()
    current_app.logger.info("Course %s deleted", course.code)
    return jsonify({"message": "Course deleted successfully"})
