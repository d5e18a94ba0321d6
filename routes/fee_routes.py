from flask import Blueprint, current_app, jsonify
from sqlalchemy.orm import joinedload

from extensions import db
from models import Enrollment, Payment
from routes import db_failure, json_body
from utils import site_required
from utils.fees import compute_balance
from utils.validation import ValidationError, clean_payment

fee_bp = Blueprint("fees", __name__, url_prefix="/api/payments")


@fee_bp.route("", methods=["GET"])
@site_required
@db_failure("Failed to fetch payments")
def list_payments():
    rows = (
        Payment.query.options(joinedload(Payment.enrollment).joinedload(Enrollment.course))
        .order_by(Payment.payment_date.desc(), Payment.created_at.desc())
        .all()
    )
    out = []
    for p in rows:
        data = p.to_dict()
        data["enrollment"] = {
            "studentName": p.enrollment.student_name,
            "course": {"name": p.enrollment.course.name if p.enrollment.course else None},
        }
        out.append(data)
    return jsonify(out)


@fee_bp.route("", methods=["POST"])
@site_required
@db_failure("Failed to record payment")
def add_payment():
    """Record a payment. Payments are append-only; there is no edit path."""
    data = clean_payment(json_body())
    enrollment = db.session.get(Enrollment, data["enrollment_id"])
    if enrollment is None:
        raise ValidationError({"enrollmentId": "Unknown enrollment"})

    payment = Payment(**data)
    db.session.add(payment)
    db.session.commit()

    balance = compute_balance(enrollment)
    current_app.logger.info(
        "Payment %s of %s recorded for enrollment %s (balance %s)",
        payment.id, payment.amount, enrollment.id, balance,
    )
    if balance < 0:
        current_app.logger.warning("Enrollment %s is overpaid by %s", enrollment.id, -balance)
    return jsonify(payment.to_dict()), 201
