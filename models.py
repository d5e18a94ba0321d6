import json
import uuid
from datetime import datetime
from decimal import Decimal

from extensions import db

INQUIRY_STATUSES = (
    "pending",
    "contacted",
    "enrolled",
    "books_given",
    "exam_completed",
    "certificate_issued",
    "cancelled",
)
FEE_PLANS = ("full", "installments")
PAYMENT_MODES = ("cash", "card", "upi", "bank_transfer")

BATCHES = (
    {"id": "batch1", "name": "Batch 1", "time": "7:30 AM - 9:00 AM"},
    {"id": "batch2", "name": "Batch 2", "time": "9:00 AM - 10:30 AM"},
    {"id": "batch3", "name": "Batch 3", "time": "10:30 AM - 12:00 PM"},
    {"id": "batch4", "name": "Batch 4", "time": "12:00 PM - 1:30 PM"},
    {"id": "batch5", "name": "Batch 5", "time": "1:30 PM - 3:00 PM"},
    {"id": "batch6", "name": "Batch 6", "time": "3:00 PM - 4:30 PM"},
    {"id": "batch7", "name": "Batch 7", "time": "4:30 PM - 6:00 PM"},
)
BATCH_IDS = tuple(b["id"] for b in BATCHES)


def _uuid() -> str:
    return str(uuid.uuid4())


def money(value) -> str | None:
    if value is None:
        return None
    return f"{Decimal(value):.2f}"


def _iso(value) -> str | None:
    return value.isoformat() if value is not None else None


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    username = db.Column(db.String(50), nullable=False, unique=True)
    password = db.Column(db.String(255), nullable=False)  # werkzeug hash

    def __repr__(self):
        return f"<User {self.username}>"


class Course(db.Model):
    __tablename__ = "courses"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    name = db.Column(db.String(200), nullable=False)
    code = db.Column(db.String(50), nullable=False, unique=True)
    duration = db.Column(db.Integer, nullable=False)  # in months
    full_fee = db.Column(db.Numeric(10, 2), nullable=False)
    installment_fee = db.Column(db.Numeric(10, 2), nullable=False)
    installment1 = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    installment2 = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    fee_plans = db.Column(db.Text, nullable=False, default="[]")  # JSON list of plan objects
    description = db.Column(db.Text)
    is_active = db.Column(db.Boolean, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def fee_plans_list(self) -> list:
        try:
            plans = json.loads(self.fee_plans or "[]")
        except (TypeError, ValueError):
            return []
        return plans if isinstance(plans, list) else []

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "code": self.code,
            "duration": self.duration,
            "fullFee": money(self.full_fee),
            "installmentFee": money(self.installment_fee),
            "installment1": money(self.installment1),
            "installment2": money(self.installment2),
            "feePlans": self.fee_plans_list(),
            "description": self.description,
            "isActive": bool(self.is_active),
            "createdAt": _iso(self.created_at),
        }

    def __repr__(self):
        return f"<Course {self.code}>"


class Inquiry(db.Model):
    __tablename__ = "inquiries"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    student_name = db.Column(db.String(200), nullable=False)
    course_id = db.Column(db.String(36), db.ForeignKey("courses.id"), nullable=False, index=True)
    contact_no = db.Column(db.String(20), nullable=False)
    address = db.Column(db.Text, nullable=False)
    father_contact_no = db.Column(db.String(20), nullable=False)
    status = db.Column(db.String(32), nullable=False, default="pending", index=True)
    batch_id = db.Column(db.String(20), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    course = db.relationship("Course", backref=db.backref("inquiries", lazy="dynamic"))
    enrollments = db.relationship("Enrollment", backref="inquiry", cascade="all, delete-orphan")

    def to_dict(self, with_course: bool = True) -> dict:
        data = {
            "id": self.id,
            "studentName": self.student_name,
            "courseId": self.course_id,
            "contactNo": self.contact_no,
            "address": self.address,
            "fatherContactNo": self.father_contact_no,
            "status": self.status,
            "batchId": self.batch_id,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
        if with_course:
            data["course"] = self.course.to_dict() if self.course else None
        return data

    def __repr__(self):
        return f"<Inquiry {self.student_name} [{self.status}]>"


class Enrollment(db.Model):
    __tablename__ = "enrollments"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    inquiry_id = db.Column(db.String(36), db.ForeignKey("inquiries.id"), nullable=False, index=True)
    student_name = db.Column(db.String(200), nullable=False)
    course_id = db.Column(db.String(36), db.ForeignKey("courses.id"), nullable=False, index=True)
    contact_no = db.Column(db.String(20), nullable=False)
    father_name = db.Column(db.String(200), nullable=False)
    father_contact_no = db.Column(db.String(20), nullable=False)
    student_education = db.Column(db.String(200), nullable=False)
    student_email = db.Column(db.String(255), nullable=False)
    student_address = db.Column(db.Text, nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    fee_plan = db.Column(db.String(20), nullable=False)  # 'full' | 'installments'
    total_fee = db.Column(db.Numeric(10, 2), nullable=False)
    batch_id = db.Column(db.String(20), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    course = db.relationship("Course", backref=db.backref("enrollments", lazy="dynamic"))
    payments = db.relationship(
        "Payment",
        backref="enrollment",
        cascade="all, delete-orphan",
        order_by="Payment.payment_date.desc()",
    )

    def to_dict(self, nested: bool = True) -> dict:
        data = {
            "id": self.id,
            "inquiryId": self.inquiry_id,
            "studentName": self.student_name,
            "courseId": self.course_id,
            "contactNo": self.contact_no,
            "fatherName": self.father_name,
            "fatherContactNo": self.father_contact_no,
            "studentEducation": self.student_education,
            "studentEmail": self.student_email,
            "studentAddress": self.student_address,
            "startDate": _iso(self.start_date),
            "endDate": _iso(self.end_date),
            "feePlan": self.fee_plan,
            "totalFee": money(self.total_fee),
            "batchId": self.batch_id,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
        if nested:
            data["course"] = self.course.to_dict() if self.course else None
            data["inquiry"] = self.inquiry.to_dict(with_course=False) if self.inquiry else None
            data["payments"] = [p.to_dict() for p in self.payments]
        return data

    def __repr__(self):
        return f"<Enrollment {self.student_name} course={self.course_id}>"


class Payment(db.Model):
    __tablename__ = "payments"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    enrollment_id = db.Column(db.String(36), db.ForeignKey("enrollments.id"), nullable=False, index=True)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    payment_date = db.Column(db.Date, nullable=False)
    payment_mode = db.Column(db.String(20), nullable=False)  # cash | card | upi | bank_transfer
    transaction_id = db.Column(db.String(100))
    installment_number = db.Column(db.Integer)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "enrollmentId": self.enrollment_id,
            "amount": money(self.amount),
            "paymentDate": _iso(self.payment_date),
            "paymentMode": self.payment_mode,
            "transactionId": self.transaction_id,
            "installmentNumber": self.installment_number,
            "notes": self.notes,
            "createdAt": _iso(self.created_at),
        }

    def __repr__(self):
        return f"<Payment EnrollmentID={self.enrollment_id} Paid={self.amount}>"


class Setting(db.Model):
    __tablename__ = "settings"

    id = db.Column(db.String(36), primary_key=True, default=_uuid)
    key = db.Column(db.String(100), nullable=False, unique=True)
    value = db.Column(db.Text, nullable=False)
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "key": self.key,
            "value": self.value,
            "description": self.description,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
