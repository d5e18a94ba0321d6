"""Payload checks applied at the API boundary before anything reaches the DB.

Each ``clean_*`` function takes the camelCase JSON body and returns a dict
of model attribute names, or raises :class:`ValidationError` carrying a
field -> message mapping. ``partial=True`` validates only the fields present
(PATCH semantics).
"""
from __future__ import annotations

import json
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Optional

from models import BATCH_IDS, FEE_PLANS, INQUIRY_STATUSES, PAYMENT_MODES
from utils.fees import to_date, to_decimal

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_RE = re.compile(r"^\+?[0-9][0-9 \-]{6,18}$")

# Numeric(10, 2) columns hold at most 8 integer digits
MAX_AMOUNT = Decimal("100000000")


class ValidationError(Exception):
    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__("Invalid data")


def _text(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Required")
    return value.strip()


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("Must be text")
    return value.strip() or None


def _phone(value: Any) -> str:
    value = _text(value)
    if not PHONE_RE.match(value):
        raise ValueError("Invalid phone number")
    return value


def _email(value: Any) -> str:
    value = _text(value)
    if not EMAIL_RE.match(value):
        raise ValueError("Invalid email address")
    return value


def _money(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        raise ValueError("Required")
    amount = to_decimal(value)
    if not amount.is_finite():
        raise ValueError("Must be a number")
    if amount < 0:
        raise ValueError("Must not be negative")
    if amount >= MAX_AMOUNT:
        raise ValueError("Amount is too large")
    try:
        amount = amount.quantize(Decimal("0.01"))
    except InvalidOperation:
        raise ValueError("Must be a number")
    if amount >= MAX_AMOUNT:
        # 99999999.995 rounds up past the column limit
        raise ValueError("Amount is too large")
    return amount


def _positive_money(value: Any) -> Decimal:
    amount = _money(value)
    if amount <= 0:
        raise ValueError("Must be greater than zero")
    return amount


def _positive_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("Must be a whole number")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError("Must be a whole number")
    if str(number) != str(value).strip() and not isinstance(value, int):
        raise ValueError("Must be a whole number")
    if number <= 0:
        raise ValueError("Must be greater than zero")
    return number


def _date(value: Any) -> date:
    try:
        return to_date(value)
    except (TypeError, ValueError):
        raise ValueError("Invalid date (expected YYYY-MM-DD)")


def _choice(options) -> Callable[[Any], str]:
    def check(value: Any) -> str:
        if value not in options:
            raise ValueError("Must be one of: " + ", ".join(options))
        return value

    return check


def _fee_plans(value: Any) -> str:
    if value is None or value == "":
        return "[]"
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except ValueError:
            raise ValueError("Must be a JSON list")
    if not isinstance(value, list):
        raise ValueError("Must be a JSON list")
    return json.dumps(value)


def _bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError("Must be true or false")


# (json key, model attribute, converter, required)
COURSE_FIELDS = [
    ("name", "name", _text, True),
    ("code", "code", _text, True),
    ("duration", "duration", _positive_int, True),
    ("fullFee", "full_fee", _money, True),
    ("installmentFee", "installment_fee", _money, True),
    ("installment1", "installment1", _money, False),
    ("installment2", "installment2", _money, False),
    ("feePlans", "fee_plans", _fee_plans, False),
    ("description", "description", _optional_text, False),
    ("isActive", "is_active", _bool, False),
]

INQUIRY_FIELDS = [
    ("studentName", "student_name", _text, True),
    ("courseId", "course_id", _text, True),
    ("contactNo", "contact_no", _phone, True),
    ("address", "address", _text, True),
    ("fatherContactNo", "father_contact_no", _phone, True),
    ("batchId", "batch_id", _choice(BATCH_IDS), True),
    ("status", "status", _choice(INQUIRY_STATUSES), False),
]

ENROLLMENT_FIELDS = [
    ("inquiryId", "inquiry_id", _text, True),
    ("studentName", "student_name", _text, False),
    ("courseId", "course_id", _text, False),
    ("contactNo", "contact_no", _phone, False),
    ("fatherName", "father_name", _text, True),
    ("fatherContactNo", "father_contact_no", _phone, False),
    ("studentEducation", "student_education", _text, True),
    ("studentEmail", "student_email", _email, True),
    ("studentAddress", "student_address", _text, False),
    ("startDate", "start_date", _date, True),
    ("feePlan", "fee_plan", _choice(FEE_PLANS), True),
    ("batchId", "batch_id", _choice(BATCH_IDS), False),
]

PAYMENT_FIELDS = [
    ("enrollmentId", "enrollment_id", _text, True),
    ("amount", "amount", _positive_money, True),
    ("paymentDate", "payment_date", _date, True),
    ("paymentMode", "payment_mode", _choice(PAYMENT_MODES), True),
    ("transactionId", "transaction_id", _optional_text, False),
    ("installmentNumber", "installment_number", _positive_int, False),
    ("notes", "notes", _optional_text, False),
]

SETTING_FIELDS = [
    ("value", "value", _text, True),
    ("description", "description", _optional_text, False),
]


def _clean(fields, data: Any, partial: bool) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError({"_": "Expected a JSON object"})
    cleaned: Dict[str, Any] = {}
    errors: Dict[str, str] = {}
    for key, attr, convert, required in fields:
        if key not in data or data[key] is None:
            if required and not partial:
                errors[key] = "Required"
            continue
        try:
            cleaned[attr] = convert(data[key])
        except ValueError as exc:
            errors[key] = str(exc)
    if errors:
        raise ValidationError(errors)
    return cleaned


def clean_course(data: Any, partial: bool = False) -> Dict[str, Any]:
    return _clean(COURSE_FIELDS, data, partial)


def clean_inquiry(data: Any, partial: bool = False) -> Dict[str, Any]:
    return _clean(INQUIRY_FIELDS, data, partial)


def clean_enrollment(data: Any, partial: bool = False) -> Dict[str, Any]:
    fields = ENROLLMENT_FIELDS
    if partial:
        # the originating inquiry is fixed once converted
        fields = [f for f in fields if f[0] != "inquiryId"]
    return _clean(fields, data, partial)


def clean_payment(data: Any) -> Dict[str, Any]:
    return _clean(PAYMENT_FIELDS, data, partial=False)


def clean_setting(data: Any) -> Dict[str, Any]:
    return _clean(SETTING_FIELDS, data, partial=False)
