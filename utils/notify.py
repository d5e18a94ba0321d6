from __future__ import annotations

from decimal import Decimal

from flask import current_app

from utils.reports import format_money
from utils.settings import institute_name


def normalize_phone(raw: str | None) -> str | None:
    if not raw:
        return None
    phone = str(raw).strip()
    if phone.startswith("+"):
        return phone
    cc = current_app.config.get("DEFAULT_COUNTRY_CODE", "+91")
    digits = "".join(ch for ch in phone if ch.isdigit())
    if phone.startswith("0"):
        digits = digits[1:]
    if len(digits) == 10:
        return f"{cc}{digits}"
    return phone


def build_reminder_message(student_name: str, course_name: str, pending_amount: Decimal) -> str:
    cfg = current_app.config
    amount = format_money(pending_amount, cfg.get("CURRENCY_SYMBOL", "₹"))
    return (
        f"Dear {student_name}, this is a payment reminder for your {course_name} course at "
        f"{institute_name()}. Pending amount: {amount}. "
        "Please complete your payment at your earliest convenience. Thank you!"
    )
