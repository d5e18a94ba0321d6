from __future__ import annotations

import calendar
from collections.abc import Mapping
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation, ROUND_CEILING
from typing import Any, Iterable, List, Optional

DEFAULT_INSTALLMENTS = 3
OVERDUE_AFTER_DAYS = 30


def pluck(record: Any, attr: str, key: str, default: Any = None) -> Any:
    """Read a field from a model object (``attr``) or an API-shaped dict (``key``)."""
    if record is None:
        return default
    if isinstance(record, Mapping):
        value = record.get(key, default)
    else:
        value = getattr(record, attr, default)
    return default if value is None else value


def to_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Not a numeric amount: {value!r}") from exc


def to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    raise ValueError(f"Not a calendar date: {value!r}")


def calculate_end_date(start_date: Any, duration_months: int) -> date:
    """Advance ``start_date`` by whole calendar months.

    Dates are calendar values, never instants. The month index rolls over
    into following years (October + 6 -> April next year). When the target
    month is shorter than the start day the day is clamped to the month's
    last day, so 31 January + 1 month is 28/29 February.
    """
    start = to_date(start_date)
    months = int(duration_months)
    if months < 0:
        raise ValueError("duration_months must not be negative")
    index = start.month - 1 + months
    year = start.year + index // 12
    month = index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def calculate_installment_amount(total_fee: Any, installments: int = DEFAULT_INSTALLMENTS) -> Decimal:
    """Per-installment amount, rounded up to a whole currency unit.

    ``installments * result >= total_fee`` and the overshoot is below
    ``installments`` units.
    """
    total = to_decimal(total_fee)
    if total < 0:
        raise ValueError("total_fee must not be negative")
    if installments < 1:
        raise ValueError("installments must be at least 1")
    return (total / installments).to_integral_value(rounding=ROUND_CEILING)


def installment_schedule(
    total_fee: Any,
    start_date: Any,
    installments: int = DEFAULT_INSTALLMENTS,
) -> List[dict]:
    """Split ``total_fee`` into monthly installments starting at ``start_date``.

    Every installment but the last is the rounded-up amount; the last one
    takes whatever remains, so the schedule always sums to the total.
    """
    total = to_decimal(total_fee)
    per = calculate_installment_amount(total, installments)
    remaining = total
    schedule = []
    for number in range(1, installments + 1):
        amount = remaining if number == installments else min(per, remaining)
        remaining -= amount
        schedule.append(
            {
                "number": number,
                "amount": amount,
                "dueDate": calculate_end_date(start_date, number - 1),
            }
        )
    return schedule


def compute_paid_amount(payments: Optional[Iterable[Any]]) -> Decimal:
    if not payments:
        return Decimal("0")
    total = Decimal("0")
    for payment in payments:
        total += to_decimal(pluck(payment, "amount", "amount"))
    return total


def enrollment_payments(enrollment: Any) -> list:
    return list(pluck(enrollment, "payments", "payments", []) or [])


def compute_balance(enrollment: Any) -> Decimal:
    """``total_fee - paid``. Overpayment yields a negative balance."""
    total_fee = to_decimal(pluck(enrollment, "total_fee", "totalFee"))
    return total_fee - compute_paid_amount(enrollment_payments(enrollment))


def resolve_total_fee(course: Any, fee_plan: str) -> Decimal:
    if fee_plan == "full":
        return to_decimal(pluck(course, "full_fee", "fullFee"))
    if fee_plan == "installments":
        return to_decimal(pluck(course, "installment_fee", "installmentFee"))
    raise ValueError(f"Unknown fee plan: {fee_plan!r}")


def is_overdue(enrollment: Any, today: Optional[date] = None) -> bool:
    """Nothing paid yet, a balance is due and the first-payment grace period has passed."""
    today = today or date.today()
    paid = compute_paid_amount(enrollment_payments(enrollment))
    if paid != 0 or compute_balance(enrollment) <= 0:
        return False
    start = to_date(pluck(enrollment, "start_date", "startDate"))
    return today > start + timedelta(days=OVERDUE_AFTER_DAYS)
