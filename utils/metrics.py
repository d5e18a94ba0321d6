from __future__ import annotations

from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Mapping, Optional

from sqlalchemy import func

from extensions import db
from models import Enrollment, Inquiry, Payment
from utils.fees import compute_balance, is_overdue, to_decimal


def round_half_up(value: Any) -> int:
    return int(to_decimal(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _ratio_percent(part: Any, total: Any) -> int:
    denominator = max(to_decimal(total), Decimal("1"))
    return round_half_up(to_decimal(part) / denominator * 100)


def conversion_rate(enrolled_students: Any, total_inquiries: Any) -> int:
    return _ratio_percent(enrolled_students, total_inquiries)


def pending_inquiries_rate(pending_inquiries: Any, total_inquiries: Any) -> int:
    return _ratio_percent(pending_inquiries, total_inquiries)


def derive_metrics(counts: Optional[Mapping[str, Any]]) -> Dict[str, int]:
    """Dashboard KPIs from raw counts. Missing counts are treated as zero."""
    counts = counts or {}
    total = counts.get("totalInquiries") or 0
    monthly_revenue = to_decimal(counts.get("monthlyRevenue"))
    return {
        "conversionRate": conversion_rate(counts.get("enrolledStudents") or 0, total),
        "pendingInquiriesRate": pending_inquiries_rate(counts.get("pendingInquiries") or 0, total),
        "averageMonthlyRevenueThousands": round_half_up(monthly_revenue / 1000),
        "dailyRevenueTarget": round_half_up(monthly_revenue / 30),
    }


def _month_bounds(today: date) -> tuple[date, date]:
    first = today.replace(day=1)
    if first.month == 12:
        nxt = first.replace(year=first.year + 1, month=1)
    else:
        nxt = first.replace(month=first.month + 1)
    return first, nxt


def collect_stats(today: Optional[date] = None) -> Dict[str, Any]:
    """Aggregate dashboard counts straight from the database."""
    today = today or date.today()
    total_inquiries = db.session.query(func.count(Inquiry.id)).scalar() or 0
    pending_inquiries = (
        db.session.query(func.count(Inquiry.id)).filter(Inquiry.status == "pending").scalar() or 0
    )
    enrolled_students = db.session.query(func.count(Enrollment.id)).scalar() or 0
    total_collected = to_decimal(db.session.query(func.coalesce(func.sum(Payment.amount), 0)).scalar())

    month_start, next_month = _month_bounds(today)
    monthly_revenue = to_decimal(
        db.session.query(func.coalesce(func.sum(Payment.amount), 0))
        .filter(Payment.payment_date >= month_start, Payment.payment_date < next_month)
        .scalar()
    )

    pending_fees = Decimal("0")
    overdue = 0
    for enrollment in Enrollment.query.all():
        balance = compute_balance(enrollment)
        if balance > 0:
            pending_fees += balance
            if is_overdue(enrollment, today):
                overdue += 1

    return {
        "totalInquiries": int(total_inquiries),
        "enrolledStudents": int(enrolled_students),
        "pendingInquiries": int(pending_inquiries),
        "totalRevenue": total_collected,
        "totalCollected": total_collected,
        "pendingFees": pending_fees,
        "pendingPayments": pending_fees,
        "overduePayments": overdue,
        "monthlyRevenue": monthly_revenue,
    }
