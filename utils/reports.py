"""CSV and printable-HTML exports of enrollment and payment data.

Both generators accept enrollments either as ORM objects (with ``course``
and ``payments`` relationships loaded) or as the nested dicts served by
``/api/enrollments``. A ``None`` list means the data is not loaded yet and
the generators return ``None`` instead of raising.
"""
from __future__ import annotations

import csv
from datetime import date
from decimal import Decimal
from io import StringIO
from typing import Any, Dict, Iterable, List, Optional

from jinja2 import Environment, select_autoescape

from utils.fees import compute_balance, compute_paid_amount, enrollment_payments, pluck, to_decimal

ALL_COURSES = "all"
REPORT_TYPES = ("enrollment", "payments")
DEFAULT_CURRENCY = "₹"

ENROLLMENT_COLUMNS = [
    "Student Name",
    "Course",
    "Contact",
    "Father Name",
    "Father Contact",
    "Email",
    "Address",
    "Start Date",
    "End Date",
    "Fee Plan",
    "Total Fee",
    "Paid Amount",
    "Balance",
]
PAYMENT_COLUMNS = ["Student Name", "Course", "Payment Date", "Amount", "Payment Mode", "Transaction ID"]


def _check_type(report_type: str) -> None:
    if report_type not in REPORT_TYPES:
        raise ValueError(f"Unknown report type: {report_type!r}")


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _amount(value: Any) -> str:
    return f"{to_decimal(value):.2f}"


def _course_name(enrollment: Any) -> str:
    return _text(pluck(pluck(enrollment, "course", "course"), "name", "name", ""))


def filter_enrollments(enrollments: Iterable[Any], course_id: Optional[str] = ALL_COURSES) -> List[Any]:
    if not course_id or course_id == ALL_COURSES:
        return list(enrollments)
    return [e for e in enrollments if pluck(e, "course_id", "courseId") == course_id]


def format_money(value: Any, symbol: str = DEFAULT_CURRENCY) -> str:
    amount = to_decimal(value)
    if amount == amount.to_integral_value():
        return f"{symbol}{int(amount):,}"
    return f"{symbol}{amount:,.2f}"


def summarize(enrollments: Iterable[Any]) -> Dict[str, Any]:
    rows = list(enrollments)
    revenue = Decimal("0")
    pending = Decimal("0")
    for e in rows:
        revenue += compute_paid_amount(enrollment_payments(e))
        pending += compute_balance(e)
    return {"totalStudents": len(rows), "totalRevenue": revenue, "pendingFees": pending}


def _enrollment_row(e: Any) -> List[str]:
    return [
        _text(pluck(e, "student_name", "studentName")),
        _course_name(e),
        _text(pluck(e, "contact_no", "contactNo")),
        _text(pluck(e, "father_name", "fatherName")),
        _text(pluck(e, "father_contact_no", "fatherContactNo")),
        _text(pluck(e, "student_email", "studentEmail")),
        _text(pluck(e, "student_address", "studentAddress")),
        _text(pluck(e, "start_date", "startDate")),
        _text(pluck(e, "end_date", "endDate")),
        _text(pluck(e, "fee_plan", "feePlan")),
        _amount(pluck(e, "total_fee", "totalFee")),
        _amount(compute_paid_amount(enrollment_payments(e))),
        _amount(compute_balance(e)),
    ]


def _payment_rows(enrollments: Iterable[Any]) -> List[List[str]]:
    rows = []
    for e in enrollments:
        for p in enrollment_payments(e):
            rows.append(
                [
                    _text(pluck(e, "student_name", "studentName")),
                    _course_name(e),
                    _text(pluck(p, "payment_date", "paymentDate")),
                    _amount(pluck(p, "amount", "amount")),
                    _text(pluck(p, "payment_mode", "paymentMode")),
                    _text(pluck(p, "transaction_id", "transactionId")) or "N/A",
                ]
            )
    return rows


def generate_csv(
    enrollments: Optional[Iterable[Any]],
    report_type: str = "enrollment",
    course_id: Optional[str] = ALL_COURSES,
) -> Optional[str]:
    _check_type(report_type)
    if enrollments is None:
        return None
    retained = filter_enrollments(enrollments, course_id)

    out = StringIO()
    writer = csv.writer(out, lineterminator="\n")
    if report_type == "enrollment":
        writer.writerow(ENROLLMENT_COLUMNS)
        writer.writerows(_enrollment_row(e) for e in retained)
    else:
        writer.writerow(PAYMENT_COLUMNS)
        writer.writerows(_payment_rows(retained))
    return out.getvalue()


_env = Environment(autoescape=select_autoescape(default=True, default_for_string=True))
_env.filters["money"] = format_money

REPORT_TEMPLATE = _env.from_string(
    """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <title>{{ title }}</title>
    <style>
      body { font-family: Arial, sans-serif; margin: 20px; }
      .header { text-align: center; margin-bottom: 30px; }
      .header h1 { color: #2563eb; margin: 0; }
      .header p { color: #6b7280; margin: 5px 0; }
      table { width: 100%; border-collapse: collapse; margin-top: 20px; }
      th, td { border: 1px solid #d1d5db; padding: 8px; text-align: left; font-size: 12px; }
      th { background-color: #f3f4f6; font-weight: bold; }
      .summary { display: flex; justify-content: space-around; margin: 20px 0; }
      .summary-card { text-align: center; padding: 15px; border: 1px solid #d1d5db; border-radius: 8px; }
      .summary-card h3 { margin: 0; color: #2563eb; }
      .summary-card p { margin: 5px 0; color: #6b7280; }
      @media print { .summary-card { break-inside: avoid; } }
    </style>
  </head>
  <body>
    <div class="header">
      <h1>{{ institute }}</h1>
      <p>{{ title }}</p>
      <p>Generated on: {{ generated_on }}</p>
    </div>
{%- if summary %}
    <div class="summary">
      <div class="summary-card"><h3>{{ summary.totalStudents }}</h3><p>Total Students</p></div>
      <div class="summary-card"><h3>{{ summary.totalRevenue | money(symbol) }}</h3><p>Total Revenue</p></div>
      <div class="summary-card"><h3>{{ summary.pendingFees | money(symbol) }}</h3><p>Pending Fees</p></div>
    </div>
{%- endif %}
    <table>
      <thead>
        <tr>{% for column in columns %}<th>{{ column }}</th>{% endfor %}</tr>
      </thead>
      <tbody>
{%- for row in rows %}
        <tr>{% for cell in row %}<td>{{ cell }}</td>{% endfor %}</tr>
{%- endfor %}
      </tbody>
    </table>
  </body>
</html>
"""
)


def generate_html(
    enrollments: Optional[Iterable[Any]],
    report_type: str = "enrollment",
    course_id: Optional[str] = ALL_COURSES,
    include_stats: bool = True,
    generated_on: Optional[date] = None,
    institute: str = "Student Management System",
    symbol: str = DEFAULT_CURRENCY,
) -> Optional[str]:
    _check_type(report_type)
    if enrollments is None:
        return None
    retained = filter_enrollments(enrollments, course_id)
    generated_on = generated_on or date.today()

    if report_type == "enrollment":
        title = "Enrollment Report"
        columns = [
            "Student Name", "Course", "Contact", "Father Name", "Email",
            "Start Date", "Fee Plan", "Total Fee", "Paid Amount", "Balance",
        ]
        rows = []
        for e in retained:
            rows.append(
                [
                    _text(pluck(e, "student_name", "studentName")),
                    _course_name(e),
                    _text(pluck(e, "contact_no", "contactNo")),
                    _text(pluck(e, "father_name", "fatherName")),
                    _text(pluck(e, "student_email", "studentEmail")),
                    _text(pluck(e, "start_date", "startDate")),
                    _text(pluck(e, "fee_plan", "feePlan")),
                    format_money(pluck(e, "total_fee", "totalFee"), symbol),
                    format_money(compute_paid_amount(enrollment_payments(e)), symbol),
                    format_money(compute_balance(e), symbol),
                ]
            )
        summary = summarize(retained) if include_stats else None
    else:
        title = "Payment Report"
        columns = PAYMENT_COLUMNS
        rows = []
        for row in _payment_rows(retained):
            row[3] = format_money(row[3], symbol)
            rows.append(row)
        summary = None

    return REPORT_TEMPLATE.render(
        title=title,
        institute=institute,
        generated_on=generated_on.isoformat(),
        summary=summary,
        columns=columns,
        rows=rows,
        symbol=symbol,
    )


def report_filename(report_type: str, ext: str, on: Optional[date] = None) -> str:
    _check_type(report_type)
    on = on or date.today()
    return f"{report_type}_report_{on.isoformat()}.{ext}"
