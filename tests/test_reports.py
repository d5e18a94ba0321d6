import csv
from datetime import date
from io import StringIO

import pytest

from utils.reports import (
    ENROLLMENT_COLUMNS,
    PAYMENT_COLUMNS,
    filter_enrollments,
    format_money,
    generate_csv,
    generate_html,
    report_filename,
    summarize,
)


def _enrollment(name, course_id, total_fee, payments=(), **extra):
    data = {
        "studentName": name,
        "courseId": course_id,
        "course": {"name": "Course " + course_id},
        "contactNo": "9876543210",
        "fatherName": "Father of " + name,
        "fatherContactNo": "9876500000",
        "studentEmail": name.lower().replace(" ", ".") + "@example.com",
        "studentAddress": "12 Main Road",
        "startDate": "2025-01-15",
        "endDate": "2025-07-15",
        "feePlan": "full",
        "totalFee": total_fee,
        "payments": list(payments),
    }
    data.update(extra)
    return data


@pytest.fixture
def enrollments():
    return [
        _enrollment("Asha Rao", "c1", "50000.00", [
            {"amount": "50000.00", "paymentDate": "2025-01-20", "paymentMode": "upi", "transactionId": "UPI123"},
        ]),
        _enrollment("Ravi Kumar", "c1", "50000.00", [
            {"amount": "25000.00", "paymentDate": "2025-02-01", "paymentMode": "cash", "transactionId": None},
        ]),
        _enrollment("Meena Iyer", "c2", "75000.00", [
            {"amount": "25000.00", "paymentDate": "2025-02-05", "paymentMode": "card"},
        ]),
    ]


def test_csv_with_no_rows_is_header_only():
    out = generate_csv([], "enrollment")
    assert out == ",".join(ENROLLMENT_COLUMNS) + "\n"
    assert generate_csv([], "payments") == ",".join(PAYMENT_COLUMNS) + "\n"


def test_generators_return_none_until_data_is_loaded():
    assert generate_csv(None) is None
    assert generate_html(None) is None


def test_unknown_report_type():
    with pytest.raises(ValueError):
        generate_csv([], "students")


def test_csv_quotes_embedded_commas_and_quotes():
    rows = [_enrollment("Asha Rao", "c1", "1000", studentAddress='Flat 4, "Green" Villa')]
    out = generate_csv(rows)
    assert '"Flat 4, ""Green"" Villa"' in out
    parsed = list(csv.reader(StringIO(out)))
    assert parsed[1][ENROLLMENT_COLUMNS.index("Address")] == 'Flat 4, "Green" Villa'


def test_csv_enrollment_row_amounts(enrollments):
    parsed = list(csv.reader(StringIO(generate_csv(enrollments))))
    assert len(parsed) == 4
    ravi = parsed[2]
    assert ravi[0] == "Ravi Kumar"
    assert ravi[1] == "Course c1"
    assert ravi[-3:] == ["50000.00", "25000.00", "25000.00"]


def test_csv_payment_rows_fill_missing_transaction(enrollments):
    parsed = list(csv.reader(StringIO(generate_csv(enrollments, "payments"))))
    assert parsed[0] == PAYMENT_COLUMNS
    assert parsed[1] == ["Asha Rao", "Course c1", "2025-01-20", "50000.00", "upi", "UPI123"]
    assert parsed[2][-1] == "N/A"
    assert parsed[3][-1] == "N/A"


def test_course_filter(enrollments):
    assert len(filter_enrollments(enrollments, "all")) == 3
    assert len(filter_enrollments(enrollments, None)) == 3
    assert [e["studentName"] for e in filter_enrollments(enrollments, "c2")] == ["Meena Iyer"]
    parsed = list(csv.reader(StringIO(generate_csv(enrollments, "enrollment", "c2"))))
    assert len(parsed) == 2


def test_summary(enrollments):
    summary = summarize(enrollments)
    assert summary["totalStudents"] == 3
    assert summary["totalRevenue"] == 100000
    assert summary["pendingFees"] == 75000


def test_html_summary_cards(enrollments):
    html = generate_html(enrollments, generated_on=date(2025, 3, 1), institute="Acme Institute")
    assert "Acme Institute" in html
    assert "Enrollment Report" in html
    assert "Generated on: 2025-03-01" in html
    assert "<h3>3</h3>" in html
    assert "₹100,000" in html
    assert "₹75,000" in html


def test_html_without_stats_or_for_payments(enrollments):
    assert "summary-card\">" not in generate_html(enrollments, include_stats=False)
    payments_html = generate_html(enrollments, "payments")
    assert "Payment Report" in payments_html
    assert "summary-card\">" not in payments_html
    assert "₹50,000" in payments_html


def test_html_escapes_student_data():
    rows = [_enrollment("<script>x</script>", "c1", "10")]
    html = generate_html(rows)
    assert "<script>x</script>" not in html
    assert "&lt;script&gt;" in html


def test_format_money():
    assert format_money("100000.00") == "₹100,000"
    assert format_money("1234.5") == "₹1,234.50"
    assert format_money(0, "$") == "$0"


def test_report_filename():
    assert report_filename("enrollment", "csv", date(2025, 3, 1)) == "enrollment_report_2025-03-01.csv"
    assert report_filename("payments", "html", date(2025, 3, 1)) == "payments_report_2025-03-01.html"
