from decimal import Decimal

from utils.metrics import conversion_rate, derive_metrics, pending_inquiries_rate, round_half_up


def test_rates_with_no_inquiries_are_zero():
    assert conversion_rate(0, 0) == 0
    assert pending_inquiries_rate(0, 0) == 0


def test_conversion_rate_rounds_half_up():
    assert conversion_rate(1, 8) == 13  # 12.5
    assert conversion_rate(1, 3) == 33
    assert conversion_rate(2, 3) == 67
    assert conversion_rate(5, 5) == 100


def test_round_half_up():
    assert round_half_up(Decimal("2.5")) == 3
    assert round_half_up(Decimal("3.5")) == 4
    assert round_half_up(Decimal("2.4999")) == 2
    assert round_half_up(0) == 0


def test_derive_metrics():
    metrics = derive_metrics(
        {
            "totalInquiries": 40,
            "enrolledStudents": 10,
            "pendingInquiries": 15,
            "monthlyRevenue": Decimal("45000"),
        }
    )
    assert metrics == {
        "conversionRate": 25,
        "pendingInquiriesRate": 38,  # 37.5
        "averageMonthlyRevenueThousands": 45,
        "dailyRevenueTarget": 1500,
    }


def test_derive_metrics_tolerates_missing_counts():
    assert derive_metrics(None) == {
        "conversionRate": 0,
        "pendingInquiriesRate": 0,
        "averageMonthlyRevenueThousands": 0,
        "dailyRevenueTarget": 0,
    }
