from __future__ import annotations

from datetime import date, datetime

import pytest

from camp_checkin.core.enums import PaymentStatus
from camp_checkin.core.exceptions import AuthorizationError, ValidationError
from camp_checkin.reports.service import ReportService, period_start
from conftest import InMemoryAttendees, make_attendee


@pytest.fixture
def report_repo():
    return InMemoryAttendees(
        [
            make_attendee(
                "a",
                "Ana",
                "García",
                payment_status=PaymentStatus.PAID,
                payment_amount=900.0,
                attendance_number=2,
                attendance_confirmed=True,
                notes="campista",
                registration_date=datetime(2026, 3, 10, 9, 0),
            ),
            make_attendee(
                "b",
                "Luis",
                "Gómez",
                church="Iglesia Bethel",
                sector="Sur",
                payment_status=PaymentStatus.PAID,
                payment_amount=600.0,
                attendance_number=1,
                attendance_confirmed=True,
                notes="pastor",
                registration_date=datetime(2026, 3, 12, 18, 0),
            ),
            make_attendee(
                "c",
                "Eva",
                "Pérez",
                payment_status=PaymentStatus.REVIEWED,
                payment_amount=300.0,
                registration_date=datetime(2026, 3, 12, 8, 0),
            ),
            make_attendee(
                "d",
                "Old",
                "Payment",
                payment_status=PaymentStatus.PAID,
                payment_amount=900.0,
                registration_date=datetime(2026, 1, 2, 8, 0),
            ),
            make_attendee("t", "Prueba", "Sistema", is_test=True, payment_amount=900.0, payment_status=PaymentStatus.PAID),
        ]
    )


def test_summary_excludes_test_records(report_repo, admin):
    summary = ReportService(report_repo).summary(admin)

    assert summary == {
        "total_registered": 4,
        "confirmed_attendance": 2,
        "total_collected": 2700.0,
        "churches": 2,
        "paid": 3,
        "pending": 1,
    }


def test_by_church_sorted_by_count(report_repo, admin):
    assert ReportService(report_repo).by_church(admin) == [
        {"name": "Iglesia Central", "count": 3},
        {"name": "Iglesia Bethel", "count": 1},
    ]


def test_camper_list_orders_by_number_with_unnumbered_last(report_repo, admin):
    rows = ReportService(report_repo).camper_list(admin)

    assert [r["number"] for r in rows] == [1, 2, None, None]
    assert rows[0] == {"number": 1, "name": "Luis Gómez", "role": "pastor"}
    assert rows[2]["role"] == "-"


def test_payments_by_date_week_groups_by_day(report_repo, admin):
    rows = ReportService(report_repo).payments_by_date(admin, "week", today=date(2026, 3, 14))

    assert rows == [
        {"date": "10/03", "amount": 900.0, "count": 1},
        {"date": "12/03", "amount": 600.0, "count": 1},
    ]


def test_payments_by_date_year_includes_older(report_repo, admin):
    rows = ReportService(report_repo).payments_by_date(admin, "year", today=date(2026, 3, 14))

    assert [r["date"] for r in rows] == ["02/01", "10/03", "12/03"]


def test_period_start_clamps_month_end():
    assert period_start("month", date(2026, 3, 31)) == date(2026, 2, 28)
    assert period_start("month", date(2026, 1, 15)) == date(2025, 12, 15)
    assert period_start("year", date(2028, 2, 29)) == date(2027, 2, 28)
    with pytest.raises(ValidationError):
        period_start("decade", date(2026, 1, 1))


def test_payments_by_sector_counts_only_paid_amounts(report_repo, admin):
    assert ReportService(report_repo).payments_by_sector(admin) == [
        {"name": "Norte", "count": 3, "amount": 1800.0},
        {"name": "Sur", "count": 1, "amount": 600.0},
    ]


def test_reviewed_counts_as_pending(report_repo, admin):
    assert ReportService(report_repo).payment_status(admin) == [
        {"name": "Pagado", "count": 3},
        {"name": "Pendiente", "count": 1},
    ]


def test_reports_are_admin_only(report_repo, editor):
    with pytest.raises(AuthorizationError):
        ReportService(report_repo).summary(editor)
