from __future__ import annotations

from datetime import timedelta

import pytest

from camp_checkin.core.enums import PaymentStatus
from camp_checkin.core.exceptions import AttendeeNotFoundError, AuthorizationError, ValidationError
from camp_checkin.payments.service import CashierService
from conftest import ANA_ID, LUIS_ID


def test_complete_payment_marks_paid_and_logs(attendees_repo, cash_log_repo, admin, fixed_now):
    svc = CashierService(attendees_repo, cash_log_repo)

    updated = svc.complete_payment(admin, ANA_ID, now=fixed_now)

    assert updated.payment_status is PaymentStatus.PAID
    assert updated.payment_amount == 900
    entry = cash_log_repo.entries[0]
    assert (entry.previous_amount, entry.new_amount) == (0, 900)
    assert entry.reason == "Pago completo"
    assert entry.name == "Ana García"
    assert entry.modified_by == "admin@camp.test"


def test_complete_payment_twice_rejected(attendees_repo, cash_log_repo, admin, fixed_now):
    svc = CashierService(attendees_repo, cash_log_repo)
    svc.complete_payment(admin, ANA_ID, now=fixed_now)

    with pytest.raises(ValidationError):
        svc.complete_payment(admin, ANA_ID, now=fixed_now)


def test_partial_payments_until_paid(attendees_repo, cash_log_repo, admin, fixed_now):
    svc = CashierService(attendees_repo, cash_log_repo)

    first = svc.record_payment(admin, ANA_ID, 400, now=fixed_now)
    second = svc.record_payment(admin, ANA_ID, "500", now=fixed_now + timedelta(minutes=1))

    assert first.payment_status is PaymentStatus.PENDING
    assert first.payment_amount == 400
    assert second.payment_status is PaymentStatus.PAID
    assert second.payment_amount == 900
    assert [e.reason for e in cash_log_repo.entries] == ["Abono", "Abono"]


@pytest.mark.parametrize("amount", [0, -50, "abc", None, 901])
def test_invalid_partial_payments(attendees_repo, cash_log_repo, admin, fixed_now, amount):
    with pytest.raises(ValidationError):
        CashierService(attendees_repo, cash_log_repo).record_payment(admin, ANA_ID, amount, now=fixed_now)
    assert cash_log_repo.entries == []


def test_zero_expected_amount_falls_back_to_default_fee(attendees_repo, cash_log_repo, admin, fixed_now):
    attendees_repo.update(LUIS_ID, {"expected_amount": 0.0})

    updated = CashierService(attendees_repo, cash_log_repo, default_fee=750).complete_payment(admin, LUIS_ID, now=fixed_now)

    assert updated.payment_amount == 750


def test_history_newest_first(attendees_repo, cash_log_repo, admin, fixed_now):
    svc = CashierService(attendees_repo, cash_log_repo)
    svc.record_payment(admin, ANA_ID, 100, now=fixed_now)
    svc.complete_payment(admin, LUIS_ID, now=fixed_now + timedelta(minutes=5))

    history = svc.recent_history(admin, limit=15)

    assert [e.attendee_id for e in history] == [LUIS_ID, ANA_ID]
    assert len(svc.recent_history(admin, limit=1)) == 1


def test_cashier_is_admin_only(attendees_repo, cash_log_repo, editor, fixed_now):
    with pytest.raises(AuthorizationError):
        CashierService(attendees_repo, cash_log_repo).complete_payment(editor, ANA_ID, now=fixed_now)


def test_unknown_attendee(attendees_repo, cash_log_repo, admin, fixed_now):
    with pytest.raises(AttendeeNotFoundError):
        CashierService(attendees_repo, cash_log_repo).record_payment(admin, "nope", 10, now=fixed_now)
