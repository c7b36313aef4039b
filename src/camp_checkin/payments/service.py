from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from ..attendees.model import Attendee
from ..attendees.repository import AttendeeRepository
from ..core.constants import DEFAULT_FEE, DEFAULT_HISTORY_LIMIT
from ..core.enums import PaymentStatus, UserRole
from ..core.exceptions import AttendeeNotFoundError, ValidationError
from ..users.model import Session
from ..users.service import require_role
from .model import CashLogEntry
from .repository import CashLogRepository

logger = logging.getLogger(__name__)

REASON_FULL_PAYMENT = "Pago completo"
REASON_PARTIAL_PAYMENT = "Abono"


class CashierService:
    """Use case: the cashier desk ("caja") settles payments and keeps a log."""

    def __init__(self, attendees: AttendeeRepository, cash_log: CashLogRepository, *, default_fee: float = DEFAULT_FEE):
        self._attendees = attendees
        self._cash_log = cash_log
        self._default_fee = float(default_fee)

    def complete_payment(self, session: Session, attendee_id: str, *, now: datetime | None = None) -> Attendee:
        require_role(session, UserRole.ADMIN)
        attendee = self._get(attendee_id)
        if attendee.payment_status == PaymentStatus.PAID:
            raise ValidationError("El pago ya está completo")

        total = self._expected(attendee)
        return self._apply(session, attendee, total, PaymentStatus.PAID, REASON_FULL_PAYMENT, now)

    def record_payment(self, session: Session, attendee_id: str, amount, *, now: datetime | None = None) -> Attendee:
        require_role(session, UserRole.ADMIN)
        try:
            amount = float(amount)
        except (TypeError, ValueError):
            raise ValidationError("El monto debe ser numérico")
        if amount <= 0:
            raise ValidationError("El monto debe ser mayor que cero")

        attendee = self._get(attendee_id)
        expected = self._expected(attendee)
        total = attendee.payment_amount + amount
        if total > expected:
            raise ValidationError(f"El abono excede el monto esperado ({expected:.2f})")

        status = PaymentStatus.PAID if total >= expected else PaymentStatus.PENDING
        return self._apply(session, attendee, total, status, REASON_PARTIAL_PAYMENT, now)

    def recent_history(self, session: Session, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[CashLogEntry]:
        require_role(session, UserRole.ADMIN)
        return self._cash_log.recent(limit)

    def _get(self, attendee_id: str) -> Attendee:
        attendee = self._attendees.get_by_id(attendee_id)
        if not attendee:
            raise AttendeeNotFoundError(attendee_id)
        return attendee

    def _expected(self, attendee: Attendee) -> float:
        return attendee.expected_amount or self._default_fee

    def _apply(
        self,
        session: Session,
        attendee: Attendee,
        total: float,
        status: PaymentStatus,
        reason: str,
        now: datetime | None,
    ) -> Attendee:
        now = now or datetime.now()
        if not self._attendees.apply_payment(attendee.attendee_id, payment_amount=total, payment_status=status):
            raise AttendeeNotFoundError(attendee.attendee_id)

        self._cash_log.add(
            CashLogEntry(
                attendee_id=attendee.attendee_id,
                name=attendee.display_name,
                previous_amount=attendee.payment_amount,
                new_amount=total,
                reason=reason,
                modified_by=session.email,
                logged_at=now,
            )
        )
        logger.info(
            "Payment %s for %s: %.2f -> %.2f by %s",
            reason,
            attendee.attendee_id,
            attendee.payment_amount,
            total,
            session.email,
        )
        return self._attendees.get_by_id(attendee.attendee_id) or attendee
