from __future__ import annotations

import calendar
from collections import defaultdict
from datetime import date, timedelta
from typing import Sequence

from ..attendees.model import Attendee
from ..attendees.repository import AttendeeRepository
from ..core.enums import PaymentStatus, UserRole
from ..core.exceptions import ValidationError
from ..users.model import Session
from ..users.service import require_role

PERIODS = ("week", "month", "year")


def period_start(period: str, today: date) -> date:
    """First day covered by a week/month/year report ending today."""
    if period == "week":
        return today - timedelta(days=7)
    if period == "month":
        year, month = (today.year, today.month - 1) if today.month > 1 else (today.year - 1, 12)
        day = min(today.day, calendar.monthrange(year, month)[1])
        return date(year, month, day)
    if period == "year":
        day = min(today.day, calendar.monthrange(today.year - 1, today.month)[1])
        return date(today.year - 1, today.month, day)
    raise ValidationError(f"Periodo inválido: {period}")


def _counted(values: dict[str, int]) -> list[dict]:
    rows = [{"name": name, "count": count} for name, count in values.items()]
    rows.sort(key=lambda x: (-x["count"], x["name"]))
    return rows


class ReportService:
    """Dashboard figures and exports. Test records never count."""

    def __init__(self, attendees: AttendeeRepository):
        self._attendees = attendees

    def _rows(self, session: Session) -> Sequence[Attendee]:
        require_role(session, UserRole.ADMIN)
        return self._attendees.list_all(include_tests=False)

    def summary(self, session: Session) -> dict:
        rows = self._rows(session)
        paid = sum(1 for a in rows if a.payment_status == PaymentStatus.PAID)
        return {
            "total_registered": len(rows),
            "confirmed_attendance": sum(1 for a in rows if a.attendance_confirmed),
            "total_collected": round(sum(a.payment_amount for a in rows), 2),
            "churches": len({a.church for a in rows if a.church}),
            "paid": paid,
            "pending": len(rows) - paid,
        }

    def by_church(self, session: Session) -> list[dict]:
        counts: dict[str, int] = defaultdict(int)
        for a in self._rows(session):
            counts[a.church or "Sin iglesia"] += 1
        return _counted(counts)

    def by_sector(self, session: Session) -> list[dict]:
        counts: dict[str, int] = defaultdict(int)
        for a in self._rows(session):
            counts[a.sector or "Sin sector"] += 1
        return _counted(counts)

    def camper_list(self, session: Session) -> list[dict]:
        rows = sorted(
            self._rows(session),
            key=lambda a: (a.attendance_number is None, a.attendance_number or 0, a.display_name.lower()),
        )
        return [
            {"number": a.attendance_number, "name": a.display_name, "role": a.notes or "-"}
            for a in rows
        ]

    def payments_by_date(self, session: Session, period: str = "week", *, today: date | None = None) -> list[dict]:
        today = today or date.today()
        start = period_start(period, today)

        grouped: dict[date, dict] = {}
        for a in self._rows(session):
            if a.payment_status != PaymentStatus.PAID:
                continue
            day = a.registration_date.date()
            if day < start:
                continue
            g = grouped.setdefault(day, {"amount": 0.0, "count": 0})
            g["amount"] += a.payment_amount
            g["count"] += 1

        return [
            {"date": day.strftime("%d/%m"), "amount": round(g["amount"], 2), "count": g["count"]}
            for day, g in sorted(grouped.items())
        ]

    def payments_by_sector(self, session: Session) -> list[dict]:
        grouped: dict[str, dict] = {}
        for a in self._rows(session):
            g = grouped.setdefault(a.sector or "Sin sector", {"count": 0, "amount": 0.0})
            g["count"] += 1
            if a.payment_status == PaymentStatus.PAID:
                g["amount"] += a.payment_amount

        out = [{"name": name, "count": g["count"], "amount": round(g["amount"], 2)} for name, g in grouped.items()]
        out.sort(key=lambda x: (-x["count"], x["name"]))
        return out

    def payment_status(self, session: Session) -> list[dict]:
        rows = self._rows(session)
        paid = sum(1 for a in rows if a.payment_status == PaymentStatus.PAID)
        # Reviewed is a legacy label and still counts as pending
        return [
            {"name": PaymentStatus.PAID.value, "count": paid},
            {"name": PaymentStatus.PENDING.value, "count": len(rows) - paid},
        ]
