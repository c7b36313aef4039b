from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from ..common.validators import require_email, require_non_empty, require_non_negative
from ..core.enums import PaymentStatus, UserRole
from ..core.exceptions import AttendeeNotFoundError, ValidationError
from ..users.model import Session
from ..users.service import require_role
from .model import EDITABLE_FIELDS, Attendee, normalize_attendee_payload
from .repository import AttendeeRepository

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("first_name", "last_name", "church", "sector")
_BOOL_FIELDS = ("attendance_confirmed", "is_test")
_TRUE_VALUES = {"1", "true", "yes", "si", "sí", "on"}


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_VALUES
    return bool(value)


def _as_datetime(value):
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(f"Fecha inválida: {value}")


class AttendeeAdminService:
    """Use case: admin table (list, edit any field, delete)."""

    def __init__(self, attendees: AttendeeRepository, allocator=None):
        self._attendees = attendees
        self._allocator = allocator

    def list_attendees(self, session: Session, *, include_tests: bool = False) -> Sequence[Attendee]:
        require_role(session, UserRole.ADMIN)
        return self._attendees.list_all(include_tests=include_tests)

    def update_attendee(self, session: Session, attendee_id: str, changes: dict, *, now: datetime | None = None) -> Attendee:
        require_role(session, UserRole.ADMIN)
        now = now or datetime.now()

        current = self._attendees.get_by_id(attendee_id)
        if not current:
            raise AttendeeNotFoundError(attendee_id)

        clean = self._clean_changes(normalize_attendee_payload(changes))
        if not clean:
            raise ValidationError("No hay cambios para guardar")

        # Confirming from the table hands out the next number when the record has none
        needs_number = (
            clean.get("attendance_confirmed") is True
            and current.attendance_number is None
            and clean.get("attendance_number") is None
            and self._allocator is not None
        )
        if needs_number:
            clean.pop("attendance_confirmed")
            clean.pop("attendance_confirmed_at", None)

        # Number first: a failed allocation leaves the record untouched
        if needs_number:
            number = self._allocator.assign(attendee_id, confirmed_at=now)
            logger.info("Admin %s confirmed %s as #%d", session.email, attendee_id, number)
        if clean and not self._attendees.update(attendee_id, clean):
            raise AttendeeNotFoundError(attendee_id)

        logger.info("Attendee %s updated by %s: %s", attendee_id, session.email, sorted(changes))
        return self._attendees.get_by_id(attendee_id) or current

    def delete_attendee(self, session: Session, attendee_id: str) -> None:
        require_role(session, UserRole.ADMIN)
        if not self._attendees.delete(attendee_id):
            raise AttendeeNotFoundError(attendee_id)
        logger.info("Attendee %s deleted by %s", attendee_id, session.email)

    @staticmethod
    def _clean_changes(changes: dict) -> dict:
        unknown = sorted(k for k in changes if k not in EDITABLE_FIELDS and k != "attendee_id")
        if unknown:
            raise ValidationError(f"Campos no editables: {', '.join(unknown)}")

        clean: dict = {}
        for key, value in changes.items():
            if key == "attendee_id":
                continue
            if key in _TEXT_FIELDS:
                clean[key] = require_non_empty(str(value or ""), key)
            elif key == "email":
                clean[key] = require_email(str(value or "")) if value else ""
            elif key in ("expected_amount", "payment_amount"):
                clean[key] = require_non_negative(value, key)
            elif key == "payment_status":
                try:
                    clean[key] = PaymentStatus(value)
                except ValueError:
                    raise ValidationError(f"Estado de pago inválido: {value}")
            elif key == "attendance_number":
                if value in (None, ""):
                    clean[key] = None
                else:
                    number = require_non_negative(value, key)
                    if not float(number).is_integer() or number < 1:
                        raise ValidationError("El número de asistencia debe ser un entero mayor que cero")
                    clean[key] = int(number)
            elif key in _BOOL_FIELDS:
                clean[key] = _as_bool(value)
            elif key == "attendance_confirmed_at":
                clean[key] = _as_datetime(value)
            else:
                clean[key] = value if value != "" else None
        return clean
