from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from ..attendees.model import Attendee
from ..attendees.repository import AttendeeRepository
from ..core.enums import PaymentStatus, ReconfirmPolicy, UserRole
from ..core.exceptions import AttendeeNotFoundError, QRPayloadError
from ..users.model import Session
from ..users.service import require_role
from .numbering import AttendanceNumberAllocator
from .qr_payload import extract_attendee_id, normalize_lookup_id
from .rate_limit import ScanRateLimiter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    attendee: Attendee
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"success": True, "attendee": self.attendee.to_dict(), "warnings": list(self.warnings)}


@dataclass(frozen=True)
class ConfirmationResult:
    attendee_id: str
    attendance_number: int
    display_name: str
    confirmed_at: datetime
    reused: bool = False
    success: bool = True

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "attendee_id": self.attendee_id,
            "attendance_number": self.attendance_number,
            "display_name": self.display_name,
            "confirmed_at": self.confirmed_at.isoformat(),
            "reused": self.reused,
        }


def _scan_warnings(attendee: Attendee) -> list[str]:
    warnings = []
    if not attendee.first_name or not attendee.last_name:
        warnings.append("Nombre incompleto")
    if not attendee.email:
        warnings.append("Sin correo electrónico")
    if attendee.payment_status != PaymentStatus.PAID:
        warnings.append("Pago pendiente")
    if attendee.attendance_confirmed and attendee.attendance_number is not None:
        warnings.append(f"Asistencia ya confirmada con el número {attendee.attendance_number}")
    return warnings


class CheckinService:
    """Use case: scan a ticket at the door and confirm arrival with a number."""

    def __init__(
        self,
        attendees: AttendeeRepository,
        allocator: AttendanceNumberAllocator,
        *,
        reconfirm_policy: ReconfirmPolicy = ReconfirmPolicy.RENUMBER,
        rate_limiter: ScanRateLimiter | None = None,
    ):
        self._attendees = attendees
        self._allocator = allocator
        self._reconfirm_policy = ReconfirmPolicy(reconfirm_policy)
        self._rate_limiter = rate_limiter or ScanRateLimiter(0)

    def scan(self, session: Session, raw_text: str | None, *, station_id: str, now: datetime | None = None) -> ScanResult:
        require_role(session, UserRole.EDITOR)
        now = now or datetime.now()
        self._rate_limiter.check(station_id, now)

        extracted = extract_attendee_id(raw_text)
        if not extracted:
            raise QRPayloadError("No se pudo leer un identificador en el código QR")

        attendee_id = normalize_lookup_id(extracted)
        attendee = self._attendees.get_by_id(attendee_id)
        if not attendee:
            logger.info("Scan at %s matched no attendee for %r", station_id, attendee_id)
            raise AttendeeNotFoundError(attendee_id)

        return ScanResult(attendee=attendee, warnings=_scan_warnings(attendee))

    def confirm_attendance(self, session: Session, attendee_id: str, *, now: datetime | None = None) -> ConfirmationResult:
        require_role(session, UserRole.EDITOR)
        now = now or datetime.now()

        attendee = self._attendees.get_by_id(attendee_id)
        if not attendee:
            raise AttendeeNotFoundError(attendee_id)

        if (
            self._reconfirm_policy == ReconfirmPolicy.KEEP_EXISTING
            and attendee.attendance_confirmed
            and attendee.attendance_number is not None
        ):
            return ConfirmationResult(
                attendee_id=attendee.attendee_id,
                attendance_number=attendee.attendance_number,
                display_name=attendee.display_name,
                confirmed_at=attendee.attendance_confirmed_at or now,
                reused=True,
            )

        number = self._allocator.assign(attendee.attendee_id, confirmed_at=now)
        logger.info("Attendance confirmed: %s -> #%d by %s", attendee.attendee_id, number, session.email)
        return ConfirmationResult(
            attendee_id=attendee.attendee_id,
            attendance_number=number,
            display_name=attendee.display_name,
            confirmed_at=now,
        )

    def confirm_scan(
        self, session: Session, raw_text: str | None, *, station_id: str, now: datetime | None = None
    ) -> ConfirmationResult:
        now = now or datetime.now()
        scanned = self.scan(session, raw_text, station_id=station_id, now=now)
        return self.confirm_attendance(session, scanned.attendee.attendee_id, now=now)
