from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.validators import (
    require_email,
    require_length_between,
    require_non_empty,
    require_phone,
    require_ten_digit_phone,
)
from ..core.constants import DEFAULT_FEE, DEFAULT_TSHIRT_LIMIT, TSHIRT_SIZES, WALK_IN_FEES
from ..core.enums import UserRole
from ..core.exceptions import DuplicateRegistrationError, ValidationError
from ..users.model import Session
from ..users.service import require_role
from .model import Attendee, NewAttendee
from .repository import AttendeeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewRegistration:
    """Online form submission."""

    first_name: str
    last_name: str
    email: str
    phone: str
    church: str
    sector: str
    payment_receipt_url: str
    tshirt_size: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_payload(cls, data: dict) -> "NewRegistration":
        return cls(
            first_name=str(data.get("first_name") or ""),
            last_name=str(data.get("last_name") or ""),
            email=str(data.get("email") or ""),
            phone=str(data.get("phone") or ""),
            church=str(data.get("church") or ""),
            sector=str(data.get("sector") or ""),
            payment_receipt_url=str(data.get("payment_receipt_url") or ""),
            tshirt_size=data.get("tshirt_size") or None,
            notes=data.get("notes") or None,
        )


@dataclass(frozen=True)
class WalkInRegistration:
    """Registration taken by staff at the desk on arrival."""

    first_name: str
    last_name: str
    phone: str
    church: str
    sector: str
    category: str = "campista"
    email: str = ""
    notes: Optional[str] = None

    @classmethod
    def from_payload(cls, data: dict) -> "WalkInRegistration":
        return cls(
            first_name=str(data.get("first_name") or ""),
            last_name=str(data.get("last_name") or ""),
            phone=str(data.get("phone") or ""),
            church=str(data.get("church") or ""),
            sector=str(data.get("sector") or ""),
            category=str(data.get("category") or data.get("role") or "campista"),
            email=str(data.get("email") or ""),
            notes=data.get("notes") or None,
        )


@dataclass(frozen=True)
class RegistrationResult:
    attendee: Attendee
    qr_payload: str
    attendance_number: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "success": True,
            "attendee": self.attendee.to_dict(),
            "qr_payload": self.qr_payload,
            "attendance_number": self.attendance_number,
        }


class RegistrationService:
    """Use cases: public online registration and staff walk-in registration."""

    def __init__(
        self,
        attendees: AttendeeRepository,
        allocator=None,
        *,
        default_fee: float = DEFAULT_FEE,
        tshirt_limit: int = DEFAULT_TSHIRT_LIMIT,
    ):
        self._attendees = attendees
        self._allocator = allocator
        self._default_fee = float(default_fee)
        self._tshirt_limit = int(tshirt_limit)

    def register_online(self, data: NewRegistration, *, now: datetime | None = None) -> RegistrationResult:
        now = now or datetime.now()
        first_name = require_length_between(data.first_name, "Nombre", 2, 50)
        last_name = require_length_between(data.last_name, "Apellido", 2, 50)
        email = require_email(data.email)
        phone = require_phone(data.phone)
        church = require_non_empty(data.church, "Iglesia")
        sector = require_non_empty(data.sector, "Sector")
        receipt_url = require_non_empty(data.payment_receipt_url, "Comprobante de pago")
        tshirt_size = self._validate_tshirt_size(data.tshirt_size)

        if self._attendees.email_exists(email):
            raise DuplicateRegistrationError("Este correo ya está registrado")

        # Shirts go to the first registrants only
        receives_tshirt = self._attendees.count_all() < self._tshirt_limit

        attendee = self._attendees.create(
            NewAttendee(
                attendee_id=str(uuid.uuid4()),
                first_name=first_name,
                last_name=last_name,
                email=email,
                phone=phone,
                church=church,
                sector=sector,
                registration_date=now,
                expected_amount=self._default_fee,
                notes=data.notes,
                payment_receipt_url=receipt_url,
                tshirt_size=tshirt_size,
                receives_tshirt=receives_tshirt,
            )
        )
        logger.info("Online registration %s (%s)", attendee.attendee_id, email)
        return RegistrationResult(attendee=attendee, qr_payload=f"id:{attendee.attendee_id}")

    def register_walk_in(
        self,
        session: Session,
        data: WalkInRegistration,
        *,
        check_in: bool = False,
        now: datetime | None = None,
    ) -> RegistrationResult:
        require_role(session, UserRole.EDITOR)
        now = now or datetime.now()

        first_name = require_non_empty(data.first_name, "Nombre")
        last_name = require_non_empty(data.last_name, "Apellido")
        phone = require_ten_digit_phone(data.phone)
        church = require_non_empty(data.church, "Iglesia")
        sector = require_non_empty(data.sector, "Sector")
        email = require_email(data.email) if (data.email or "").strip() else ""

        category = (data.category or "").strip().lower()
        if category not in WALK_IN_FEES:
            raise ValidationError(f"Categoría desconocida: {data.category}")

        duplicates = self._attendees.find_possible_duplicates(first_name=first_name, last_name=last_name, phone=phone)
        if duplicates:
            raise DuplicateRegistrationError(f"Ya existe un registro similar: {duplicates[0].display_name}")

        attendee = self._attendees.create(
            NewAttendee(
                attendee_id=str(uuid.uuid4()),
                first_name=first_name,
                last_name=last_name,
                email=email,
                phone=phone,
                church=church,
                sector=sector,
                registration_date=now,
                expected_amount=float(WALK_IN_FEES[category]),
                notes=data.notes or category,
            )
        )
        logger.info("Walk-in registration %s by %s", attendee.attendee_id, session.email)

        number = None
        if check_in:
            if self._allocator is None:
                raise ValidationError("La confirmación inmediata no está disponible")
            number = self._allocator.assign(attendee.attendee_id, confirmed_at=now)
            attendee = self._attendees.get_by_id(attendee.attendee_id) or attendee

        return RegistrationResult(
            attendee=attendee,
            qr_payload=f"id:{attendee.attendee_id}",
            attendance_number=number,
        )

    @staticmethod
    def _validate_tshirt_size(size: Optional[str]) -> Optional[str]:
        if not size:
            return None
        size = size.strip().upper()
        if size not in TSHIRT_SIZES:
            raise ValidationError(f"Talla de camiseta inválida: {size}")
        return size
