from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PaymentStatus


@dataclass(frozen=True)
class Attendee:
    """Domain entity: one registrant (identity, payment and attendance state).

    This is the single canonical schema. Storage column names and the camelCase
    aliases used by older payloads are translated at the boundaries only.
    """

    attendee_id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    church: str
    sector: str
    registration_date: datetime
    notes: Optional[str] = None
    expected_amount: float = 0.0
    payment_amount: float = 0.0
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_receipt_url: Optional[str] = None
    attendance_number: Optional[int] = None
    attendance_confirmed: bool = False
    attendance_confirmed_at: Optional[datetime] = None
    tshirt_size: Optional[str] = None
    receives_tshirt: bool = False
    is_test: bool = False

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self) -> dict:
        return {
            "id": self.attendee_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "church": self.church,
            "sector": self.sector,
            "notes": self.notes,
            "expected_amount": self.expected_amount,
            "payment_amount": self.payment_amount,
            "payment_status": self.payment_status.value,
            "payment_receipt_url": self.payment_receipt_url,
            "registration_date": self.registration_date.isoformat(),
            "attendance_number": self.attendance_number,
            "attendance_confirmed": self.attendance_confirmed,
            "attendance_confirmed_at": (
                self.attendance_confirmed_at.isoformat() if self.attendance_confirmed_at else None
            ),
            "tshirt_size": self.tshirt_size,
            "receives_tshirt": self.receives_tshirt,
            "is_test": self.is_test,
        }


@dataclass(frozen=True)
class NewAttendee:
    """Write model for inserts; the store assigns nothing, the id is generated by the service."""

    attendee_id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    church: str
    sector: str
    registration_date: datetime
    expected_amount: float
    notes: Optional[str] = None
    payment_receipt_url: Optional[str] = None
    tshirt_size: Optional[str] = None
    receives_tshirt: bool = False
    is_test: bool = False


# Fields an admin edit may change, keyed by canonical name.
EDITABLE_FIELDS = frozenset(
    {
        "first_name",
        "last_name",
        "email",
        "phone",
        "church",
        "sector",
        "notes",
        "expected_amount",
        "payment_amount",
        "payment_status",
        "attendance_number",
        "attendance_confirmed",
        "attendance_confirmed_at",
        "tshirt_size",
        "is_test",
    }
)

# Inbound aliases seen across the registration form, the admin table and QR payloads.
FIELD_ALIASES = {
    "id": "attendee_id",
    "firstName": "first_name",
    "firstname": "first_name",
    "lastName": "last_name",
    "lastname": "last_name",
    "nombre": "first_name",
    "apellido": "last_name",
    "telefono": "phone",
    "iglesia": "church",
    "notas": "notes",
    "expectedamount": "expected_amount",
    "expectedAmount": "expected_amount",
    "paymentamount": "payment_amount",
    "paymentAmount": "payment_amount",
    "paymentstatus": "payment_status",
    "paymentStatus": "payment_status",
    "paymentreceipturl": "payment_receipt_url",
    "paymentReceiptUrl": "payment_receipt_url",
    "registrationdate": "registration_date",
    "tshirtsize": "tshirt_size",
    "tshirtSize": "tshirt_size",
    "istest": "is_test",
    "isTest": "is_test",
    "attendanceNumber": "attendance_number",
    "attendanceConfirmed": "attendance_confirmed",
    "attendanceConfirmedAt": "attendance_confirmed_at",
}


def normalize_attendee_payload(payload: dict) -> dict:
    """Map alias keys to canonical field names. Canonical keys win over aliases."""

    out: dict = {}
    for key, value in (payload or {}).items():
        canonical = FIELD_ALIASES.get(key, key)
        if canonical in out and key != canonical:
            continue
        out[canonical] = value
    return out
