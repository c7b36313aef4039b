from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import PaymentStatus
from ..core.exceptions import DuplicateAttendanceNumberError, StoreUnavailableError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Attendee, NewAttendee
from .repository import AttendeeRepository

# canonical field -> attendees column
COLUMN_MAP = {
    "attendee_id": "id",
    "first_name": "firstname",
    "last_name": "lastname",
    "email": "email",
    "phone": "phone",
    "church": "church",
    "sector": "sector",
    "notes": "notes",
    "expected_amount": "expectedamount",
    "payment_amount": "paymentamount",
    "payment_status": "paymentstatus",
    "payment_receipt_url": "paymentreceipturl",
    "registration_date": "registrationdate",
    "attendance_number": "attendance_number",
    "attendance_confirmed": "attendance_confirmed",
    "attendance_confirmed_at": "attendance_confirmed_at",
    "tshirt_size": "tshirtsize",
    "receives_tshirt": "receives_tshirt",
    "is_test": "istest",
}

_SELECT = "SELECT " + ", ".join(COLUMN_MAP.values()) + " FROM attendees"
_NUMBER_INDEX = "uq_attendance_number"


def _to_attendee(r: dict) -> Attendee:
    number = r.get("attendance_number")
    return Attendee(
        attendee_id=str(r["id"]),
        first_name=r.get("firstname") or "",
        last_name=r.get("lastname") or "",
        email=r.get("email") or "",
        phone=r.get("phone") or "",
        church=r.get("church") or "",
        sector=str(r.get("sector") or ""),
        notes=r.get("notes"),
        expected_amount=float(r.get("expectedamount") or 0),
        payment_amount=float(r.get("paymentamount") or 0),
        payment_status=PaymentStatus(r.get("paymentstatus") or PaymentStatus.PENDING.value),
        payment_receipt_url=r.get("paymentreceipturl"),
        registration_date=r["registrationdate"],
        attendance_number=int(number) if number is not None else None,
        attendance_confirmed=bool(r.get("attendance_confirmed")),
        attendance_confirmed_at=r.get("attendance_confirmed_at"),
        tshirt_size=r.get("tshirtsize"),
        receives_tshirt=bool(r.get("receives_tshirt")),
        is_test=bool(r.get("istest")),
    )


def _to_db_value(value):
    if isinstance(value, PaymentStatus):
        return value.value
    if isinstance(value, bool):
        return int(value)
    return value


def _like(term: str) -> str:
    escaped = term.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class MySQLAttendeeRepository(AttendeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendee_id: str) -> Optional[Attendee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE id=%s", (attendee_id,))
            r = fetchone(cur)
            return _to_attendee(r) if r else None

    def get_by_attendance_number(self, number: int) -> Optional[Attendee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE attendance_number=%s LIMIT 1", (int(number),))
            r = fetchone(cur)
            return _to_attendee(r) if r else None

    def search_by_name(self, term: str) -> Sequence[Attendee]:
        pattern = _like(term)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE LOWER(firstname) LIKE %s OR LOWER(lastname) LIKE %s
                ORDER BY firstname, lastname
                """,
                (pattern, pattern),
            )
            return [_to_attendee(r) for r in fetchall(cur)]

    def get_max_attendance_number(self) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_number FROM attendees
                WHERE attendance_number IS NOT NULL
                ORDER BY attendance_number DESC
                LIMIT 1
                """
            )
            r = fetchone(cur)
            return int(r["attendance_number"]) if r else None

    def mark_attendance(self, attendee_id: str, *, attendance_number: int, confirmed_at: datetime) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE attendees
                    SET attendance_number=%s, attendance_confirmed=1, attendance_confirmed_at=%s
                    WHERE id=%s
                    """,
                    (int(attendance_number), confirmed_at, attendee_id),
                )
                return cur.rowcount > 0
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e, _NUMBER_INDEX):
                raise DuplicateAttendanceNumberError(attendance_number) from e
            raise StoreUnavailableError("Error al confirmar la asistencia") from e

    def create(self, attendee: NewAttendee) -> Attendee:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendees(id, firstname, lastname, email, phone, church, sector, notes,
                                      expectedamount, paymentamount, paymentstatus, paymentreceipturl,
                                      registrationdate, tshirtsize, receives_tshirt, istest)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,0,%s,%s,%s,%s,%s,%s)
                """,
                (
                    attendee.attendee_id,
                    attendee.first_name,
                    attendee.last_name,
                    attendee.email,
                    attendee.phone,
                    attendee.church,
                    attendee.sector,
                    attendee.notes,
                    attendee.expected_amount,
                    PaymentStatus.PENDING.value,
                    attendee.payment_receipt_url,
                    attendee.registration_date,
                    attendee.tshirt_size,
                    int(attendee.receives_tshirt),
                    int(attendee.is_test),
                ),
            )
            cur.execute(f"{_SELECT} WHERE id=%s", (attendee.attendee_id,))
            return _to_attendee(fetchone(cur))

    def update(self, attendee_id: str, changes: dict) -> bool:
        assignments = []
        params: list[object] = []
        for field_name, value in changes.items():
            column = COLUMN_MAP.get(field_name)
            if column is None or field_name == "attendee_id":
                continue
            assignments.append(f"{column}=%s")
            params.append(_to_db_value(value))
        if not assignments:
            return self.get_by_id(attendee_id) is not None

        params.append(attendee_id)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"UPDATE attendees SET {', '.join(assignments)} WHERE id=%s", tuple(params))
                return cur.rowcount > 0
        except mysql.connector.IntegrityError as e:
            if is_duplicate_key(e, _NUMBER_INDEX):
                raise DuplicateAttendanceNumberError(int(changes.get("attendance_number") or 0)) from e
            raise StoreUnavailableError("Error al actualizar el asistente") from e

    def apply_payment(self, attendee_id: str, *, payment_amount: float, payment_status: PaymentStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendees SET paymentamount=%s, paymentstatus=%s WHERE id=%s",
                (payment_amount, payment_status.value, attendee_id),
            )
            return cur.rowcount > 0

    def delete(self, attendee_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendees WHERE id=%s", (attendee_id,))
            return cur.rowcount > 0

    def list_all(self, *, include_tests: bool = False) -> Sequence[Attendee]:
        where = "" if include_tests else "WHERE istest=0"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} {where} ORDER BY registrationdate DESC")
            return [_to_attendee(r) for r in fetchall(cur)]

    def count_all(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM attendees")
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def email_exists(self, email: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM attendees WHERE LOWER(email)=LOWER(%s) AND istest=0 LIMIT 1",
                (email,),
            )
            return fetchone(cur) is not None

    def find_possible_duplicates(self, *, first_name: str, last_name: str, phone: str) -> Sequence[Attendee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE (LOWER(firstname)=LOWER(%s) AND LOWER(lastname)=LOWER(%s)) OR phone=%s
                """,
                (first_name, last_name, phone),
            )
            return [_to_attendee(r) for r in fetchall(cur)]
