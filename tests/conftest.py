from __future__ import annotations

import dataclasses
from datetime import datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from camp_checkin import create_app
from camp_checkin.attendees.model import Attendee, NewAttendee
from camp_checkin.container import assemble_container
from camp_checkin.core.enums import PaymentStatus, UserRole
from camp_checkin.core.exceptions import DuplicateAttendanceNumberError
from camp_checkin.payments.model import CashLogEntry
from camp_checkin.users.model import Session, StaffUser

ANA_ID = "9f8e7d6c-1234-4abc-9def-0123456789ab"
LUIS_ID = "0a1b2c3d-4e5f-4a6b-8c7d-9e0f1a2b3c4d"
TEST_ROW_ID = "11111111-2222-4333-8444-555555555555"


class InMemoryAttendees:
    """Attendee store with the same unique-number rule as the attendance_number index."""

    def __init__(self, rows=()):
        self.rows: dict[str, Attendee] = {a.attendee_id: a for a in rows}
        self.mark_calls = 0

    def get_by_id(self, attendee_id: str) -> Optional[Attendee]:
        return self.rows.get(attendee_id)

    def get_by_attendance_number(self, number: int) -> Optional[Attendee]:
        for a in self.rows.values():
            if a.attendance_number == number:
                return a
        return None

    def search_by_name(self, term: str):
        t = term.lower()
        found = [a for a in self.rows.values() if t in a.first_name.lower() or t in a.last_name.lower()]
        return sorted(found, key=lambda a: (a.first_name, a.last_name))

    def get_max_attendance_number(self) -> Optional[int]:
        numbers = [a.attendance_number for a in self.rows.values() if a.attendance_number is not None]
        return max(numbers) if numbers else None

    def _check_number_free(self, attendee_id: str, number: Optional[int]) -> None:
        if number is None:
            return
        for other in self.rows.values():
            if other.attendee_id != attendee_id and other.attendance_number == number:
                raise DuplicateAttendanceNumberError(number)

    def mark_attendance(self, attendee_id: str, *, attendance_number: int, confirmed_at: datetime) -> bool:
        self.mark_calls += 1
        current = self.rows.get(attendee_id)
        if not current:
            return False
        self._check_number_free(attendee_id, attendance_number)
        self.rows[attendee_id] = dataclasses.replace(
            current,
            attendance_number=attendance_number,
            attendance_confirmed=True,
            attendance_confirmed_at=confirmed_at,
        )
        return True

    def create(self, attendee: NewAttendee) -> Attendee:
        row = Attendee(**dataclasses.asdict(attendee))
        self.rows[row.attendee_id] = row
        return row

    def update(self, attendee_id: str, changes: dict) -> bool:
        current = self.rows.get(attendee_id)
        if not current:
            return False
        if "attendance_number" in changes:
            self._check_number_free(attendee_id, changes["attendance_number"])
        self.rows[attendee_id] = dataclasses.replace(current, **changes)
        return True

    def apply_payment(self, attendee_id: str, *, payment_amount: float, payment_status: PaymentStatus) -> bool:
        return self.update(attendee_id, {"payment_amount": payment_amount, "payment_status": payment_status})

    def delete(self, attendee_id: str) -> bool:
        return self.rows.pop(attendee_id, None) is not None

    def list_all(self, *, include_tests: bool = False):
        return [a for a in self.rows.values() if include_tests or not a.is_test]

    def count_all(self) -> int:
        return len(self.rows)

    def email_exists(self, email: str) -> bool:
        return any(a.email.lower() == email.lower() and not a.is_test for a in self.rows.values())

    def find_possible_duplicates(self, *, first_name: str, last_name: str, phone: str):
        return [
            a
            for a in self.rows.values()
            if (a.first_name.lower() == first_name.lower() and a.last_name.lower() == last_name.lower())
            or a.phone == phone
        ]


class InMemoryUsers:
    def __init__(self, users=()):
        self.users: dict[int, StaffUser] = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[StaffUser]:
        return self.users.get(int(user_id))

    def get_by_email(self, email: str) -> Optional[StaffUser]:
        for u in self.users.values():
            if u.email == email:
                return u
        return None

    def create_user(self, *, email: str, password_hash: str, role: UserRole) -> int:
        user_id = max(self.users, default=0) + 1
        self.users[user_id] = StaffUser(user_id=user_id, email=email, password_hash=password_hash, role=role)
        return user_id

    def list_all(self):
        return list(self.users.values())


class InMemoryCashLog:
    def __init__(self):
        self.entries: list[CashLogEntry] = []

    def add(self, entry: CashLogEntry) -> int:
        entry_id = len(self.entries) + 1
        self.entries.append(dataclasses.replace(entry, entry_id=entry_id))
        return entry_id

    def recent(self, limit: int):
        return sorted(self.entries, key=lambda e: (e.logged_at, e.entry_id), reverse=True)[:limit]


def make_attendee(attendee_id: str, first_name: str, last_name: str, **overrides) -> Attendee:
    values = dict(
        attendee_id=attendee_id,
        first_name=first_name,
        last_name=last_name,
        email=f"{first_name.lower()}@example.com",
        phone="5512345678",
        church="Iglesia Central",
        sector="Norte",
        registration_date=datetime(2026, 3, 1, 9, 0, 0),
        expected_amount=900.0,
    )
    values.update(overrides)
    return Attendee(**values)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 14, 8, 30, 0)


@pytest.fixture
def attendees_repo() -> InMemoryAttendees:
    return InMemoryAttendees(
        [
            make_attendee(ANA_ID, "Ana", "García"),
            make_attendee(LUIS_ID, "Luis", "Gómez", phone="5598765432", sector="Sur", church="Iglesia Bethel"),
            make_attendee(TEST_ROW_ID, "Prueba", "Sistema", is_test=True),
        ]
    )


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers(
        [
            StaffUser(1, "admin@camp.test", generate_password_hash("admin123"), UserRole.ADMIN),
            StaffUser(2, "editor@camp.test", generate_password_hash("editor123"), UserRole.EDITOR),
            StaffUser(3, "viewer@camp.test", generate_password_hash("viewer123"), UserRole.VIEWER),
            StaffUser(4, "former@camp.test", generate_password_hash("former123"), UserRole.EDITOR, is_active=False),
        ]
    )


@pytest.fixture
def cash_log_repo() -> InMemoryCashLog:
    return InMemoryCashLog()


@pytest.fixture
def admin() -> Session:
    return Session(user_id=1, email="admin@camp.test", role=UserRole.ADMIN)


@pytest.fixture
def editor() -> Session:
    return Session(user_id=2, email="editor@camp.test", role=UserRole.EDITOR)


@pytest.fixture
def viewer() -> Session:
    return Session(user_id=3, email="viewer@camp.test", role=UserRole.VIEWER)


class _TestSettings:
    ATTENDANCE_NUMBERING = "serialized"
    ATTENDANCE_NUMBER_RETRIES = 3
    RECONFIRM_POLICY = "renumber"
    SCAN_MIN_INTERVAL_SECONDS = 0.0
    DEFAULT_FEE = 900
    TSHIRT_LIMIT = 100


@pytest.fixture
def container(users_repo, attendees_repo, cash_log_repo):
    return assemble_container(
        users_repo=users_repo,
        attendees_repo=attendees_repo,
        cash_log_repo=cash_log_repo,
        settings=_TestSettings,
    )


@pytest.fixture
def app(container):
    return create_app(container, settings_module="camp_checkin.config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, email: str, password: str):
    return client.post("/api/login", json={"email": email, "password": password})
