from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PaymentStatus
from .model import Attendee, NewAttendee


class AttendeeRepository(Protocol):
    """Store contract for attendee records.

    Every write is a single-row point operation; the core never needs multi-row transactions.
    """

    def get_by_id(self, attendee_id: str) -> Optional[Attendee]:
        raise NotImplementedError

    def get_by_attendance_number(self, number: int) -> Optional[Attendee]:
        raise NotImplementedError

    def search_by_name(self, term: str) -> Sequence[Attendee]:
        """Case-insensitive substring match on first OR last name."""

        raise NotImplementedError

    def get_max_attendance_number(self) -> Optional[int]:
        """Highest non-null attendance number, or None when nobody is numbered yet."""

        raise NotImplementedError

    def mark_attendance(self, attendee_id: str, *, attendance_number: int, confirmed_at: datetime) -> bool:
        """Set number, confirmed flag and timestamp in one update.

        Returns False when no row matched. Raises DuplicateAttendanceNumberError
        when the store rejects the number as already taken.
        """

        raise NotImplementedError

    def create(self, attendee: NewAttendee) -> Attendee:
        raise NotImplementedError

    def update(self, attendee_id: str, changes: dict) -> bool:
        """Apply canonical-field changes to one record."""

        raise NotImplementedError

    def apply_payment(self, attendee_id: str, *, payment_amount: float, payment_status: PaymentStatus) -> bool:
        raise NotImplementedError

    def delete(self, attendee_id: str) -> bool:
        raise NotImplementedError

    def list_all(self, *, include_tests: bool = False) -> Sequence[Attendee]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def email_exists(self, email: str) -> bool:
        """True when a non-test record already uses this email."""

        raise NotImplementedError

    def find_possible_duplicates(self, *, first_name: str, last_name: str, phone: str) -> Sequence[Attendee]:
        raise NotImplementedError
