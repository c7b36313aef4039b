from __future__ import annotations

import logging
import threading
from datetime import datetime

from ..attendees.repository import AttendeeRepository
from ..core.constants import DEFAULT_NUMBER_RETRIES
from ..core.enums import NumberingStrategy
from ..core.exceptions import AttendeeNotFoundError, DuplicateAttendanceNumberError

logger = logging.getLogger(__name__)


class AttendanceNumberAllocator:
    """Hands out arrival-order numbers as highest existing number + 1.

    SERIALIZED runs the read and the write under one process-wide lock and retries
    when the store's unique index rejects a number taken by another process.
    UNSYNCHRONIZED is the plain read-then-write, so two concurrent confirmations
    may receive the same number.
    """

    _lock = threading.Lock()

    def __init__(
        self,
        attendees: AttendeeRepository,
        *,
        strategy: NumberingStrategy = NumberingStrategy.SERIALIZED,
        max_retries: int = DEFAULT_NUMBER_RETRIES,
    ):
        self._attendees = attendees
        self._strategy = NumberingStrategy(strategy)
        self._max_retries = max(int(max_retries), 0)

    @property
    def strategy(self) -> NumberingStrategy:
        return self._strategy

    def next_number(self) -> int:
        return (self._attendees.get_max_attendance_number() or 0) + 1

    def assign(self, attendee_id: str, *, confirmed_at: datetime) -> int:
        if self._strategy == NumberingStrategy.UNSYNCHRONIZED:
            return self._write(attendee_id, confirmed_at)

        attempt = 0
        while True:
            try:
                with self._lock:
                    return self._write(attendee_id, confirmed_at)
            except DuplicateAttendanceNumberError as e:
                attempt += 1
                if attempt > self._max_retries:
                    logger.error("Giving up on number for %s after %d conflicts", attendee_id, attempt)
                    raise
                logger.warning("Attendance number %s already taken, retrying (%d/%d)", e.number, attempt, self._max_retries)

    def _write(self, attendee_id: str, confirmed_at: datetime) -> int:
        number = self.next_number()
        matched = self._attendees.mark_attendance(attendee_id, attendance_number=number, confirmed_at=confirmed_at)
        if not matched:
            raise AttendeeNotFoundError(attendee_id)
        return number
