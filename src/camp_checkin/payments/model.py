from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class CashLogEntry:
    """One cashier action on an attendee's payment."""

    attendee_id: str
    name: str
    previous_amount: float
    new_amount: float
    reason: str
    modified_by: str
    logged_at: datetime
    entry_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.entry_id,
            "attendee_id": self.attendee_id,
            "name": self.name,
            "previous_amount": self.previous_amount,
            "new_amount": self.new_amount,
            "reason": self.reason,
            "modified_by": self.modified_by,
            "logged_at": self.logged_at.isoformat(),
        }
