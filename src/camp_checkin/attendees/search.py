from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from ..core.enums import SearchKind, UserRole
from ..core.exceptions import AttendeeNotFoundError, ValidationError
from ..users.model import Session
from ..users.service import require_role
from .model import Attendee
from .repository import AttendeeRepository

_NUMBER_RE = re.compile(r"^\d+$")


@dataclass(frozen=True)
class SearchResult:
    kind: SearchKind
    matches: Sequence[Attendee]

    def to_dict(self) -> dict:
        return {
            "success": True,
            "kind": self.kind.value,
            "count": len(self.matches),
            "results": [a.to_dict() for a in self.matches],
        }


class AttendeeSearchService:
    """Use case: manual lookup at the registration desk."""

    def __init__(self, attendees: AttendeeRepository):
        self._attendees = attendees

    def search(self, session: Session, query: str) -> SearchResult:
        require_role(session, UserRole.VIEWER)
        term = (query or "").strip()
        if not term:
            raise ValidationError("Escribe un nombre o número de asistencia")

        # Numbers go to an exact attendance-number lookup, names to a substring match
        if _NUMBER_RE.match(term):
            found = self._attendees.get_by_attendance_number(int(term))
            matches: Sequence[Attendee] = [found] if found else []
        else:
            matches = list(self._attendees.search_by_name(term))

        if not matches:
            kind = SearchKind.NOT_FOUND
        elif len(matches) == 1:
            kind = SearchKind.SINGLE
        else:
            kind = SearchKind.MULTIPLE
        return SearchResult(kind=kind, matches=matches)

    def get(self, session: Session, attendee_id: str) -> Attendee:
        require_role(session, UserRole.VIEWER)
        attendee = self._attendees.get_by_id(attendee_id)
        if not attendee:
            raise AttendeeNotFoundError(attendee_id)
        return attendee
