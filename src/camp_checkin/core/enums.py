from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """Staff role used for authorization. Higher rank includes lower ones."""

    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"

    @property
    def rank(self) -> int:
        return ROLE_HIERARCHY[self]


ROLE_HIERARCHY = {
    UserRole.ADMIN: 3,
    UserRole.EDITOR: 2,
    UserRole.VIEWER: 1,
}


class PaymentStatus(str, Enum):
    """Payment state stored on the attendee row.

    REVIEWED is a legacy value that admin edits still accept; reports treat it as pending.
    """

    PENDING = "Pendiente"
    PAID = "Pagado"
    REVIEWED = "Revisado"


class NumberingStrategy(str, Enum):
    """How attendance numbers are allocated on confirmation."""

    UNSYNCHRONIZED = "unsynchronized"
    SERIALIZED = "serialized"


class ReconfirmPolicy(str, Enum):
    """What confirming an already confirmed attendee does."""

    RENUMBER = "renumber"
    KEEP_EXISTING = "keep_existing"


class SearchKind(str, Enum):
    NOT_FOUND = "not_found"
    SINGLE = "single"
    MULTIPLE = "multiple"
