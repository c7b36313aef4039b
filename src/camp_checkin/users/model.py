from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import UserRole


@dataclass(frozen=True)
class StaffUser:
    """Staff account (committee, cashier, admin). Plain data, no DB access."""

    user_id: int
    email: str
    password_hash: str
    role: UserRole
    is_active: bool = True


@dataclass(frozen=True)
class Session:
    """Authenticated caller passed explicitly into every protected operation."""

    user_id: int
    email: str
    role: UserRole

    def has_role(self, required: UserRole) -> bool:
        return self.role.rank >= required.rank
