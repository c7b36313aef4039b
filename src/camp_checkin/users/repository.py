from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import UserRole
from .model import StaffUser


class UserRepository(Protocol):
    """Staff account storage used by the auth services."""

    def get_by_id(self, user_id: int) -> Optional[StaffUser]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[StaffUser]:
        raise NotImplementedError

    def create_user(self, *, email: str, password_hash: str, role: UserRole) -> int:
        raise NotImplementedError

    def list_all(self) -> Sequence[StaffUser]:
        raise NotImplementedError
