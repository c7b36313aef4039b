from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length
from ..core.enums import UserRole
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .model import Session
from .repository import UserRepository

logger = logging.getLogger(__name__)


def require_role(session: Session | None, required: UserRole) -> Session:
    if session is None:
        raise AuthorizationError("Debes iniciar sesión")
    if not session.has_role(required):
        raise AuthorizationError("No tienes permisos para realizar esta acción")
    return session


class AuthService:
    """Use case: authenticate staff (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> Session:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or not user.is_active:
            raise AuthenticationError("Correo o contraseña incorrectos")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Failed login for %s", user.email)
            raise AuthenticationError("Correo o contraseña incorrectos")

        return Session(user_id=user.user_id, email=user.email, role=user.role)

    def session_for(self, user_id: int) -> Session | None:
        """Rebuild a Session for a stored user id; None when the account is gone or disabled."""
        user = self._users.get_by_id(user_id)
        if not user or not user.is_active:
            return None
        return Session(user_id=user.user_id, email=user.email, role=user.role)


class UserService:
    """Use case: manage staff accounts (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_user(self, session: Session, *, email: str, password: str, role: UserRole) -> int:
        require_role(session, UserRole.ADMIN)
        email = require_email(email)
        require_min_length(password, "Contraseña", 6)

        if self._users.get_by_email(email):
            raise ValidationError("El correo ya está registrado")

        user_id = self._users.create_user(email=email, password_hash=generate_password_hash(password), role=role)
        logger.info("Staff account %s created with role %s by %s", email, role.value, session.email)
        return user_id

    def list_users(self, session: Session):
        require_role(session, UserRole.ADMIN)
        return self._users.list_all()
