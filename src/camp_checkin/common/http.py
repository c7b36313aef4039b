from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, current_app, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import UserRole
from ..core.exceptions import (
    AttendeeNotFoundError,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    DuplicateAttendanceNumberError,
    DuplicateRegistrationError,
    QRPayloadError,
    ScanRateLimitedError,
    StoreUnavailableError,
    ValidationError,
)
from ..users.model import Session

logger = logging.getLogger(__name__)

# Most specific first; the first isinstance match wins
ERROR_STATUS = (
    (DuplicateRegistrationError, 409),
    (ScanRateLimitedError, 429),
    (ValidationError, 400),
    (QRPayloadError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (AttendeeNotFoundError, 404),
    (DuplicateAttendanceNumberError, 409),
    (StoreUnavailableError, 503),
)


def current_session() -> Session | None:
    """Session for the cookie's user, re-read from the store on each request.

    A disabled or deleted account clears the cookie; a changed role applies at once.
    """
    if "user_id" not in session:
        return None
    if "staff_session" in g:
        return g.staff_session

    try:
        user_id = int(session["user_id"])
    except (TypeError, ValueError):
        user_id = None

    s = None
    if user_id is not None:
        s = current_app.extensions["camp_checkin"].auth_service.session_for(user_id)
    if s is None:
        session.clear()
    g.staff_session = s
    return s


def station_id(s: Session) -> str:
    """Scanner station key: explicit header, else the logged-in staff member."""
    return (request.headers.get("X-Station-Id") or "").strip() or f"staff-{s.user_id}"


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_session() is None:
            return jsonify({"success": False, "message": "Debes iniciar sesión"}), 401
        return view(*args, **kwargs)

    return wrapper


def role_required(role: UserRole):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            s = current_session()
            if s is None:
                return jsonify({"success": False, "message": "Debes iniciar sesión"}), 401
            if not s.has_role(role):
                return jsonify({"success": False, "message": "No tienes permisos para realizar esta acción"}), 403
            return view(*args, **kwargs)

        return wrapper

    return decorator


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        for exc_type, status in ERROR_STATUS:
            if isinstance(e, exc_type):
                if status >= 500:
                    logger.error("%s on %s %s: %s", type(e).__name__, request.method, request.path, e)
                return jsonify({"success": False, "message": str(e)}), status
        logger.warning("Unmapped domain error on %s: %s", request.path, e)
        return jsonify({"success": False, "message": str(e)}), 400

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "message": e.description}), e.code
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        message = f"Error interno: {e}" if app.config.get("DEBUG") else "Error interno del servidor"
        return jsonify({"success": False, "message": message}), 500
