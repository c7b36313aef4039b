from __future__ import annotations

import logging

from flask import Flask, jsonify, session

from ..common.http import current_session, json_body, login_required, role_required
from ..core.enums import UserRole
from ..core.exceptions import ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    def api_login():
        data = json_body()
        s = container.auth_service.authenticate(str(data.get("email", "")), str(data.get("password", "")))

        session.clear()
        session["user_id"] = s.user_id
        session["email"] = s.email
        session["role"] = s.role.value
        logger.info("Staff login: %s (%s)", s.email, s.role.value)
        return jsonify({"success": True, "user": {"id": s.user_id, "email": s.email, "role": s.role.value}})

    @app.route("/api/logout", methods=["POST"], endpoint="api_logout")
    def api_logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/me", methods=["GET"], endpoint="api_me")
    @login_required
    def api_me():
        s = current_session()
        return jsonify({"success": True, "user": {"id": s.user_id, "email": s.email, "role": s.role.value}})

    @app.route("/api/users", methods=["GET"], endpoint="api_users_list")
    @role_required(UserRole.ADMIN)
    def api_users_list():
        users = container.user_service.list_users(current_session())
        return jsonify(
            {
                "success": True,
                "users": [
                    {"id": u.user_id, "email": u.email, "role": u.role.value, "is_active": u.is_active}
                    for u in users
                ],
            }
        )

    @app.route("/api/users", methods=["POST"], endpoint="api_users_create")
    @role_required(UserRole.ADMIN)
    def api_users_create():
        data = json_body()
        try:
            role = UserRole(str(data.get("role", UserRole.VIEWER.value)))
        except ValueError:
            raise ValidationError("Rol inválido")

        user_id = container.user_service.create_user(
            current_session(),
            email=str(data.get("email", "")),
            password=str(data.get("password", "")),
            role=role,
        )
        return jsonify({"success": True, "id": user_id}), 201
