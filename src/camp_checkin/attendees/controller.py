from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_session, json_body, login_required, role_required
from ..core.enums import UserRole
from ..container import Container
from .model import normalize_attendee_payload
from .registration import NewRegistration, WalkInRegistration


def register(app: Flask, container: Container) -> None:
    @app.route("/api/register", methods=["POST"], endpoint="api_register")
    def api_register():
        data = normalize_attendee_payload(json_body())
        result = container.registration_service.register_online(NewRegistration.from_payload(data))
        return jsonify(result.to_dict()), 201

    @app.route("/api/walk-in", methods=["POST"], endpoint="api_walk_in")
    @role_required(UserRole.EDITOR)
    def api_walk_in():
        raw = json_body()
        data = normalize_attendee_payload(raw)
        result = container.registration_service.register_walk_in(
            current_session(),
            WalkInRegistration.from_payload(data),
            check_in=bool(raw.get("check_in", False)),
        )
        return jsonify(result.to_dict()), 201

    @app.route("/api/attendees/search", methods=["GET"], endpoint="api_attendees_search")
    @login_required
    def api_attendees_search():
        result = container.search_service.search(current_session(), request.args.get("q", ""))
        return jsonify(result.to_dict())

    @app.route("/api/attendees", methods=["GET"], endpoint="api_attendees_list")
    @role_required(UserRole.ADMIN)
    def api_attendees_list():
        include_tests = request.args.get("include_tests", "0").lower() in {"1", "true", "yes"}
        rows = container.attendee_admin_service.list_attendees(current_session(), include_tests=include_tests)
        return jsonify({"success": True, "count": len(rows), "attendees": [a.to_dict() for a in rows]})

    @app.route("/api/attendees/<attendee_id>", methods=["GET"], endpoint="api_attendee_get")
    @login_required
    def api_attendee_get(attendee_id: str):
        attendee = container.search_service.get(current_session(), attendee_id)
        return jsonify({"success": True, "attendee": attendee.to_dict()})

    @app.route("/api/attendees/<attendee_id>", methods=["PATCH"], endpoint="api_attendee_update")
    @role_required(UserRole.ADMIN)
    def api_attendee_update(attendee_id: str):
        attendee = container.attendee_admin_service.update_attendee(current_session(), attendee_id, json_body())
        return jsonify({"success": True, "attendee": attendee.to_dict()})

    @app.route("/api/attendees/<attendee_id>", methods=["DELETE"], endpoint="api_attendee_delete")
    @role_required(UserRole.ADMIN)
    def api_attendee_delete(attendee_id: str):
        container.attendee_admin_service.delete_attendee(current_session(), attendee_id)
        return jsonify({"success": True})
