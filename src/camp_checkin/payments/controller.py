from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_session, json_body, role_required
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import UserRole
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/caja/<attendee_id>/complete", methods=["POST"], endpoint="api_caja_complete")
    @role_required(UserRole.ADMIN)
    def api_caja_complete(attendee_id: str):
        attendee = container.cashier_service.complete_payment(current_session(), attendee_id)
        return jsonify({"success": True, "attendee": attendee.to_dict()})

    @app.route("/api/caja/<attendee_id>/payment", methods=["POST"], endpoint="api_caja_payment")
    @role_required(UserRole.ADMIN)
    def api_caja_payment(attendee_id: str):
        attendee = container.cashier_service.record_payment(current_session(), attendee_id, json_body().get("amount"))
        return jsonify({"success": True, "attendee": attendee.to_dict()})

    @app.route("/api/caja/history", methods=["GET"], endpoint="api_caja_history")
    @role_required(UserRole.ADMIN)
    def api_caja_history():
        try:
            limit = int(request.args.get("limit", DEFAULT_HISTORY_LIMIT))
        except ValueError:
            raise ValidationError("El límite debe ser numérico")
        entries = container.cashier_service.recent_history(current_session(), limit=max(1, min(limit, 200)))
        return jsonify({"success": True, "history": [e.to_dict() for e in entries]})
