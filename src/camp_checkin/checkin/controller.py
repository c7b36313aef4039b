from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_session, json_body, role_required, station_id
from ..core.enums import UserRole
from ..core.exceptions import QRPayloadError, ValidationError
from ..container import Container
from ..tickets.service import decode_qr_image


def register(app: Flask, container: Container) -> None:
    @app.route("/api/checkin/scan", methods=["POST"], endpoint="api_checkin_scan")
    @role_required(UserRole.EDITOR)
    def api_checkin_scan():
        """Scan a ticket; with ``"confirm": true`` the attendee is numbered in the same call."""
        data = json_body()
        s = current_session()
        raw = data.get("qr_code", data.get("raw", ""))
        if not isinstance(raw, str):
            raise QRPayloadError("El código QR debe enviarse como texto")
        if data.get("confirm"):
            result = container.checkin_service.confirm_scan(s, raw, station_id=station_id(s))
        else:
            result = container.checkin_service.scan(s, raw, station_id=station_id(s))
        return jsonify(result.to_dict())

    @app.route("/api/checkin/scan/image", methods=["POST"], endpoint="api_checkin_scan_image")
    @role_required(UserRole.EDITOR)
    def api_checkin_scan_image():
        if "image" not in request.files:
            raise ValidationError("Falta el archivo de imagen")

        text = decode_qr_image(request.files["image"].stream)
        if not text:
            raise QRPayloadError("No se detectó un código QR en la imagen")

        s = current_session()
        result = container.checkin_service.scan(s, text, station_id=station_id(s))
        return jsonify(result.to_dict())

    @app.route("/api/checkin/<attendee_id>/confirm", methods=["POST"], endpoint="api_checkin_confirm")
    @role_required(UserRole.EDITOR)
    def api_checkin_confirm(attendee_id: str):
        result = container.checkin_service.confirm_attendance(current_session(), attendee_id)
        return jsonify(result.to_dict())
