from __future__ import annotations

import io

from flask import Flask, request, send_file

from ..common.http import current_session, login_required
from ..container import Container
from .service import TicketFormat, build_ticket_payload, render_qr_png


def register(app: Flask, container: Container) -> None:
    @app.route("/api/tickets/<attendee_id>.png", methods=["GET"], endpoint="api_ticket_png")
    @login_required
    def api_ticket_png(attendee_id: str):
        attendee = container.search_service.get(current_session(), attendee_id)
        payload = build_ticket_payload(attendee, request.args.get("format", TicketFormat.JSON.value))

        buf = io.BytesIO(render_qr_png(payload))
        return send_file(buf, mimetype="image/png", download_name=f"boleto-{attendee.attendee_id}.png")
