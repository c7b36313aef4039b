from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..common.http import current_session, role_required
from ..core.enums import UserRole
from ..core.exceptions import ValidationError
from ..container import Container

CSV_SUFFIX = ".csv"


def register(app: Flask, container: Container) -> None:
    reports = container.report_service

    def _payments_by_date(s):
        return reports.payments_by_date(s, request.args.get("period", "week"))

    builders = {
        "summary": lambda s: [reports.summary(s)],
        "by-church": reports.by_church,
        "by-sector": reports.by_sector,
        "campers": reports.camper_list,
        "payments-by-date": _payments_by_date,
        "payments-by-sector": reports.payments_by_sector,
        "payment-status": reports.payment_status,
    }

    def _write_csv(rows: list[dict], *, filename: str):
        out = io.StringIO()
        fieldnames = list(rows[0].keys()) if rows else ["name", "count"]
        writer = csv.DictWriter(out, fieldnames=fieldnames)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        # BOM so spreadsheet apps detect UTF-8 accents
        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/<name>", methods=["GET"], endpoint="api_report")
    @role_required(UserRole.ADMIN)
    def api_report(name: str):
        as_csv = name.endswith(CSV_SUFFIX)
        key = name[: -len(CSV_SUFFIX)] if as_csv else name

        builder = builders.get(key)
        if builder is None:
            raise ValidationError(f"Reporte desconocido: {key}")

        rows = builder(current_session())
        if as_csv:
            return _write_csv(rows, filename=f"{key.replace('-', '_')}.csv")
        if key == "summary":
            return jsonify({"success": True, "report": key, "data": rows[0]})
        return jsonify({"success": True, "report": key, "data": rows})
