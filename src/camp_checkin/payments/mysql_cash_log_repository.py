from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import CashLogEntry
from .repository import CashLogRepository


def _to_entry(r: dict) -> CashLogEntry:
    return CashLogEntry(
        entry_id=int(r["id"]),
        attendee_id=str(r["attendee_id"]),
        name=r.get("nombre") or "",
        previous_amount=float(r.get("monto_anterior") or 0),
        new_amount=float(r.get("monto_actual") or 0),
        reason=r.get("motivo") or "",
        modified_by=r.get("modificado_por") or "",
        logged_at=r["fecha"],
    )


class MySQLCashLogRepository(CashLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, entry: CashLogEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO caja_log(attendee_id, nombre, monto_anterior, monto_actual, motivo, modificado_por, fecha)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.attendee_id,
                    entry.name,
                    entry.previous_amount,
                    entry.new_amount,
                    entry.reason,
                    entry.modified_by,
                    entry.logged_at,
                ),
            )
            return int(cur.lastrowid)

    def recent(self, limit: int) -> Sequence[CashLogEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, attendee_id, nombre, monto_anterior, monto_actual, motivo, modificado_por, fecha
                FROM caja_log
                ORDER BY fecha DESC, id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_to_entry(r) for r in fetchall(cur)]
