from __future__ import annotations

from pathlib import Path

import mysql.connector
from mysql.connector import errorcode

from camp_checkin.database.bootstrap import iter_sql_statements
from camp_checkin.database.connection import DBConfig
from camp_checkin.database.mysql_base import is_duplicate_key

DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def test_splitter_ignores_semicolons_in_quotes_and_comments():
    sql = """
    -- comment; with semicolon
    INSERT INTO t VALUES ('a;b', "c;d");
    INSERT INTO t VALUES ('it\\'s');
    SELECT 1
    """

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b', \"c;d\")",
        "INSERT INTO t VALUES ('it\\'s')",
        "SELECT 1",
    ]


def test_schema_file_declares_unique_attendance_number():
    statements = list(iter_sql_statements((DATABASE_DIR / "schema.sql").read_text(encoding="utf-8")))

    attendees = next(s for s in statements if "CREATE TABLE IF NOT EXISTS attendees" in s)
    assert "uq_attendance_number" in attendees
    assert any("caja_log" in s for s in statements)


def test_db_config_defaults():
    cfg = DBConfig.from_dict({"host": "db", "password": "x"})

    assert cfg.port == 3306
    assert cfg.describe() == "root@db:3306/camp_checkin"


def test_duplicate_key_detection():
    err = mysql.connector.IntegrityError(
        msg="Duplicate entry '7' for key 'attendees.uq_attendance_number'",
        errno=errorcode.ER_DUP_ENTRY,
    )

    assert is_duplicate_key(err, "uq_attendance_number")
    assert not is_duplicate_key(err, "uq_other")
