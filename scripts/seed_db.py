from __future__ import annotations

import argparse
import importlib
from pathlib import Path

from dotenv import load_dotenv

from camp_checkin.config import get_settings_module
from camp_checkin.core.enums import UserRole
from camp_checkin.database.bootstrap import apply_seed_sql, ensure_staff_user
from camp_checkin.database.connection import DBConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())

    parser = argparse.ArgumentParser(description="Load test attendees and create a staff account.")
    parser.add_argument("--email", default=settings.SEED_ADMIN_EMAIL)
    parser.add_argument("--password", default=settings.SEED_ADMIN_PASSWORD)
    parser.add_argument("--role", default=UserRole.ADMIN.value, choices=[r.value for r in UserRole])
    parser.add_argument("--skip-attendees", action="store_true", help="only create the staff account")
    args = parser.parse_args()

    db_config = dict(settings.DB_CONFIG)
    if not args.skip_attendees:
        seed_path = Path(__file__).resolve().parents[1] / "database" / "seed.sql"
        apply_seed_sql(db_config, seed_path=seed_path)
    ensure_staff_user(db_config, email=args.email, password=args.password, role=args.role)

    print(f"OK: seeded {DBConfig.from_dict(db_config).describe()} (staff {args.email} as {args.role})")


if __name__ == "__main__":
    main()
