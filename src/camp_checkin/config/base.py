import os


def _flag(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "camp_checkin"),
}

# Check-in numbering: "serialized" (lock + unique index retry) or "unsynchronized" (legacy max+1)
ATTENDANCE_NUMBERING = os.getenv("ATTENDANCE_NUMBERING", "serialized")
ATTENDANCE_NUMBER_RETRIES = int(os.getenv("ATTENDANCE_NUMBER_RETRIES", "3"))

# Re-scanning a confirmed attendee: "renumber" or "keep_existing"
RECONFIRM_POLICY = os.getenv("RECONFIRM_POLICY", "renumber")

SCAN_MIN_INTERVAL_SECONDS = float(os.getenv("SCAN_MIN_INTERVAL_SECONDS", "2"))

DEFAULT_FEE = float(os.getenv("DEFAULT_FEE", "900"))
TSHIRT_LIMIT = int(os.getenv("TSHIRT_LIMIT", "100"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE") or None

# First admin account created by AUTO_SEED_DB / scripts/seed_db.py
SEED_ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@campamento.local")
SEED_ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "admin123")
