import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_ledger_test"),
}

DEBUG = False
TESTING = True

TIMEZONE = "UTC"
CLOSING_HOUR = 22

PHOTO_DIR = os.getenv("PHOTO_DIR", "/tmp/attendance-ledger-photos")
PHOTO_BASE_URL = "/photos"

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
