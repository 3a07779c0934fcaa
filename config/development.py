import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_ledger"),
}

DEBUG = True

# Local wall clock used for lateness and the absence cutoff (IANA name, empty = machine time)
TIMEZONE = os.getenv("TIMEZONE", "")
CLOSING_HOUR = int(os.getenv("CLOSING_HOUR", "22"))

PHOTO_DIR = os.getenv("PHOTO_DIR", "storage/photos")
PHOTO_BASE_URL = os.getenv("PHOTO_BASE_URL", "/photos")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
