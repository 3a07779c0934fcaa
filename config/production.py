import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_ledger"),
}

DEBUG = False

TIMEZONE = os.getenv("TIMEZONE", "Asia/Jakarta")
CLOSING_HOUR = int(os.getenv("CLOSING_HOUR", "22"))

PHOTO_DIR = os.getenv("PHOTO_DIR", "/var/lib/attendance-ledger/photos")
PHOTO_BASE_URL = os.getenv("PHOTO_BASE_URL", "/photos")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
