import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hostel_mess_test"),
}

APP_TIMEZONE = "Asia/Kolkata"

QR_TOKEN_SECRET = "test-qr-secret-0123456789abcdef0123"
QR_TOKEN_TTL_SECONDS = 30
QR_TOKEN_LEEWAY_SECONDS = 10
MAX_QR_TOKEN_TTL_SECONDS = 300

LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
