import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hostel_mess"),
}

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Kolkata")

# Identity (QR) tokens
QR_TOKEN_SECRET = os.getenv("QR_TOKEN_SECRET") or os.getenv("JWT_SECRET") or SECRET_KEY
QR_TOKEN_TTL_SECONDS = int(os.getenv("QR_TOKEN_TTL_SECONDS", "30"))
QR_TOKEN_LEEWAY_SECONDS = int(os.getenv("QR_TOKEN_LEEWAY_SECONDS", "10"))
MAX_QR_TOKEN_TTL_SECONDS = int(os.getenv("MAX_QR_TOKEN_TTL_SECONDS", "300"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
