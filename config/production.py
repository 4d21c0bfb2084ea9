import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hostel_mess"),
}

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Kolkata")

# No built-in default: the container refuses to start without a signing secret.
QR_TOKEN_SECRET = os.getenv("QR_TOKEN_SECRET") or os.getenv("JWT_SECRET") or os.getenv("SECRET_KEY") or ""
QR_TOKEN_TTL_SECONDS = int(os.getenv("QR_TOKEN_TTL_SECONDS", "30"))
QR_TOKEN_LEEWAY_SECONDS = int(os.getenv("QR_TOKEN_LEEWAY_SECONDS", "10"))
MAX_QR_TOKEN_TTL_SECONDS = int(os.getenv("MAX_QR_TOKEN_TTL_SECONDS", "300"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
