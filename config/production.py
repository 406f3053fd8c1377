import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "canteen_db"),
}

ESSL_CONFIG = {
    "base_url": os.getenv("ESSL_BIO_SERVER_URL", ""),
    "username": os.getenv("ESSL_USERNAME", ""),
    "password": os.getenv("ESSL_PASSWORD", ""),
    "timeout_seconds": float(os.getenv("ESSL_TIMEOUT_SECONDS", "30")),
}

TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")

SYNC_ENABLED = bool(int(os.getenv("SYNC_ENABLED", "1")))
SYNC_INTERVAL_MINUTES = int(os.getenv("SYNC_INTERVAL_MINUTES", "5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
