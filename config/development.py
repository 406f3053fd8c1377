import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "canteen_db"),
}

# Access-control (biometric) server web service
ESSL_CONFIG = {
    "base_url": os.getenv("ESSL_BIO_SERVER_URL", "http://localhost:85"),
    "username": os.getenv("ESSL_USERNAME", ""),
    "password": os.getenv("ESSL_PASSWORD", ""),
    "timeout_seconds": float(os.getenv("ESSL_TIMEOUT_SECONDS", "30")),
}

# Reference time zone for device timestamps and "today"
TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")

SYNC_ENABLED = bool(int(os.getenv("SYNC_ENABLED", "1")))
SYNC_INTERVAL_MINUTES = int(os.getenv("SYNC_INTERVAL_MINUTES", "5"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo plants/locations on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
