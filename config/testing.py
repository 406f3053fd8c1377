import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "canteen_test_db"),
}

ESSL_CONFIG = {
    "base_url": "http://essl.test",
    "username": "test",
    "password": "test",
    "timeout_seconds": 5,
}

TIMEZONE = "Asia/Kolkata"

SYNC_ENABLED = False
SYNC_INTERVAL_MINUTES = 5

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
