import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "gym_checkin_test"),
    "retry_cooldown": float(os.getenv("DB_RETRY_COOLDOWN", "5")),
}

DEBUG = False
TESTING = True

DURABLE_STORE_ENABLED = False
SNAPSHOT_PATH = ""
SEED_VOLATILE_STORE = True

EXPIRY_FAIL_OPEN = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
