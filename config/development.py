import os

from config import env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "gym_checkin"),
    "retry_cooldown": float(os.getenv("DB_RETRY_COOLDOWN", "5")),
}

DEBUG = True

# MySQL first, record store as fallback. Off: record store only.
DURABLE_STORE_ENABLED = env_flag("DURABLE_STORE_ENABLED", "1")
SNAPSHOT_PATH = os.getenv("SNAPSHOT_PATH", "instance/record_store.json")
SEED_VOLATILE_STORE = env_flag("SEED_VOLATILE_STORE", "1")

# Admit members whose expiry cannot be parsed (historical behaviour).
EXPIRY_FAIL_OPEN = env_flag("EXPIRY_FAIL_OPEN", "1")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
