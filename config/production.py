import os

from config import env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "gym"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "gym_checkin"),
    "retry_cooldown": float(os.getenv("DB_RETRY_COOLDOWN", "5")),
}

DEBUG = False

DURABLE_STORE_ENABLED = env_flag("DURABLE_STORE_ENABLED", "1")
SNAPSHOT_PATH = os.getenv("SNAPSHOT_PATH", "")
SEED_VOLATILE_STORE = env_flag("SEED_VOLATILE_STORE", "0")

EXPIRY_FAIL_OPEN = env_flag("EXPIRY_FAIL_OPEN", "1")

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
