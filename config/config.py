"""Shared defaults; environment modules override what differs."""

import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "gym_db"),
    "connection_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", "10")),
}

# "mysql" or "memory"
STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql").lower()

# Every day boundary (daily check-in cap, "today" for start dates) uses this zone.
TIMEZONE = os.getenv("TIMEZONE", "UTC")

WEEKLY_CHECKIN_LIMIT = int(os.getenv("WEEKLY_CHECKIN_LIMIT", "5"))
CHECKIN_WINDOW_DAYS = int(os.getenv("CHECKIN_WINDOW_DAYS", "7"))

TX_ISOLATION = os.getenv("TX_ISOLATION", "READ COMMITTED")
STORE_CONFLICT_RETRIES = int(os.getenv("STORE_CONFLICT_RETRIES", "1"))

# Dispatch membership confirmations on a worker thread
NOTIFY_ASYNC = env_flag("NOTIFY_ASYNC", "1")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
