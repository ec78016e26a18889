from .config import *  # noqa: F401,F403

DEBUG = False
TESTING = True

STORE_BACKEND = "memory"
TIMEZONE = "UTC"
NOTIFY_ASYNC = False
LOG_LEVEL = "WARNING"
AUTO_INIT_DB = False
AUTO_SEED_DB = False
