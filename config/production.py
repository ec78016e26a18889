from .config import *  # noqa: F401,F403
from .config import env_flag

DEBUG = False
NOTIFY_ASYNC = env_flag("NOTIFY_ASYNC", "1")
