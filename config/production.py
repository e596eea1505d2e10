import os

from .config import (  # noqa: F401
    LOG_LEVEL,
    QR_TOKEN_TTL_SECONDS,
    SESSION_SWEEP_SECONDS,
    STALE_SESSION_HOURS,
    TOKEN_TTL_DAYS,
    db_config_from_env,
    env_flag,
)

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
JWT_SECRET = os.getenv("JWT_SECRET", "please-set-JWT_SECRET")

DB_CONFIG = db_config_from_env()

DEBUG = False

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

ENABLE_SESSION_SWEEPER = env_flag("ENABLE_SESSION_SWEEPER", "1")
