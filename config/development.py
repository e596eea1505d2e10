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

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
JWT_SECRET = os.getenv("JWT_SECRET", "dev-jwt-secret")

DB_CONFIG = db_config_from_env()

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
# Optional: also seed demo classes and the root admin on startup
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "12345")

ENABLE_SESSION_SWEEPER = env_flag("ENABLE_SESSION_SWEEPER", "1")
