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

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret"

DB_CONFIG = db_config_from_env()

DEBUG = False
TESTING = True

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin-test")

# No background threads under pytest.
ENABLE_SESSION_SWEEPER = False
