"""Settings shared by every environment module (read from the environment)."""

import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.getenv(name, default)))


def db_config_from_env(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "attendance_tracker"),
    }


TOKEN_TTL_DAYS = int(os.getenv("TOKEN_TTL_DAYS", "30"))
QR_TOKEN_TTL_SECONDS = int(os.getenv("QR_TOKEN_TTL_SECONDS", "300"))
STALE_SESSION_HOURS = int(os.getenv("STALE_SESSION_HOURS", "24"))
SESSION_SWEEP_SECONDS = int(os.getenv("SESSION_SWEEP_SECONDS", str(60 * 60)))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
