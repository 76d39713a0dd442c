# /app/core/config.py

"""
Central configuration for the back-office API.

Values come from environment variables (optionally loaded from a local `.env`
file) so the same image can run against SQLite locally and PostgreSQL in
production. The password policy and reporting thresholds are read here too.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class PasswordPolicy(BaseModel):
    min_length: int = Field(default=8, ge=1)
    require_complexity: bool = Field(
        default=True,
        description="When true, a password needs at least one letter and one digit."
    )


class AppSettings(BaseModel):
    database_url: str = "sqlite:///./school_admin.db"
    secret_key: str = "change-me"
    log_level: str = "INFO"
    password_policy: PasswordPolicy = Field(default_factory=PasswordPolicy)
    best_class_min_sample: int = Field(default=10, ge=1)
    attendance_window_days: int = Field(default=30, ge=1)


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./school_admin.db"),
        secret_key=os.getenv("SECRET_KEY", "change-me"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        password_policy=PasswordPolicy(
            min_length=int(os.getenv("PASSWORD_MIN_LENGTH", "8")),
            require_complexity=_env_bool("PASSWORD_REQUIRE_COMPLEXITY", True),
        ),
        best_class_min_sample=int(os.getenv("BEST_CLASS_MIN_SAMPLE", "10")),
        attendance_window_days=int(os.getenv("ATTENDANCE_WINDOW_DAYS", "30")),
    )
