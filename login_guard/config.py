"""Configuration helpers."""
from __future__ import annotations

import os


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    """Default configuration that can be overridden per environment."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", "sqlite:///login_guard.db"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Lockout policy: consecutive failures before lockout and how long it lasts.
    LOGIN_LOCKOUT_THRESHOLD = int(os.environ.get("LOGIN_LOCKOUT_THRESHOLD", 5))
    LOGIN_LOCKOUT_SECONDS = int(os.environ.get("LOGIN_LOCKOUT_SECONDS", 15 * 60))
    # Failures while already locked push the lockout end out again.
    LOGIN_LOCKOUT_EXTEND_WHILE_LOCKED = _env_flag(
        "LOGIN_LOCKOUT_EXTEND_WHILE_LOCKED", "true"
    )

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOGIN_LOCKOUT_THRESHOLD = 5
    LOGIN_LOCKOUT_SECONDS = 15 * 60
    LOGIN_LOCKOUT_EXTEND_WHILE_LOCKED = True
    LOG_LEVEL = "DEBUG"
