"""Application factory for the login lockout service."""
from __future__ import annotations

import logging

from flask import Flask

from .config import BaseConfig
from .extensions import db, login_manager
from .auth import auth_bp
from .failed_login import LoginAttemptTracker


def create_app(
    config_object: type[BaseConfig] | None = None,
    tracker: LoginAttemptTracker | None = None,
) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_object or BaseConfig)

    logging.getLogger(__name__).setLevel(app.config["LOG_LEVEL"])

    # Initialize extensions.
    db.init_app(app)
    login_manager.init_app(app)

    # The tracker lives as long as the app. It is process-local, so every
    # worker process keeps its own table.
    if tracker is None:
        tracker = LoginAttemptTracker(
            threshold=app.config["LOGIN_LOCKOUT_THRESHOLD"],
            lockout_duration=app.config["LOGIN_LOCKOUT_SECONDS"],
            extend_while_locked=app.config["LOGIN_LOCKOUT_EXTEND_WHILE_LOCKED"],
        )
    app.failed_login_tracker = tracker

    # Register blueprints.
    app.register_blueprint(auth_bp, url_prefix="/auth")

    @app.cli.command("create-db")
    def create_db_command() -> None:
        """Create tables using SQLAlchemy metadata for quick testing."""
        with app.app_context():
            db.create_all()
            print("Database tables created.")

    return app
